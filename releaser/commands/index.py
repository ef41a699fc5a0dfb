"""
Index and list commands for releaser.

Work on a data tree directly, without touching git.
"""

import json
from pathlib import Path

import click

from ..config import configure_logging, load_config
from ..render import render_catalog_table
from ..services.index_service import IndexOptions, IndexService
from .sync import build_pattern


def _data_root(config, data_dir):
    if data_dir is not None:
        return data_dir
    ws = config.get('workspace', {})
    return Path(ws.get('root') or '.').expanduser() / (ws.get('data_dir') or 'data')


def _index_service(config, log) -> IndexService:
    return IndexService(
        pattern=build_pattern(config),
        options=IndexOptions.from_config(config),
        log=log,
    )


@click.command('index')
@click.argument('data_dir', required=False,
                type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option('--stdout', 'to_stdout', is_flag=True, help='Print the document instead of writing it')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def index_handler(data_dir, to_stdout, debug):
    """Regenerate the index document of a data tree.

    DATA_DIR: Data tree to scan (default: <workspace>/data)

    \b
    Examples:
        releaser index
        releaser index ./data --stdout
    """
    config = load_config()
    log = configure_logging(config, debug=debug)
    data_root = _data_root(config, data_dir)
    if not data_root.is_dir():
        raise click.BadParameter(f"Data directory not found: {data_root}", param_hint='DATA_DIR')

    service = _index_service(config, log)
    if to_stdout:
        click.echo(service.render(service.scan(data_root)), nl=False)
        return

    index = service.update(data_root)
    click.echo(f"Indexed {len(index)} archives in {data_root / service.options.filename}", err=True)


@click.command('list')
@click.argument('data_dir', required=False,
                type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option('--json', 'output_json', is_flag=True, help='Output as JSONL')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def list_handler(data_dir, output_json, debug):
    """List the archives of a data tree grouped by release.

    DATA_DIR: Data tree to scan (default: <workspace>/data)
    """
    config = load_config()
    log = configure_logging(config, debug=debug)
    data_root = _data_root(config, data_dir)
    if not data_root.is_dir():
        raise click.BadParameter(f"Data directory not found: {data_root}", param_hint='DATA_DIR')

    index = _index_service(config, log).scan(data_root)

    if output_json:
        for record in index.records():
            print(json.dumps(record.to_dict()), flush=True)
    else:
        render_catalog_table(index)
