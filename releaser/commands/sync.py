"""
Sync command for releaser.

Publishes new archives from the workspace cache to the release branch.
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click

from ..config import configure_logging, load_config
from ..domain.archive import ArchivePattern
from ..infra.git_client import GitClient
from ..render import render_sync_summary
from ..services.index_service import IndexOptions
from ..services.sync_service import SyncOptions, SyncService


def build_pattern(config) -> ArchivePattern:
    """Archive naming convention from the ``archives`` config section."""
    return ArchivePattern(config.get('archives', {}).get('name') or None)


@click.command('sync')
@click.option('--workspace', '-w', type=click.Path(file_okay=False, path_type=Path),
              help='Workspace root holding data/ and .cache/ (default: config or cwd)')
@click.option('--dry-run', is_flag=True, help='Commit and tag locally, skip pushes')
@click.option('--ci/--no-ci', default=None,
              help='Configure the bot identity before committing (default: CI env)')
@click.option('--branch', help='Release branch (default: releases)')
@click.option('--remote', help='Remote to push to (default: origin)')
@click.option('--no-force', is_flag=True, help='Do not force-push the release branch')
@click.option('--json', 'output_json', is_flag=True, help='Output the outcome as JSON')
@click.option('--pretty', is_flag=True, help='Display a rich summary table')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def sync_handler(
    workspace: Optional[Path],
    dry_run: bool,
    ci: Optional[bool],
    branch: Optional[str],
    remote: Optional[str],
    no_force: bool,
    output_json: bool,
    pretty: bool,
    debug: bool,
):
    """
    Copy new archives into the data checkout and publish them.

    Runs the full release: prepare the data checkout, copy archives from
    the cache, regenerate the index, commit, push, tag new versions and
    push the tags. Re-running with nothing new changes nothing.

    \b
    Examples:
        # Preview a release (no pushes)
        releaser sync --dry-run
        # Release from a CI job
        releaser sync --ci --workspace "$GITHUB_WORKSPACE"
    """
    config = load_config()
    log = configure_logging(config, debug=debug)

    options = SyncOptions.from_config(config)
    if workspace is not None:
        options.workspace = workspace
    if dry_run:
        options.dry_run = True
    if ci is not None:
        options.ci = ci
    if branch:
        options.branch = branch
    if remote:
        options.remote = remote
    if no_force:
        options.force_push = False

    timeout = config.get('git', {}).get('timeout_seconds') or None
    service = SyncService(
        options,
        git_client=GitClient(timeout=timeout),
        pattern=build_pattern(config),
        index_options=IndexOptions.from_config(config),
        log=log,
    )
    outcome = service.run()

    if output_json:
        print(json.dumps(outcome.to_dict()), flush=True)
    elif pretty:
        render_sync_summary(outcome)

    if not outcome.success:
        if not output_json:
            click.echo(f"Error: {outcome.error}", err=True)
        sys.exit(outcome.exit_code)
