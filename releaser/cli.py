#!/usr/bin/env python3

import click

from releaser.commands.sync import sync_handler
from releaser.commands.index import index_handler, list_handler


@click.group()
@click.version_option(package_name='releaser')
def cli():
    """releaser - Versioned catalog of prebuilt release archives.

    Copies archives from the workspace cache into the data checkout,
    regenerates its index and publishes new versions as git tags.
    """
    pass


cli.add_command(sync_handler, name='sync')
cli.add_command(index_handler, name='index')
cli.add_command(list_handler, name='list')


def main():
    cli()

if __name__ == "__main__":
    main()
