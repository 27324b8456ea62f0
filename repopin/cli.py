#!/usr/bin/env python3

import click

from repopin.config import configure_logging, load_config
from repopin.exit_codes import ConfigError
from repopin.commands.refs import tags_handler, branches_handler, match_handler
from repopin.commands.snapshot import (
    clone_handler,
    verify_handler,
    tree_hash_handler,
    snapshot_handler,
)
from repopin.commands.config import config_cmd


@click.group()
@click.version_option(package_name='repopin')
@click.option('--verbose', '-v', is_flag=True, help='Log every external command')
@click.pass_context
def cli(ctx, verbose):
    """repopin - Pinned, signature-checked snapshots of git repositories.

    Resolves a version constraint against the tags of a remote, shallow-clones
    the selected tag, verifies its signature and computes a reproducible tree
    hash of the checkout.
    """
    obj = ctx.ensure_object(dict)
    if ctx.invoked_subcommand != 'config' and 'config' not in obj:
        try:
            obj['config'] = load_config()
        except ConfigError as e:
            raise click.ClickException(str(e))
    configure_logging(obj.get('config', {}), verbose=verbose)


# Remote inspection
cli.add_command(tags_handler)
cli.add_command(branches_handler)
cli.add_command(match_handler)

# Checkout operations
cli.add_command(clone_handler)
cli.add_command(verify_handler)
cli.add_command(tree_hash_handler)
cli.add_command(snapshot_handler)

cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
