"""
Commands for inspecting remote refs: tags, branches, match.
"""

import click

from ..cli_utils import add_common_options, get_service, standard_command
from ..exit_codes import NoMatchingTagError
from ..versions import match_tag, sort_tags


@click.command('tags')
@click.argument('remote')
@click.option('--ascending', is_flag=True, help='Lowest version first')
@click.option('--all', 'show_all', is_flag=True,
              help='Include tags that are not v-prefixed versions (unsorted)')
@add_common_options('pretty')
@click.pass_context
@standard_command(columns=['name', 'commit', 'annotated'], title='Remote tags')
def tags_handler(ctx, remote, ascending, show_all, pretty):
    """List tags of REMOTE, highest version first.

    Examples:

    \b
        repopin tags https://github.com/user/project.git
        repopin tags ./local-mirror --ascending --pretty
    """
    service = get_service(ctx)
    records = service.reader.list_tags(remote)

    ordered = sort_tags(records.keys(), descending=not ascending, scheme=service.scheme)
    if show_all:
        listed = set(ordered)
        ordered += sorted(name for name in records if name not in listed)

    return [records[name].to_dict() for name in ordered]


@click.command('branches')
@click.argument('remote')
@add_common_options('pretty')
@click.pass_context
@standard_command(columns=['branch', 'commit'], title='Remote branches')
def branches_handler(ctx, remote, pretty):
    """List branches of REMOTE with their head commits."""
    service = get_service(ctx)
    branches = service.reader.list_branches(remote)
    return [{'branch': name, 'commit': commit} for name, commit in sorted(branches.items())]


@click.command('match')
@click.argument('remote')
@click.argument('constraint')
@add_common_options('pretty')
@click.pass_context
@standard_command(columns=['name', 'commit', 'annotated'], title='Selected tag')
def match_handler(ctx, remote, constraint, pretty):
    """Show the highest tag of REMOTE satisfying CONSTRAINT.

    Examples:

    \b
        repopin match https://github.com/user/project.git '^1.2.0'
        repopin match https://github.com/user/project.git '>=2.0.0 <3.0.0'
    """
    service = get_service(ctx)
    records = service.reader.list_tags(remote)
    name = match_tag(records.keys(), constraint, scheme=service.scheme)
    if name is None:
        raise NoMatchingTagError(constraint, remote)
    return records[name].to_dict()
