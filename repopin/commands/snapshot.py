"""
Commands that touch a checkout: clone, verify, tree-hash, snapshot.
"""

import click

from ..cli_utils import add_common_options, get_service, standard_command
from ..config import check_hash_algorithm
from ..infra.process_runner import IOMode


def _transcript_mode(verbose_transcript):
    return IOMode.INHERIT if verbose_transcript else None


@click.command('clone')
@click.argument('remote')
@click.argument('destination', type=click.Path(file_okay=False))
@click.option('--ref', '-r', help='Tag or branch to check out (default branch if omitted)')
@add_common_options('pretty')
@click.pass_context
@standard_command(columns=['destination', 'ref', 'head_commit'], title='Clone')
def clone_handler(ctx, remote, destination, ref, pretty):
    """Shallow-clone REMOTE into DESTINATION.

    DESTINATION must be missing or empty; existing contents are never touched.

    Examples:

    \b
        repopin clone https://github.com/user/project.git ./project --ref v1.2.0
        repopin clone https://github.com/user/project.git ./project
    """
    fetcher = get_service(ctx).fetcher
    if ref:
        return fetcher.clone_repo(ref, remote, destination).to_dict()
    return fetcher.clone_files(remote, destination).to_dict()


@click.command('verify')
@click.argument('repo_path', type=click.Path(exists=True, file_okay=False))
@click.option('--tag', '-t', help='Verify the signature of this tag')
@click.option('--commit', '-c', help='Verify the signature of this commit (default: HEAD)')
@click.option('--verbose-transcript', is_flag=True,
              help='Stream the verifier output to the console')
@add_common_options('pretty')
@click.pass_context
@standard_command(columns=['target', 'verified'], title='Signature')
def verify_handler(ctx, repo_path, tag, commit, verbose_transcript, pretty):
    """Verify the tag or commit signature of the checkout at REPO_PATH.

    Exits with status 73 when the signature cannot be verified, whatever
    the reason.
    """
    if tag and commit:
        raise click.UsageError("Pass either --tag or --commit, not both")

    service = get_service(ctx)
    if not tag and not commit:
        commit = service.fetcher.get_head_commit(repo_path)

    service.verifier.verify_repo(tag, commit, repo_path, _transcript_mode(verbose_transcript))
    return {'target': tag or commit, 'verified': True}


@click.command('tree-hash')
@click.argument('repo_path', type=click.Path(exists=True, file_okay=False))
@click.option('--base', type=click.Path(exists=True, file_okay=False),
              help='Read file contents from this directory instead of REPO_PATH')
@click.option('--algorithm', '-a', help='hashlib algorithm (default from config, sha512)')
@click.option('--manifest', is_flag=True,
              help='Print the per-file checksum manifest instead of the tree hash')
@add_common_options('pretty')
@click.pass_context
@standard_command(columns=['path', 'algorithm', 'tree_hash'], title='Tree hash')
def tree_hash_handler(ctx, repo_path, base, algorithm, manifest, pretty):
    """Compute the reproducible tree hash of the checkout at REPO_PATH.

    The manifest printed by --manifest can be checked with `sha512sum -c`
    from the repository root; the tree hash is its digest.
    """
    digest = get_service(ctx).digest
    algorithm = check_hash_algorithm(algorithm or digest.algorithm)

    if manifest:
        out = click.get_binary_stream('stdout')
        for line in digest.manifest(repo_path, base, algorithm):
            out.write(line)
        out.flush()
        return None

    value = digest.tree_hash(repo_path, base, algorithm)
    return {'path': repo_path, 'algorithm': algorithm, 'tree_hash': value.hex()}


@click.command('snapshot')
@click.argument('remote')
@click.argument('constraint')
@click.argument('destination', type=click.Path(file_okay=False))
@click.option('--no-verify', is_flag=True, help='Skip the signature check')
@click.option('--expect', 'expected', help='Fail unless the tree hash equals this hex digest')
@click.option('--verbose-transcript', is_flag=True,
              help='Stream the verifier output to the console')
@add_common_options('pretty')
@click.pass_context
@standard_command(columns=['tag', 'commit', 'verified', 'tree_hash'], title='Snapshot')
def snapshot_handler(ctx, remote, constraint, destination, no_verify, expected,
                     verbose_transcript, pretty):
    """Fetch the best tag of REMOTE for CONSTRAINT into DESTINATION.

    Selects the highest version satisfying CONSTRAINT, shallow-clones it,
    verifies its signature and prints the tree hash.

    Examples:

    \b
        repopin snapshot https://github.com/user/project.git '^1.0.0' ./project
        repopin snapshot ./mirror '~2.1' ./out --expect 3f9a...
    """
    result = get_service(ctx).fetch_snapshot(
        remote,
        constraint,
        destination,
        verify=not no_verify,
        expected_tree_hash=expected,
        io_mode=_transcript_mode(verbose_transcript),
    )
    return result.to_dict()
