"""
repopin - Pinned, signature-checked snapshots of git repositories.

repopin picks the best tag of a remote for a version constraint, fetches it
with a shallow clone, verifies the tag (or commit) signature and computes a
tree hash that anyone can reproduce with standard checksum tools.

Quick Start:
    import repopin

    service = repopin.SnapshotService()
    result = service.fetch_snapshot(
        "https://github.com/user/project.git", "^1.0.0", "/tmp/project"
    )
    print(result.tag.name, result.tree_hash_hex)

    # Or piece by piece
    tags = repopin.RemoteRefReader().list_tags("https://github.com/user/project.git")
    best = repopin.match_tag(tags.keys(), "^1.0.0")

Domain Objects:
    TagRecord - A remote tag and the hashes it resolves to
    CloneResult - A shallow checkout and its head commit
    SnapshotResult - A selected, fetched, verified and digested tag

Services:
    RemoteRefReader - ls-remote tags/branches
    RepositoryFetcher - Shallow single-ref clones
    TrustVerifier - verify-tag / verify-commit
    ContentDigest - Sorted listing, streaming checksums, tree hashes
    SnapshotService - The whole flow
"""

__version__ = "0.3.0"

from .domain import TagRecord, CloneResult, SnapshotResult

from .services import (
    RemoteRefReader,
    RepositoryFetcher,
    TrustVerifier,
    ContentDigest,
    SnapshotService,
    checksum,
)

from .versions import (
    VersionScheme,
    SemverScheme,
    Pep440Scheme,
    get_scheme,
    sort_tags,
    match_tag,
)

from .infra import IOMode, ProcessResult, ProcessRunner, GitClient

from .exit_codes import (
    CommandError,
    ConfigError,
    ParseError,
    NetworkError,
    FetchError,
    VerificationError,
    NoMatchingTagError,
    DigestMismatchError,
)

from .config import load_config, save_config

__all__ = [
    "__version__",
    # Domain objects
    "TagRecord",
    "CloneResult",
    "SnapshotResult",
    # Services
    "RemoteRefReader",
    "RepositoryFetcher",
    "TrustVerifier",
    "ContentDigest",
    "SnapshotService",
    "checksum",
    # Version selection
    "VersionScheme",
    "SemverScheme",
    "Pep440Scheme",
    "get_scheme",
    "sort_tags",
    "match_tag",
    # Process execution
    "IOMode",
    "ProcessResult",
    "ProcessRunner",
    "GitClient",
    # Errors
    "CommandError",
    "ConfigError",
    "ParseError",
    "NetworkError",
    "FetchError",
    "VerificationError",
    "NoMatchingTagError",
    "DigestMismatchError",
    # Configuration
    "load_config",
    "save_config",
]
