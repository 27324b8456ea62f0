"""
Service layer for repopin.

- RemoteRefReader: tags and branches of a remote
- RepositoryFetcher: shallow single-ref clones
- TrustVerifier: tag/commit signature checks
- ContentDigest: sorted file listing, streaming checksums, tree hashes
- SnapshotService: the whole select -> clone -> verify -> digest flow
"""

from .ref_reader import RemoteRefReader
from .fetcher import RepositoryFetcher
from .verifier import TrustVerifier
from .digest import ContentDigest, checksum
from .snapshot_service import SnapshotService

__all__ = [
    'RemoteRefReader',
    'RepositoryFetcher',
    'TrustVerifier',
    'ContentDigest',
    'checksum',
    'SnapshotService',
]
