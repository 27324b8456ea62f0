"""
Domain layer for repopin.

Plain value objects passed between the services:
- TagRecord: a remote tag and the hashes it resolves to
- CloneResult: a shallow checkout and its head commit
- SnapshotResult: a selected, fetched, verified and digested tag
"""

from .refs import TagRecord, CloneResult, SnapshotResult

__all__ = [
    'TagRecord',
    'CloneResult',
    'SnapshotResult',
]
