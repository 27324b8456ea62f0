"""
Ref and snapshot domain objects for repopin.

All of these are transient values created per call. Nothing here is cached
or persisted between calls.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from ..infra.process_runner import ProcessResult


@dataclass
class TagRecord:
    """
    A remote tag as reported by `git ls-remote --tags`.

    Attributes:
        name: Tag name without the refs/tags/ prefix
        commit_hash: Hash from the plain `refs/tags/<name>` line. For an
            annotated tag this is the tag object itself.
        annotated_hash: Hash from the dereferenced `refs/tags/<name>^{}`
            line, present only for annotated tags
    """

    name: str
    commit_hash: Optional[str] = None
    annotated_hash: Optional[str] = None

    @property
    def is_annotated(self) -> bool:
        return self.annotated_hash is not None

    @property
    def target_commit(self) -> Optional[str]:
        """The commit the tag ultimately points at."""
        return self.annotated_hash or self.commit_hash

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'commit': self.commit_hash,
            'annotated': self.annotated_hash,
        }


@dataclass
class CloneResult:
    """A fresh shallow checkout."""

    destination: Path
    head_commit: str
    ref: Optional[str] = None
    process: Optional[ProcessResult] = field(default=None, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'destination': str(self.destination),
            'head_commit': self.head_commit,
            'ref': self.ref,
        }


@dataclass
class SnapshotResult:
    """Outcome of selecting, fetching, verifying and digesting one tag."""

    remote: str
    constraint: str
    tag: TagRecord
    clone: CloneResult
    algorithm: str
    tree_hash: bytes
    verified: bool = False

    @property
    def tree_hash_hex(self) -> str:
        return self.tree_hash.hex()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'remote': self.remote,
            'constraint': self.constraint,
            'tag': self.tag.name,
            'commit': self.clone.head_commit,
            'destination': str(self.clone.destination),
            'verified': self.verified,
            'algorithm': self.algorithm,
            'tree_hash': self.tree_hash_hex,
        }
