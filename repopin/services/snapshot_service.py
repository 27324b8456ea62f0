"""
Snapshot service for repopin.

Ties the pieces together: list remote tags, pick the best one for a version
constraint, shallow-clone it, verify its signature and compute the tree
hash of the checkout.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..config import load_config
from ..domain.refs import SnapshotResult
from ..exit_codes import DigestMismatchError, FetchError, NoMatchingTagError
from ..infra.git_client import GitClient
from ..infra.process_runner import IOMode, ProcessRunner
from ..versions import VersionScheme, get_scheme, match_tag
from .digest import ContentDigest
from .fetcher import RepositoryFetcher
from .ref_reader import RemoteRefReader
from .verifier import TrustVerifier

logger = logging.getLogger(__name__)


class SnapshotService:
    """
    Fetches a verified, digested snapshot of a remote at a version constraint.

    Example:
        service = SnapshotService()
        result = service.fetch_snapshot(
            "https://example.com/project.git", "^1.0.0", "/tmp/project"
        )
        print(result.tag.name, result.tree_hash_hex)
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        runner: Optional[ProcessRunner] = None,
        scheme: Optional[VersionScheme] = None,
    ):
        """
        Initialize SnapshotService.

        Args:
            config: Configuration dict (loads default if None)
            runner: ProcessRunner shared by git and the verifier
            scheme: Version scheme (from config if None)
        """
        self.config = config or load_config()
        git_config = self.config.get("git", {})
        verify_config = self.config.get("verify", {})
        digest_config = self.config.get("digest", {})

        timeout = git_config.get("timeout_seconds")
        self.runner = runner or ProcessRunner(timeout=timeout)
        self.git = GitClient(
            executable=git_config.get("executable", "git"),
            timeout=timeout,
            runner=self.runner,
        )
        self.scheme = scheme or get_scheme(self.config.get("versions", {}).get("scheme"))

        self.reader = RemoteRefReader(self.git)
        self.fetcher = RepositoryFetcher(self.git, depth=git_config.get("clone_depth", 1))
        self.verifier = TrustVerifier(
            self.runner,
            executable=verify_config.get("executable", "git"),
            io_mode=IOMode.parse(verify_config.get("io_mode", "silent")),
            timeout=timeout,
        )
        self.digest = ContentDigest(
            self.git,
            algorithm=digest_config.get("algorithm", "sha512"),
            workers=digest_config.get("workers", 1),
            chunk_size=digest_config.get("chunk_size", 65536),
        )

    def fetch_snapshot(
        self,
        remote: str,
        constraint: str,
        destination: Union[str, Path],
        verify: bool = True,
        expected_tree_hash: Optional[str] = None,
        io_mode: Optional[IOMode] = None,
    ) -> SnapshotResult:
        """
        Select, clone, verify and digest the best tag for `constraint`.

        Args:
            remote: Remote URL or path
            constraint: Version range, in the configured scheme's syntax
            destination: Empty or missing directory to clone into
            verify: Check the tag (or commit) signature
            expected_tree_hash: Hex digest the checkout must match
            io_mode: Stream handling for the verifier transcript

        Returns:
            SnapshotResult

        Raises:
            NetworkError, ParseError: While listing tags
            NoMatchingTagError: If no tag satisfies the constraint
            FetchError: If cloning fails or HEAD is not the tag's commit
            VerificationError: If the signature does not verify
            DigestMismatchError: If the tree hash differs from the expected one
        """
        tags = self.reader.list_tags(remote)
        name = match_tag(tags.keys(), constraint, scheme=self.scheme)
        if name is None:
            raise NoMatchingTagError(constraint, remote)

        record = tags[name]
        logger.info(f"Selected {name} for '{constraint}'")

        clone = self.fetcher.clone_repo(name, remote, destination)
        if record.target_commit and clone.head_commit != record.target_commit:
            raise FetchError(
                f"Checked out {clone.head_commit} but {name} points at {record.target_commit}"
            )

        verified = False
        if verify:
            # Lightweight tags carry no signature of their own; check the commit.
            if record.is_annotated:
                self.verifier.verify_repo(name, None, clone.destination, io_mode)
            else:
                self.verifier.verify_repo(None, clone.head_commit, clone.destination, io_mode)
            verified = True

        tree_hash = self.digest.tree_hash(clone.destination)
        if expected_tree_hash and tree_hash.hex() != expected_tree_hash.strip().lower():
            raise DigestMismatchError(expected_tree_hash, tree_hash.hex())

        return SnapshotResult(
            remote=remote,
            constraint=constraint,
            tag=record,
            clone=clone,
            algorithm=self.digest.algorithm,
            tree_hash=tree_hash,
            verified=verified,
        )
