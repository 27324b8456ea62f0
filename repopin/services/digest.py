"""
Reproducible content digests for checkouts.

The tree hash of a checkout is the digest of its checksum manifest:

    git ls-tree --full-tree -r --name-only HEAD | LANG=C sort \\
      | xargs -n 1 sha512sum | sha512sum

i.e. one "<hex digest>  <path>\\n" line per tracked file, in byte-wise sorted
path order, hashed with the same algorithm as the files. Anyone can
reproduce it with the shell pipeline above.
"""

import hashlib
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterator, List, Optional, Union

from ..exit_codes import FetchError
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "sha512"
DEFAULT_CHUNK_SIZE = 64 * 1024

PathLike = Union[str, Path]


def checksum(file_path: PathLike, algorithm: str = DEFAULT_ALGORITHM,
             chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """
    Digest a file without reading it into memory at once.

    Raises:
        OSError: If the file cannot be opened or read
        ValueError: If the algorithm is unknown or has no fixed digest size
    """
    h = hashlib.new(algorithm)
    if not h.digest_size:
        raise ValueError(f"Variable-length algorithm not supported: {algorithm}")
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            h.update(chunk)
    return h.digest()


def manifest_line(digest: bytes, relative_path: str) -> bytes:
    """Render one checksum-manifest line as bytes."""
    return f"{digest.hex()}  {relative_path}\n".encode("utf-8", "surrogateescape")


class ContentDigest:
    """
    Enumerates and digests the tracked files of a checkout.

    Example:
        engine = ContentDigest()
        print(engine.tree_hash("/tmp/project").hex())
    """

    def __init__(
        self,
        git_client: Optional[GitClient] = None,
        algorithm: str = DEFAULT_ALGORITHM,
        workers: int = 1,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        """
        Initialize ContentDigest.

        Args:
            git_client: GitClient instance (creates new if None)
            algorithm: Default hashlib algorithm name
            workers: Files digested concurrently (1 = sequential)
            chunk_size: Read size when streaming files
        """
        self.git = git_client or GitClient()
        self.algorithm = algorithm
        self.workers = max(1, workers)
        self.chunk_size = chunk_size

    def list_tree(self, repo_path: PathLike) -> List[str]:
        """
        List every file tracked at HEAD, sorted.

        Paths are relative to the repository root, in byte-wise (LANG=C)
        order of their raw names.

        Raises:
            FetchError: If `repo_path` is not a checkout
        """
        result = self.git.ls_tree(repo_path)
        if not result.ok:
            raise FetchError(
                f"Could not list files of {repo_path}",
                returncode=result.returncode,
                stderr=result.stderr,
            )
        names = (name for name in result.stdout.split("\0") if name)
        return sorted(names, key=lambda name: name.encode("utf-8", "surrogateescape"))

    def checksum(self, file_path: PathLike, algorithm: Optional[str] = None) -> bytes:
        return checksum(file_path, algorithm or self.algorithm, self.chunk_size)

    def _digests(self, files: List[str], base: PathLike, algorithm: str) -> Iterator[bytes]:
        paths = [os.path.join(base, name) for name in files]
        if self.workers == 1:
            for path in paths:
                yield self.checksum(path, algorithm)
            return

        # map() yields in submission order regardless of completion order
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            yield from executor.map(lambda p: self.checksum(p, algorithm), paths)

    def manifest(
        self,
        repo_path: PathLike,
        base: Optional[PathLike] = None,
        algorithm: Optional[str] = None,
    ) -> Iterator[bytes]:
        """
        Yield the checksum manifest of a checkout, one line per file.

        Args:
            repo_path: Checkout whose HEAD is enumerated
            base: Directory the listed paths are read from (defaults to repo_path)
            algorithm: hashlib algorithm name (defaults to the instance's)
        """
        algorithm = algorithm or self.algorithm
        base = base if base is not None else repo_path
        files = self.list_tree(repo_path)

        for name, digest in zip(files, self._digests(files, base, algorithm)):
            yield manifest_line(digest, name)

    def tree_hash(
        self,
        repo_path: PathLike,
        base: Optional[PathLike] = None,
        algorithm: Optional[str] = None,
    ) -> bytes:
        """
        Digest of the checkout's checksum manifest.

        Raises:
            FetchError: If the files cannot be listed
            OSError: If a listed file cannot be read
        """
        algorithm = algorithm or self.algorithm
        ctx = hashlib.new(algorithm)
        if not ctx.digest_size:
            raise ValueError(f"Variable-length algorithm not supported: {algorithm}")
        count = 0
        for line in self.manifest(repo_path, base, algorithm):
            ctx.update(line)
            count += 1

        logger.debug(f"Hashed {count} files under {base or repo_path} with {algorithm}")
        return ctx.digest()
