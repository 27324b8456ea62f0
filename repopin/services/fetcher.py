"""
Shallow repository fetching for repopin.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..domain.refs import CloneResult
from ..exit_codes import FetchError
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)


class RepositoryFetcher:
    """
    Clones a single ref of a remote with truncated history.

    Example:
        fetcher = RepositoryFetcher()
        result = fetcher.clone_repo("v1.2.0", "https://example.com/p.git", "/tmp/p")
        print(result.head_commit)
    """

    def __init__(self, git_client: Optional[GitClient] = None, depth: int = 1):
        """
        Initialize RepositoryFetcher.

        Args:
            git_client: GitClient instance (creates new if None)
            depth: Number of commits of history to fetch
        """
        self.git = git_client or GitClient()
        self.depth = depth

    @staticmethod
    def _check_destination(destination: Path) -> None:
        # Refuse before git touches anything, so existing contents stay intact.
        if destination.exists():
            if not destination.is_dir():
                raise FetchError(f"Destination {destination} exists and is not a directory")
            if any(destination.iterdir()):
                raise FetchError(f"Destination {destination} already exists and is not empty")

    def _clone(self, remote: str, destination: Union[str, Path], ref: Optional[str]) -> CloneResult:
        destination = Path(destination)
        self._check_destination(destination)

        logger.info(f"Cloning {remote}{f' at {ref}' if ref else ''} into {destination}")
        result = self.git.clone(remote, destination, ref=ref, depth=self.depth)
        if not result.ok:
            raise FetchError(
                f"git clone of {remote} failed with exit code {result.returncode}",
                returncode=result.returncode,
                stderr=result.stderr,
            )

        head = self.get_head_commit(destination)
        return CloneResult(destination=destination, head_commit=head, ref=ref, process=result)

    def clone_repo(self, tag: str, remote: str, destination: Union[str, Path]) -> CloneResult:
        """
        Clone `remote` at `tag` (or branch) into `destination`.

        Raises:
            FetchError: If the destination is non-empty, the ref is missing,
                or git fails for any other reason
        """
        if not tag:
            raise ValueError("clone_repo requires a tag or branch name")
        return self._clone(remote, destination, tag)

    def clone_files(self, remote: str, destination: Union[str, Path]) -> CloneResult:
        """Clone the default branch of `remote` into `destination`."""
        return self._clone(remote, destination, None)

    def get_head_commit(self, repo_path: Union[str, Path]) -> str:
        """
        Read the commit hash checked out at `repo_path`.

        Raises:
            FetchError: If the path is not a repository checkout
        """
        result = self.git.rev_parse_head(repo_path)
        head = result.stdout.strip()
        if not result.ok or not head:
            raise FetchError(
                f"{repo_path} is not a valid repository checkout",
                returncode=result.returncode,
                stderr=result.stderr,
            )
        return head
