"""
Git client infrastructure for repopin.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic
"""

from pathlib import Path
from typing import Optional, Union
import logging

from .process_runner import IOMode, ProcessResult, ProcessRunner

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class GitClient:
    """
    Abstraction over git commands.

    Builds the argument lists for the handful of git commands repopin needs
    and hands them to a ProcessRunner. Remote URLs always follow "--" so a
    URL starting with "-" cannot be read as an option.

    Example:
        client = GitClient()
        result = client.ls_remote("https://example.com/repo.git", "tags")
        if result.ok:
            print(result.stdout)
    """

    def __init__(
        self,
        executable: str = "git",
        timeout: Optional[float] = 300,
        runner: Optional[ProcessRunner] = None,
    ):
        """
        Initialize GitClient.

        Args:
            executable: git binary to invoke
            timeout: Command timeout in seconds (default: 300)
            runner: ProcessRunner instance (creates new if None)
        """
        self.executable = executable
        self.timeout = timeout
        self.runner = runner or ProcessRunner(timeout=timeout)

    def _run(
        self,
        args,
        cwd: Optional[PathLike] = None,
        io_mode: IOMode = IOMode.CAPTURE,
    ) -> ProcessResult:
        return self.runner.run(
            self.executable, args, cwd=cwd, io_mode=io_mode, timeout=self.timeout
        )

    def ls_remote(self, remote: str, kind: str = "tags") -> ProcessResult:
        """
        List refs of a remote repository.

        Args:
            remote: Remote URL or path
            kind: "tags" or "heads"
        """
        if kind not in ("tags", "heads"):
            raise ValueError(f"Unknown ref kind: {kind}")
        return self._run(["ls-remote", f"--{kind}", "--", remote])

    def clone(
        self,
        remote: str,
        destination: PathLike,
        ref: Optional[str] = None,
        depth: int = 1,
    ) -> ProcessResult:
        """
        Shallow-clone a remote.

        Args:
            remote: Remote URL or path
            destination: Directory to clone into
            ref: Tag or branch to check out (default branch if None)
            depth: History depth to fetch
        """
        args = ["clone", "--depth", str(depth)]
        if ref:
            args += ["--branch", ref]
        args += ["--", remote, str(destination)]
        return self._run(args)

    def rev_parse_head(self, path: PathLike) -> ProcessResult:
        """Resolve the commit hash of the checked-out HEAD."""
        return self._run(["rev-parse", "--verify", "HEAD"], cwd=path)

    def ls_tree(self, path: PathLike) -> ProcessResult:
        """List every tracked file at HEAD, NUL-separated, relative to the repository root."""
        return self._run(
            ["ls-tree", "--full-tree", "-r", "-z", "--name-only", "HEAD"],
            cwd=path,
        )
