"""
Signature verification for fetched checkouts.

The check is a binary trust gate: exit status 0 from the verifier means the
signature is good, anything else (bad signature, unknown key, missing
binary, timeout) raises the same VerificationError.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..exit_codes import VerificationError
from ..infra.process_runner import IOMode, ProcessRunner

logger = logging.getLogger(__name__)


class TrustVerifier:
    """
    Runs `verify-tag` / `verify-commit` inside a checkout.

    Example:
        verifier = TrustVerifier()
        verifier.verify_repo("v1.2.0", None, "/tmp/project")
    """

    def __init__(
        self,
        runner: Optional[ProcessRunner] = None,
        executable: str = "git",
        io_mode: IOMode = IOMode.SILENT,
        timeout: Optional[float] = None,
    ):
        """
        Initialize TrustVerifier.

        Args:
            runner: ProcessRunner instance (creates new if None)
            executable: Program providing verify-tag/verify-commit
            io_mode: Default stream handling for the transcript
            timeout: Seconds before the verifier is killed
        """
        self.runner = runner or ProcessRunner()
        self.executable = executable
        self.io_mode = io_mode
        self.timeout = timeout

    def verify_repo(
        self,
        tag: Optional[str],
        commit: Optional[str],
        repo_path: Union[str, Path],
        io_mode: Optional[IOMode] = None,
    ) -> bool:
        """
        Verify the signature of `tag`, or of `commit` when no tag is given.

        Args:
            tag: Tag to verify; takes precedence over commit
            commit: Commit to verify when tag is empty
            repo_path: Checkout to run the verifier in
            io_mode: Stream handling for this call (defaults to the instance's)

        Returns:
            True when the signature verified

        Raises:
            VerificationError: On any non-zero exit or spawn failure
        """
        if tag:
            args = ["verify-tag", tag]
        elif commit:
            args = ["verify-commit", commit]
        else:
            raise ValueError("verify_repo requires a tag or a commit")

        result = self.runner.run(
            self.executable,
            args,
            cwd=repo_path,
            io_mode=io_mode or self.io_mode,
            timeout=self.timeout,
        )
        if result.returncode != 0:
            logger.warning(f"{' '.join(args)} failed in {repo_path} (exit {result.returncode})")
            raise VerificationError()

        logger.info(f"Signature verified for {tag or commit}")
        return True
