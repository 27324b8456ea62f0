"""
Process runner for external tools.

Every external command repopin executes (git, signature verification) goes
through ProcessRunner.run, so the rest of the package can be tested against
a fake runner without invoking real binaries.

Spawn failures and timeouts never raise: they come back as a ProcessResult
with returncode -1 and the reason in stderr, the same channel as a non-zero
exit. subprocess.run kills and reaps the child on timeout and when the caller
interrupts the call, so no child outlives a run() call.
"""

import logging
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Union

logger = logging.getLogger(__name__)

# Return code used for spawn errors and timeouts
FAILED_TO_RUN = -1


class IOMode(Enum):
    """How the child's output streams are handled."""
    CAPTURE = "capture"    # Pipe stdout/stderr into the result
    SILENT = "silent"      # Discard both streams
    INHERIT = "inherit"    # Stream straight to the console

    @classmethod
    def parse(cls, value: Union[str, "IOMode"]) -> "IOMode":
        if isinstance(value, cls):
            return value
        return cls(str(value).lower())


@dataclass
class ProcessResult:
    """Result of a supervised child process."""
    args: List[str] = field(default_factory=list)
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def to_dict(self):
        return {
            'args': self.args,
            'returncode': self.returncode,
            'stderr': self.stderr,
            'timed_out': self.timed_out,
        }


class ProcessRunner:
    """
    Runs a single external command to completion.

    Example:
        runner = ProcessRunner(timeout=60)
        result = runner.run("git", ["rev-parse", "HEAD"], cwd="/path/to/repo")
        if result.ok:
            print(result.stdout.strip())
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize ProcessRunner.

        Args:
            timeout: Default timeout in seconds (None waits indefinitely)
        """
        self.timeout = timeout

    def run(
        self,
        executable: str,
        args: Sequence[str],
        cwd: Optional[Union[str, Path]] = None,
        io_mode: IOMode = IOMode.CAPTURE,
        timeout: Optional[float] = None,
    ) -> ProcessResult:
        """
        Run a command and wait for it.

        Args:
            executable: Program to run (looked up on PATH)
            args: Arguments, passed without a shell
            cwd: Working directory
            io_mode: Stream handling for stdout/stderr
            timeout: Overrides the runner's default timeout

        Returns:
            ProcessResult; returncode is -1 if the process could not be
            started or timed out
        """
        cmd = [executable, *args]
        timeout = timeout if timeout is not None else self.timeout

        if io_mode is IOMode.CAPTURE:
            streams = {'stdout': subprocess.PIPE, 'stderr': subprocess.PIPE}
        elif io_mode is IOMode.SILENT:
            streams = {'stdout': subprocess.DEVNULL, 'stderr': subprocess.DEVNULL}
        else:
            streams = {'stdout': None, 'stderr': None}

        logger.debug(f"Running command in '{cwd or '.'}': {' '.join(cmd)}")
        try:
            completed = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd is not None else None,
                stdin=subprocess.DEVNULL,
                text=True,
                encoding='utf-8',
                errors='surrogateescape',
                timeout=timeout,
                check=False,
                **streams
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Command timed out after {timeout}s: {' '.join(cmd)}")
            return ProcessResult(
                args=cmd,
                returncode=FAILED_TO_RUN,
                stderr=f"timed out after {timeout}s",
                timed_out=True,
            )
        except OSError as e:
            logger.error(f"Could not start {executable}: {e}")
            return ProcessResult(args=cmd, returncode=FAILED_TO_RUN, stderr=str(e))

        return ProcessResult(
            args=cmd,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
