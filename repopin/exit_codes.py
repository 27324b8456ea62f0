"""
Standard exit codes and error types for repopin.

Following Unix/POSIX conventions for command-line tools. Every error the
library raises derives from CommandError so the CLI can map it straight to
an exit code.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
NO_MATCH = 64            # No tag satisfies the version constraint
CONFIG_ERROR = 66        # Configuration file error
PERMISSION_ERROR = 67    # Insufficient permissions
NETWORK_ERROR = 68       # Remote unreachable or ref namespace empty
DATA_ERROR = 70          # Malformed remote output
FETCH_ERROR = 72         # Clone failed
VERIFICATION_ERROR = 73  # Signature could not be verified
DIGEST_MISMATCH = 74     # Tree hash differs from the expected value
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'IsADirectoryError': GENERAL_ERROR,
    'PermissionError': PERMISSION_ERROR,
    'ConnectionError': NETWORK_ERROR,
    'TimeoutError': NETWORK_ERROR,
    'ValueError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Base error carrying the exit code the CLI should terminate with.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class ParseError(CommandError):
    """Raised when a remote ref-list line does not match the expected format."""
    def __init__(self, message: str, line: str = ""):
        super().__init__(message, DATA_ERROR)
        self.line = line


class NetworkError(CommandError):
    """Raised when the remote cannot be listed or has no refs of the requested kind."""
    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message, NETWORK_ERROR)
        self.returncode = returncode
        self.stderr = stderr


class FetchError(CommandError):
    """
    Raised when a clone fails or a checkout cannot be read.

    The git exit status and stderr are kept verbatim for diagnosis.
    """
    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        if stderr and stderr.strip():
            message = f"{message}: {stderr.strip()}"
        super().__init__(message, FETCH_ERROR)
        self.returncode = returncode
        self.stderr = stderr


class VerificationError(CommandError):
    """
    Raised when a signature could not be positively confirmed.

    Bad signatures, missing keys and verifier crashes all produce the same
    message.
    """
    MESSAGE = "Could not verify signature"

    def __init__(self, message: str = MESSAGE):
        super().__init__(message, VERIFICATION_ERROR)


class NoMatchingTagError(CommandError):
    """Raised when no remote tag satisfies a version constraint."""
    def __init__(self, constraint: str, remote: str = ""):
        message = f"No tag satisfies '{constraint}'"
        if remote:
            message += f" at {remote}"
        super().__init__(message, NO_MATCH)
        self.constraint = constraint


class DigestMismatchError(CommandError):
    """Raised when a computed tree hash differs from the expected one."""
    def __init__(self, expected: str, actual: str):
        super().__init__(
            f"Tree hash mismatch: expected {expected}, got {actual}",
            DIGEST_MISMATCH,
        )
        self.expected = expected
        self.actual = actual
