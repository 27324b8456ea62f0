"""
Infrastructure layer for repopin.

Contains abstractions for external systems:
- ProcessRunner: supervised execution of external programs
- GitClient: Git command construction on top of a ProcessRunner

These provide clean interfaces that can be mocked for testing.
"""

from .process_runner import FAILED_TO_RUN, IOMode, ProcessResult, ProcessRunner
from .git_client import GitClient

__all__ = [
    'FAILED_TO_RUN',
    'IOMode',
    'ProcessResult',
    'ProcessRunner',
    'GitClient',
]
