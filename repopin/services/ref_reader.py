"""
Remote ref listing for repopin.

Reads tags and branches of a remote with a single `git ls-remote` call and
parses the output strictly: a line that does not look like
"<hash>\trefs/<kind>/<name>" is an error, never skipped.
"""

import logging
import re
from typing import Dict, Optional

from ..domain.refs import TagRecord
from ..exit_codes import NetworkError, ParseError
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)

TAG_LINE = re.compile(r'^([0-9a-f]{40,})\trefs/tags/(.+)$')
BRANCH_LINE = re.compile(r'^([0-9a-f]{40,})\trefs/heads/(.+)$')
DEREF_SUFFIX = '^{}'


class RemoteRefReader:
    """
    Lists the tags and branches of a remote repository.

    Example:
        reader = RemoteRefReader()
        tags = reader.list_tags("https://example.com/project.git")
        print(tags["v1.0.0"].target_commit)
    """

    def __init__(self, git_client: Optional[GitClient] = None):
        self.git = git_client or GitClient()

    def _ls_remote(self, remote: str, kind: str) -> list:
        result = self.git.ls_remote(remote, kind)
        if not result.ok:
            raise NetworkError(
                f"Could not list {kind} of {remote} (exit {result.returncode})",
                returncode=result.returncode,
                stderr=result.stderr,
            )

        lines = [line for line in result.stdout.strip().split('\n') if line]
        if not lines:
            raise NetworkError(f"No {kind} found at {remote}", returncode=result.returncode)
        return lines

    def list_tags(self, remote: str) -> Dict[str, TagRecord]:
        """
        List remote tags.

        The plain and dereferenced ("^{}") lines of an annotated tag are
        merged into one record.

        Args:
            remote: Remote URL or path

        Returns:
            Mapping of tag name to TagRecord

        Raises:
            NetworkError: If git fails or the remote has no tags
            ParseError: If a line is malformed
        """
        tags: Dict[str, TagRecord] = {}

        for line in self._ls_remote(remote, "tags"):
            match = TAG_LINE.match(line)
            if not match:
                raise ParseError(f"Unexpected ls-remote line: {line!r}", line=line)

            hash_, name = match.group(1), match.group(2)
            annotated = name.endswith(DEREF_SUFFIX)
            if annotated:
                name = name[:-len(DEREF_SUFFIX)]

            record = tags.setdefault(name, TagRecord(name=name))
            if annotated:
                record.annotated_hash = hash_
            else:
                record.commit_hash = hash_

        logger.debug(f"Found {len(tags)} tags at {remote}")
        return tags

    def list_branches(self, remote: str) -> Dict[str, str]:
        """
        List remote branches.

        Returns:
            Mapping of branch name to commit hash

        Raises:
            NetworkError: If git fails or the remote has no branches
            ParseError: If a line is malformed
        """
        branches: Dict[str, str] = {}

        for line in self._ls_remote(remote, "heads"):
            match = BRANCH_LINE.match(line)
            if not match:
                raise ParseError(f"Unexpected ls-remote line: {line!r}", line=line)
            branches[match.group(2)] = match.group(1)

        return branches
