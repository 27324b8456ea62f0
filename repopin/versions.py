"""
Version selection over remote tag names.

Only tags named "v<version>" take part. Ordering and constraint matching are
delegated to a VersionScheme:
- SemverScheme (default): semantic versioning with npm-style ranges
  ("^1.2.0", "~1.2", ">=1.0.0 <2.0.0") via semantic_version
- Pep440Scheme: Python versions and specifiers (">=1.0,<2") via packaging

Any object implementing VersionScheme can be passed instead.
"""

import logging
from abc import ABC, abstractmethod
from functools import cmp_to_key
from typing import Iterable, List, Optional

import semantic_version
from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from .exit_codes import ConfigError

logger = logging.getLogger(__name__)

VERSION_PREFIX = "v"


class VersionScheme(ABC):
    """Ordering and range matching for bare version strings (no "v" prefix)."""

    name = "abstract"

    @abstractmethod
    def is_valid(self, version: str) -> bool:
        """Whether the scheme can parse `version`."""

    @abstractmethod
    def compare(self, a: str, b: str) -> int:
        """Return -1, 0 or 1 as `a` has lower, equal or higher precedence than `b`."""

    @abstractmethod
    def satisfies(self, version: str, constraint: str) -> bool:
        """Whether `version` falls inside `constraint`."""

    def less_than(self, a: str, b: str) -> bool:
        return self.compare(a, b) < 0

    def greater_than(self, a: str, b: str) -> bool:
        return self.compare(a, b) > 0


class SemverScheme(VersionScheme):
    """Semantic Versioning 2.0.0 with npm range syntax."""

    name = "semver"

    def is_valid(self, version: str) -> bool:
        return semantic_version.validate(version)

    def compare(self, a: str, b: str) -> int:
        va = semantic_version.Version(a)
        vb = semantic_version.Version(b)
        if va < vb:
            return -1
        if va > vb:
            return 1
        return 0

    def satisfies(self, version: str, constraint: str) -> bool:
        return semantic_version.NpmSpec(constraint).match(semantic_version.Version(version))


class Pep440Scheme(VersionScheme):
    """PEP 440 versions and specifier sets."""

    name = "pep440"

    def is_valid(self, version: str) -> bool:
        try:
            Version(version)
        except InvalidVersion:
            return False
        return True

    def compare(self, a: str, b: str) -> int:
        va, vb = Version(a), Version(b)
        if va < vb:
            return -1
        if va > vb:
            return 1
        return 0

    def satisfies(self, version: str, constraint: str) -> bool:
        try:
            spec = SpecifierSet(constraint)
        except InvalidSpecifier as e:
            raise ValueError(f"Invalid version constraint: {constraint}") from e
        return spec.contains(Version(version))


SCHEMES = {
    SemverScheme.name: SemverScheme,
    Pep440Scheme.name: Pep440Scheme,
}


def get_scheme(name: Optional[str] = None) -> VersionScheme:
    """
    Look up a version scheme by name.

    Raises:
        ConfigError: If the name is unknown
    """
    name = (name or SemverScheme.name).lower()
    try:
        return SCHEMES[name]()
    except KeyError:
        raise ConfigError(
            f"Unknown version scheme '{name}' (expected one of: {', '.join(sorted(SCHEMES))})"
        ) from None


def strip_prefix(tag: str) -> str:
    """Remove the leading "v" from a version tag."""
    return tag[len(VERSION_PREFIX):] if tag.startswith(VERSION_PREFIX) else tag


def _descending_cmp(scheme: VersionScheme):
    # Anything not strictly lower sorts first, so equal versions spelled
    # differently may come out in either order.
    def cmp(a: str, b: str) -> int:
        if a == b:
            return 0
        return 1 if scheme.less_than(strip_prefix(a), strip_prefix(b)) else -1
    return cmp


def _ascending_cmp(scheme: VersionScheme):
    def cmp(a: str, b: str) -> int:
        if a == b:
            return 0
        return 1 if scheme.greater_than(strip_prefix(a), strip_prefix(b)) else -1
    return cmp


def sort_tags(
    tags: Iterable[str],
    descending: bool = True,
    scheme: Optional[VersionScheme] = None,
) -> List[str]:
    """
    Order version tags by precedence.

    Names not starting with "v", or whose remainder the scheme cannot
    parse, are dropped. Callers must not rely on the relative order of tags
    with equal precedence (for example "v1.0" and "v1.0.0" under PEP 440).

    Args:
        tags: Tag names
        descending: Highest version first (default); False for ascending
        scheme: Version scheme (SemverScheme if None)

    Returns:
        Sorted list of tag names
    """
    scheme = scheme or SemverScheme()

    filtered = []
    for tag in tags:
        if not tag.startswith(VERSION_PREFIX):
            continue
        if not scheme.is_valid(strip_prefix(tag)):
            logger.debug(f"Ignoring tag with unparseable version: {tag}")
            continue
        filtered.append(tag)

    cmp = _descending_cmp(scheme) if descending else _ascending_cmp(scheme)
    return sorted(filtered, key=cmp_to_key(cmp))


def match_tag(
    tags: Iterable[str],
    constraint: str,
    scheme: Optional[VersionScheme] = None,
) -> Optional[str]:
    """
    Pick the highest-precedence tag whose version satisfies `constraint`.

    Example:
        match_tag(["v1.0.0", "v1.2.0", "v2.0.0-rc"], "^1.0.0")  # -> "v1.2.0"

    Returns:
        The matching tag name, or None if no tag satisfies the constraint
    """
    scheme = scheme or SemverScheme()

    for tag in sort_tags(tags, descending=True, scheme=scheme):
        if scheme.satisfies(strip_prefix(tag), constraint):
            return tag

    return None
