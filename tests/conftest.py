"""Shared fixtures."""

import pytest

from repopin.config import get_default_config
from tests.helpers import OLD_COMMIT, TAG_COMMIT, TAG_OBJECT


@pytest.fixture
def default_config():
    return get_default_config()


@pytest.fixture
def tags_listing():
    return "\n".join([
        f"{OLD_COMMIT}\trefs/tags/v1.0.0",
        f"{TAG_OBJECT}\trefs/tags/v1.2.0",
        f"{TAG_COMMIT}\trefs/tags/v1.2.0^{{}}",
        f"{'e' * 40}\trefs/tags/v2.0.0-rc",
        f"{'f' * 40}\trefs/tags/nightly",
    ]) + "\n"
