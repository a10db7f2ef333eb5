"""Shared pytest fixtures for darkbear tests."""

import os

import pytest

from darkbear.core.config import set_config_path

# Wide consoles so rich tables are not truncated in captured CLI output.
os.environ.setdefault("COLUMNS", "200")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path):
    """Each test gets its own config.json (and data files next to it). Resets the cache after."""
    config_path = tmp_path / "config.json"
    set_config_path(str(config_path))
    yield config_path
    set_config_path(None)
