"""
Unit test fixtures.

Isolates unit tests from environment variables (.env file)
to ensure tests verify actual default values.

License: MIT
"""

import os

import pytest

# Environment variables that affect ArchmapSettings defaults
CONFIG_ENV_VARS = [
    "ARCHMAP_CACHE_ENABLED",
    "ARCHMAP_CACHE_DIR",
    "ARCHMAP_IGNORE_VCS_DIRS",
    "ARCHMAP_LOG_LEVEL",
    "ARCHMAP_LOG_FORMAT",
]


@pytest.fixture(autouse=True)
def clean_env_for_unit_tests(monkeypatch, tmp_path):
    """
    Remove all config-related environment variables and change working
    directory to avoid loading .env file.
    """
    for var in CONFIG_ENV_VARS:
        monkeypatch.delenv(var, raising=False)

    original_dir = os.getcwd()
    os.chdir(tmp_path)
    yield
    os.chdir(original_dir)
