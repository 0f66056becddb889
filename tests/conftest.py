"""
Pytest configuration and fixtures for all tests.

Provides shared setup/teardown for logging and the tree-sitter registry.

License: MIT
"""

import pytest

from archmap_core.logging_service import LoggingService
from archmap_core.treesitter.parser.factory import ParserFactory


def pytest_configure(config):
    """Configure logging before any tests are collected."""
    if not LoggingService.is_configured():
        LoggingService.configure_logging(level="DEBUG", format="json")


@pytest.fixture(autouse=True)
def reset_logging_service():
    """Reset LoggingService state before each test."""
    LoggingService._configured = False
    LoggingService._log_level = "INFO"
    LoggingService._config = None
    LoggingService._loggers = {}

    LoggingService.configure_logging(level="DEBUG", format="json")

    yield

    LoggingService._configured = False
    LoggingService._loggers = {}


@pytest.fixture(autouse=True)
def reset_parser_factory():
    """Give every test a fresh parser registry."""
    ParserFactory.reset()
    yield
    ParserFactory.reset()
