"""
Shared pytest fixtures and configuration for principia tests.

This module provides:
- Settings cache reset so env overrides take effect per test
- structlog/contextvars cleanup for log assertions
- Auto-marking of unmarked tests as unit tests
"""

import logging
import sys
from pathlib import Path
from typing import Generator

import pytest
import structlog

# Ensure principia package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from principia.core.settings import get_settings


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark all tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def reset_settings() -> Generator[None, None, None]:
    """Drop the cached settings before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Restore structlog defaults, the root log level and bound context after each test."""
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()
