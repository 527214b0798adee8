"""
Pytest Configuration

Shared fixtures for the event-function scraper suite: synthetic
documentation roots written to ``tmp_path`` and a fresh catalog per test.

Usage:
    pytest tests/
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import pytest

from DocsToApi.EventFunctions.model import ApiCatalog
from tests.helpers.reference_pages import ReferenceTree


@pytest.fixture
def catalog() -> ApiCatalog:
    return ApiCatalog()


@pytest.fixture
def reference_tree(tmp_path: Path) -> Callable[[str], ReferenceTree]:
    """Return a factory creating one documentation root per release label."""

    def factory(label: str) -> ReferenceTree:
        return ReferenceTree(tmp_path / "docs" / label)

    return factory


@pytest.fixture(autouse=True)
def _reset_package_logging():
    yield
    root = logging.getLogger("DocsToApi")
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.NOTSET)
