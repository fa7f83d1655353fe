"""
Shared pytest fixtures for funcpipe tests.

Every test runs with the FUNCPIPE_* environment cleared, inside an empty
temporary working directory, and with a fresh config loader, so no local
funcpipe.json or shell setting leaks into results.
"""

from dataclasses import dataclass

import pytest

from funcpipe.config import reset_config_loader
from funcpipe.logging_config import reconfigure_trace_logger


@dataclass(frozen=True)
class Book:
    title: str
    author_first: str
    author_last: str
    pages: int


FUNCPIPE_ENV_VARS = (
    "FUNCPIPE_PROJECT_ROOT",
    "FUNCPIPE_STRICT_COMPARATORS",
    "FUNCPIPE_LOG_LEVEL",
    "FUNCPIPE_DEBUG_LOG",
    "FUNCPIPE_LOG_DIR",
)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Clear funcpipe environment and config state around each test."""
    for var in FUNCPIPE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_config_loader()
    yield
    for var in FUNCPIPE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_config_loader()
    reconfigure_trace_logger()


@pytest.fixture
def books():
    """The three books from the collector examples."""
    return [
        Book("Miss Peregrine's Home for Peculiar Children", "Ranson", "Riggs", 382),
        Book("Harry Potter and The Sorcerers Stone", "JK", "Rowling", 411),
        Book("The Cat in the Hat", "Dr", "Seuss", 45),
    ]


@pytest.fixture
def sample_data():
    """Sample dict rows for pipeline tests."""
    return [
        {"name": "Foo", "file": "foo.py", "count": 15},
        {"name": "Bar", "file": "bar.py", "count": 25},
        {"name": "Baz", "file": "test_baz.py", "count": 5},
        {"name": "Qux", "file": "qux.py", "count": 10},
    ]
