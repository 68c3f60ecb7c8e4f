"""Shared pytest fixtures for familiar tests."""
import sys
sys.dont_write_bytecode = True

from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402

from familiar.definitions import DefinitionStore  # noqa: E402
from familiar.engine import MigrationEngine  # noqa: E402

from .helpers import write_definitions  # noqa: E402


@pytest.fixture
def definitions_dir(tmp_path):
    """A definitions root populated with the sample views and functions."""
    return write_definitions(tmp_path / "db")


@pytest.fixture
def store(definitions_dir):
    return DefinitionStore(definitions_dir)


@pytest.fixture
def executor():
    """Spy executor recording every execute(up, down) call."""
    return MagicMock()


@pytest.fixture
def engine(store, executor):
    return MigrationEngine(store, executor)
