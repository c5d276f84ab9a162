"""Shared test fixtures for sqlgrid."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
from typer.testing import CliRunner

from sqlgrid.cli.main import app
from sqlgrid.core.config import ExportConfig
from sqlgrid.core.models import ResultBatch, ResultSet

_SQLGRID_ENV = (
    "SQLGRID_WRAP_MODE",
    "SQLGRID_MAX_COL_WIDTH",
    "SQLGRID_NULL_DISPLAY",
    "SQLGRID_BORDER_STYLE",
    "SQLGRID_EXPORT_FORMAT",
    "SQLGRID_PROFILE",
    "SQLGRID_SENTRY_DSN",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's own sqlgrid settings out of tests."""
    for name in _SQLGRID_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_runner(runner):
    """Invoke the CLI app with the given arguments."""

    def invoke(*args: str, **kwargs):
        return runner.invoke(app, list(args), **kwargs)

    return invoke


@pytest.fixture
def temp_dir():
    """Temporary directory for test files."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def people():
    """Two-row result set with a NULL name."""
    return ResultSet(
        columns=[
            {"key": "id", "ordinal_index": 0, "sql_type": "int"},
            {"key": "name", "ordinal_index": 1, "sql_type": "text"},
        ],
        rows=[{"id": 1, "name": "Alice"}, {"id": 2, "name": None}],
    )


@pytest.fixture
def people_batch(people):
    return ResultBatch(result_sets=[people])


@pytest.fixture
def config():
    return ExportConfig()
