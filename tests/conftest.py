"""Shared pytest fixtures for posfmt tests."""

from __future__ import annotations

from pathlib import Path
import sys

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast tests of a single module")
    config.addinivalue_line("markers", "integration: tests crossing the CLI or HTTP boundary")


@pytest.fixture(autouse=True)
def _default_index_ceiling(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("POSFMT_MAX_ARGUMENT_INDEX", raising=False)
    yield


@pytest.fixture
def format_from_text():
    from posfmt.literals import parse_arguments
    from posfmt.formatter import format_template

    def _format(template: str, *raw_arguments: str) -> str:
        return format_template(template, parse_arguments(raw_arguments))

    return _format
