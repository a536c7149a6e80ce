"""Shared fixtures for dcgate tests."""

import textwrap
from pathlib import Path

import pytest


@pytest.fixture
def write_report(tmp_path: Path):
    """Write a report document below tmp_path and return its path."""

    def _write(content: str, name: str = "dependency-check-report.xml") -> Path:
        p = tmp_path / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(textwrap.dedent(content))
        return p

    return _write
