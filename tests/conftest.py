"""Pytest configuration and shared fixtures for Qanda tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from qanda.sources import StaticValueSource


@pytest.fixture(autouse=True)
def qanda_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point QANDA_HOME at a temporary directory for every test."""
    home = tmp_path / "qanda-home"
    monkeypatch.setenv("QANDA_HOME", str(home))
    return home


@pytest.fixture
def prompts_dir(tmp_path: Path) -> Path:
    """Create an empty prompts directory."""
    path = tmp_path / "prompts"
    path.mkdir()
    return path


@pytest.fixture
def write_prompts(prompts_dir: Path) -> Callable[[str, str], Path]:
    """Write a prompts file into the prompts directory."""

    def _write(filename: str, content: str) -> Path:
        path = prompts_dir / filename
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_source() -> Callable[..., StaticValueSource]:
    """Factory for scripted value sources."""

    def _make(**kwargs) -> StaticValueSource:
        return StaticValueSource(**kwargs)

    return _make
