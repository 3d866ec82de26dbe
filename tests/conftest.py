"""
Shared test fixtures and configuration.

Nothing here touches the network: ``fake_mirror`` replaces the mirror
layer with the in-memory ``FakeMirror`` from ``tests.fakes``.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.fakes import FakeMirror


@pytest.fixture
def fake_mirror(monkeypatch) -> FakeMirror:
    """Route every mirror request to an in-memory table."""
    fake = FakeMirror()
    monkeypatch.setattr("ocget.core.services.mirror.fetch_text", fake.fetch_text)
    monkeypatch.setattr("ocget.core.services.mirror.download_file", fake.download_file)
    return fake


@pytest.fixture
def install_dir(tmp_path: Path) -> Path:
    """Return an (empty, existing) install directory."""
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path: Path, monkeypatch) -> None:
    """Keep the real settings file and install dir out of every test."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("OCGET_CONFIG", raising=False)
    monkeypatch.delenv("OCGET_INSTALL_DIR", raising=False)
    monkeypatch.delenv("OCGET_LOG_FILE", raising=False)
