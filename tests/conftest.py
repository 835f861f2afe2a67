import os
from pathlib import Path

import pytest

from runshell.config import get_config


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """Point config and data directories at tmp_path and drop the cached config."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("RUNSHELL_CONFIG_DIRECTORY", str(config_dir))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    get_config.reset()
    yield config_dir
    get_config.reset()


@pytest.fixture
def write_config(isolated_dirs):
    def _write(text: str) -> Path:
        isolated_dirs.mkdir(parents=True, exist_ok=True)
        path = isolated_dirs / "runshell.conf"
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def fake_bin(tmp_path, monkeypatch):
    """Return a helper that creates executables in a directory placed first on PATH."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")

    def _make(name: str, executable: bool = True) -> str:
        path = bin_dir / name
        path.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
        path.chmod(0o755 if executable else 0o644)
        return str(path)

    return _make
