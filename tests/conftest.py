import json
import logging
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path_factory):
    """Point every per-user directory into a temp home and run from a clean cwd."""
    env_root = tmp_path_factory.mktemp("env")
    home = env_root / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv("APPDATA", raising=False)
    for name in [
        "NARSIL_SETUP_LOG_LEVEL",
        "NARSIL_SETUP_LOG_FORMAT",
        "NARSIL_SETUP_WORKSPACE_DIR",
        "NARSIL_SETUP_CUSTOM_API_BASE",
    ]:
        monkeypatch.delenv(name, raising=False)
    cwd = env_root / "cwd"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    return home


@pytest.fixture
def home(isolated_env):
    return isolated_env


@pytest.fixture
def workspace(tmp_path):
    ws = tmp_path / "project"
    ws.mkdir()
    return ws


@pytest.fixture
def write_json():
    def _write(path: Path, data) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2))
        return path
    return _write


@pytest.fixture
def read_json():
    def _read(path: Path):
        return json.loads(path.read_text())
    return _read


@pytest.fixture(autouse=True)
def restore_root_logging():
    """configure_logging swaps root handlers; put the originals back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
