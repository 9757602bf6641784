import sys
from pathlib import Path

import pytest

# Ensure 'src' directory is on sys.path for tests
PROJECT_ROOT = Path(__file__).resolve().parent
SRC_DIR = PROJECT_ROOT / 'src'
if SRC_DIR.exists() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point the settings file at an empty temp dir and drop env overrides."""
    from pyrdpconn import config

    for name in ("STRICT", "ENCODING", "LINE_ENDING", "MASTER_PWD", "DEBUG"):
        monkeypatch.delenv(f"PYRDPCONN_{name}", raising=False)
    path = tmp_path / "config" / "settings.ini"
    monkeypatch.setattr(config, "settings_file", lambda: path)
    return path
