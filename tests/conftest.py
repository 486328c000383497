import sys
from pathlib import Path

# Ensure the project root is on sys.path so `matrix_tutor` and `backend` are importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from matrix_tutor import config


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path: Path) -> Path:
    """Point the settings store at a throw-away file for every test."""
    data_dir = tmp_path / "data"
    data_file = data_dir / "matrix_tutor.json"
    monkeypatch.setattr(config, "_DATA_DIR", str(data_dir))
    monkeypatch.setattr(config, "_DATA_FILE", str(data_file))
    return data_file
