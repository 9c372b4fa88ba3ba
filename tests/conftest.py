"""Pytest fixtures for pin kiosk tests."""

import json
import sys
from pathlib import Path

import pytest
import yaml

# Ensure project root is in path for kiosk imports
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


@pytest.fixture
def project_root() -> Path:
    return _project_root()


@pytest.fixture
def config_path(project_root: Path) -> Path:
    """Path to config file. Prefers config/config.yaml, falls back to the packaged example."""
    cfg = project_root / "config" / "config.yaml"
    if cfg.exists():
        return cfg
    return project_root / "kiosk" / "config" / "config.yaml.example"


@pytest.fixture
def config(config_path: Path) -> dict:
    """Load config dict from YAML."""
    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def write_reading(root: Path, pin: str, unix_time: int, text: str, suffix: str = ".txt") -> Path:
    """Create <root>/<pin>/reading_<unix_time><suffix> with text."""
    pin_dir = root / pin
    pin_dir.mkdir(parents=True, exist_ok=True)
    path = pin_dir / f"reading_{unix_time}{suffix}"
    path.write_text(text, encoding="utf-8")
    return path


def reading_text(frequency_hz: float, timestamp: str = "2024-01-01 12:00:00", measurement_ms: str = "100.0") -> str:
    return (
        f"Frequency: {frequency_hz} Hz\n"
        f"Timestamp: {timestamp}\n"
        f"Measurement time: {measurement_ms}ms\n"
    )


@pytest.fixture
def readings_dir(tmp_path: Path) -> Path:
    """Directory tree with pins 2, 10 and 4 (created out of order) plus noise entries."""
    root = tmp_path / "pin_readings"
    write_reading(root, "10", 1700000100, reading_text(440.0))
    write_reading(root, "2", 1700000000, reading_text(12.5, measurement_ms="250"))
    write_reading(root, "4", 1700000050, reading_text(0.0))
    (root / "notes").mkdir()
    (root / "README").write_text("not a pin", encoding="utf-8")
    return root


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    path = tmp_path / "snapshot.json"
    path.write_text(
        json.dumps(
            {
                "timestamp": 1700000000000,
                "pins": [
                    {"pin": "17", "frequency": "3.2", "active": True},
                    {"pin": 4, "frequency": 0, "active": False},
                ],
            }
        ),
        encoding="utf-8",
    )
    return path
