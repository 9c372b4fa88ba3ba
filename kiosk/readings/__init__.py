"""Pin readings: PinReading model and the directory / snapshot readers."""

from typing import Any, Dict

from kiosk.readings.base import PinReader
from kiosk.readings.directory import DirectoryPinReader
from kiosk.readings.models import PinReading
from kiosk.readings.snapshot import SnapshotPinReader

SOURCES = ("directory", "snapshot")


def build_reader(readings_config: Dict[str, Any]) -> PinReader:
    """Pick the reader for readings_config["source"] (see get_readings_config). Unknown source -> ValueError."""
    source = readings_config.get("source")
    if source == "directory":
        return DirectoryPinReader(readings_config["readings_dir"])
    if source == "snapshot":
        return SnapshotPinReader(readings_config["snapshot_path"])
    raise ValueError(f"unknown readings source {source!r} (expected one of {', '.join(SOURCES)})")


__all__ = [
    "PinReader",
    "PinReading",
    "DirectoryPinReader",
    "SnapshotPinReader",
    "SOURCES",
    "build_reader",
]
