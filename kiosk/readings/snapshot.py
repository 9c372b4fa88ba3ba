"""Snapshot source: a single JSON file {"timestamp": <ms>, "pins": [{"pin", "frequency", "active"}, ...]}."""

import json
import logging
import math
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, List, Optional, Union

from kiosk.readings.base import PinReader
from kiosk.readings.models import PinReading, sort_and_dedupe

logger = logging.getLogger(__name__)

_TRUE_STRINGS = ("true", "1", "yes", "on")


def format_ms_timestamp(timestamp_ms: int) -> str:
    """Millisecond epoch -> ISO-8601 UTC with milliseconds, e.g. 2023-11-14T22:13:20.000Z."""
    dt = datetime.fromtimestamp(timestamp_ms // 1000, tz=timezone.utc) + timedelta(milliseconds=timestamp_ms % 1000)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def coerce_pin(value: Any) -> Optional[int]:
    """Pin id as a non-negative int; None otherwise (bools, "abc", 1.5, -2 and "-2" are rejected)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        return int(value) if value.is_integer() and value >= 0 else None
    if isinstance(value, str):
        s = value.strip()
        if s.isascii() and s.isdigit():
            return int(s)
    return None


def coerce_frequency(value: Any) -> float:
    """Frequency as a finite float; 0.0 when missing, unparseable, NaN or infinite."""
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        f = float(value)
    except (TypeError, ValueError):
        return 0.0
    return f if math.isfinite(f) else 0.0


def coerce_active(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def _coerce_timestamp_ms(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        ts = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return ts if ts >= 0 else None


def normalize_snapshot(data: Any) -> List[PinReading]:
    """Turn a decoded snapshot document into sorted PinReadings. Malformed entries are dropped."""
    if not isinstance(data, dict):
        logger.warning("snapshot is not a JSON object (got %s)", type(data).__name__)
        return []
    pins = data.get("pins")
    if not isinstance(pins, list):
        logger.warning("snapshot has no pins list")
        return []

    ts_ms = _coerce_timestamp_ms(data.get("timestamp"))
    if ts_ms is None:
        logger.warning("snapshot timestamp missing or invalid: %r", data.get("timestamp"))
        unix_seconds, iso = 0, ""
    else:
        unix_seconds = ts_ms // 1000
        try:
            iso = format_ms_timestamp(ts_ms)
        except (OverflowError, OSError, ValueError):
            logger.warning("snapshot timestamp out of range: %s", ts_ms)
            iso = ""

    readings: List[PinReading] = []
    for entry in pins:
        if not isinstance(entry, dict):
            continue
        pin = coerce_pin(entry.get("pin"))
        if pin is None:
            logger.debug("skipping snapshot entry with invalid pin %r", entry.get("pin"))
            continue
        readings.append(
            PinReading(
                pin=pin,
                unix_time_seconds=unix_seconds,
                timestamp_iso=iso,
                frequency_khz=coerce_frequency(entry.get("frequency")),
                active=coerce_active(entry.get("active")),
            )
        )
    return sort_and_dedupe(readings)


class SnapshotPinReader(PinReader):
    """Read all pins from one JSON snapshot file written by the measurement process."""

    def __init__(self, snapshot_path: Union[str, Path]) -> None:
        self._path = Path(snapshot_path)

    @property
    def snapshot_path(self) -> Path:
        return self._path

    def describe(self) -> str:
        return f"snapshot {self._path}"

    def read_pins(self) -> List[PinReading]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("snapshot %s not found", self._path)
            return []
        except (OSError, ValueError) as e:
            logger.warning("Error reading snapshot %s: %s", self._path, e)
            return []
        try:
            data = json.loads(text)
        except ValueError as e:
            logger.warning("Invalid JSON in snapshot %s: %s", self._path, e)
            return []
        return normalize_snapshot(data)
