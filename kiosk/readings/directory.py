"""Directory source: <root>/<pin>/reading_<unixtime>* text files, newest file per pin wins."""

import logging
import math
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from kiosk.readings.base import PinReader
from kiosk.readings.models import PinReading, sort_and_dedupe

logger = logging.getLogger(__name__)

_PIN_DIR_RE = re.compile(r"[0-9]+")
_READING_FILE_RE = re.compile(r"reading_([0-9]+)")
_FREQUENCY_RE = re.compile(r"Frequency:\s*([\d.]+)\s*Hz")
_MEASUREMENT_TIME_RE = re.compile(r"Measurement time:\s*([\d.]+)ms")


def _to_float(value: str) -> float:
    try:
        f = float(value)
    except ValueError:
        return 0.0
    # "9" * 400 parses to inf, which JSON cannot carry
    return f if math.isfinite(f) else 0.0


def parse_reading_text(text: str) -> Dict[str, Union[float, str]]:
    """Parse reading file content into frequency_hz, timestamp and measurement_time_ms.

    Lines are matched by prefix; missing or malformed lines leave the defaults
    (0.0, "", "") in place.
    """
    out: Dict[str, Union[float, str]] = {
        "frequency_hz": 0.0,
        "timestamp": "",
        "measurement_time_ms": "",
    }
    for line in text.splitlines():
        if line.startswith("Frequency:"):
            m = _FREQUENCY_RE.match(line)
            if m:
                out["frequency_hz"] = _to_float(m.group(1))
        elif line.startswith("Timestamp:"):
            out["timestamp"] = line[len("Timestamp:"):].strip()
        elif line.startswith("Measurement time:"):
            m = _MEASUREMENT_TIME_RE.match(line)
            if m:
                out["measurement_time_ms"] = m.group(1)
    return out


def latest_reading_file(pin_dir: Path) -> Optional[Tuple[Path, int]]:
    """Return (path, unix_time) of the reading_<unixtime> file with the largest time, or None."""
    best: Optional[Tuple[Path, int]] = None
    for entry in pin_dir.iterdir():
        m = _READING_FILE_RE.match(entry.name)
        if not m or not entry.is_file():
            continue
        t = int(m.group(1))
        if best is None or t > best[1]:
            best = (entry, t)
    return best


class DirectoryPinReader(PinReader):
    """Read one directory per pin; the newest reading_<unixtime> file in each is the current reading."""

    def __init__(self, readings_dir: Union[str, Path]) -> None:
        self._root = Path(readings_dir)

    @property
    def readings_dir(self) -> Path:
        return self._root

    def describe(self) -> str:
        return f"directory {self._root}"

    def _read_pin(self, pin: int, pin_dir: Path) -> Optional[PinReading]:
        latest = latest_reading_file(pin_dir)
        if latest is None:
            return None
        path, unix_time = latest
        fields = parse_reading_text(path.read_text(encoding="utf-8"))
        return PinReading(
            pin=pin,
            unix_time_seconds=unix_time,
            timestamp_iso=str(fields["timestamp"]),
            frequency_hz=float(fields["frequency_hz"]),
            measurement_time_ms=str(fields["measurement_time_ms"]),
        )

    def read_pins(self) -> List[PinReading]:
        if not self._root.is_dir():
            return []
        try:
            entries = sorted(self._root.iterdir())
        except OSError as e:
            logger.warning("Error reading pin data from %s: %s", self._root, e)
            return []

        readings: List[PinReading] = []
        for entry in entries:
            if not _PIN_DIR_RE.fullmatch(entry.name):
                logger.debug("skipping non-pin entry %s", entry.name)
                continue
            pin = int(entry.name)
            try:
                if not entry.is_dir():
                    continue
                reading = self._read_pin(pin, entry)
            except (OSError, ValueError) as e:
                # UnicodeDecodeError is a ValueError
                logger.warning("Error reading pin %s: %s", pin, e)
                continue
            if reading is not None:
                readings.append(reading)
        # "7" and "07" name the same pin: keep the newer reading
        return sort_and_dedupe(readings, prefer=lambda new, kept: new.unix_time_seconds > kept.unix_time_seconds)
