"""Convert test_sensor duration-mode output into a snapshot document.

test_sensor <ms> prints a header followed by one row per pin:

    Pin | Frequency (kHz) | Status
    ----|-----------------|--------
      0 |          0.000 | inactive
      4 |         12.500 | ACTIVE

Only formatting happens here; the measurement itself is done by the external program.
"""

import json
import logging
import os
import re
import tempfile
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

# 0.0001 kHz = 0.1 Hz; same cut-off the sensor program uses for its status column
ACTIVE_THRESHOLD_KHZ = 0.0001

_ROW_RE = re.compile(r"^\s*(\d+)\s*\|\s*([-+]?[\d.]+)\s*(?:\|\s*(\w+))?\s*$")


def parse_sensor_table(text: str) -> List[Dict[str, Any]]:
    """Return [{"pin", "frequency", "active"}, ...] for every data row in text."""
    entries: List[Dict[str, Any]] = []
    for line in text.splitlines():
        m = _ROW_RE.match(line)
        if not m:
            continue
        try:
            frequency = float(m.group(2))
        except ValueError:
            logger.debug("skipping row with bad frequency: %r", line)
            continue
        status = m.group(3)
        if status is None:
            active = frequency > ACTIVE_THRESHOLD_KHZ
        else:
            active = status.upper() == "ACTIVE"
        entries.append({"pin": int(m.group(1)), "frequency": frequency, "active": active})
    return entries


def build_snapshot(entries: Iterable[Dict[str, Any]], timestamp_ms: Optional[int] = None) -> Dict[str, Any]:
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return {"timestamp": int(timestamp_ms), "pins": list(entries)}


def write_snapshot(path: Union[str, Path], snapshot: Dict[str, Any]) -> Path:
    """Write snapshot JSON atomically (temp file in the same directory, then os.replace)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".snapshot_", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(snapshot, f)
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise
    return path
