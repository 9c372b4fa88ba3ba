"""PinReading: one normalized reading per pin, shared by both reader implementations."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional


@dataclass(frozen=True)
class PinReading:
    """Latest reading for one pin.

    Directory readings carry frequency_hz and measurement_time_ms; snapshot readings
    carry frequency_khz and active. Fields left as None are omitted from to_dict().
    """

    pin: int
    unix_time_seconds: int
    timestamp_iso: str
    frequency_hz: Optional[float] = None
    frequency_khz: Optional[float] = None
    active: Optional[bool] = None
    measurement_time_ms: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON shape served by /api/pins (camelCase keys)."""
        out: Dict[str, Any] = {
            "pin": self.pin,
            "unixTimeSeconds": self.unix_time_seconds,
            "timestampISO": self.timestamp_iso,
        }
        if self.frequency_hz is not None:
            out["frequencyHz"] = self.frequency_hz
        if self.frequency_khz is not None:
            out["frequencyKHz"] = self.frequency_khz
        if self.active is not None:
            out["active"] = self.active
        if self.measurement_time_ms is not None:
            out["measurementTimeMs"] = self.measurement_time_ms
        return out


def sort_and_dedupe(
    readings: Iterable[PinReading],
    prefer: Optional[Callable[[PinReading, PinReading], bool]] = None,
) -> List[PinReading]:
    """Keep at most one reading per pin and sort ascending by pin.

    prefer(new, kept) returns True when new should replace kept; default is last one wins.
    """
    by_pin: Dict[int, PinReading] = {}
    for r in readings:
        kept = by_pin.get(r.pin)
        if kept is None or prefer is None or prefer(r, kept):
            by_pin[r.pin] = r
    return [by_pin[p] for p in sorted(by_pin)]
