"""PinReader abstract interface for loading the current pin readings from disk.

Implementations: DirectoryPinReader (one directory per pin, reading_<unixtime> files)
and SnapshotPinReader (single JSON snapshot). The source is chosen at startup.
"""

from abc import ABC, abstractmethod
from typing import List

from kiosk.readings.models import PinReading


class PinReader(ABC):
    """Abstract source of pin readings.

    read_pins() is called once per /api/pins request and re-reads the filesystem each
    time. Data problems (missing files, malformed entries) never raise: they are logged
    where they happen and the affected pins are left out of the result.
    """

    @abstractmethod
    def read_pins(self) -> List[PinReading]:
        """Return current readings, at most one per pin, sorted ascending by pin."""
        ...

    @abstractmethod
    def describe(self) -> str:
        """Short human-readable description of the data source (for startup logs)."""
        ...
