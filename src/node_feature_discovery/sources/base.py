"""
Feature Source Base Class - Abstract interface for feature detectors.

A feature source probes one capability domain of the host and returns the
names of the features it found:

    class MySource(FeatureSource):
        def name(self) -> str:
            return "my"

        def discover(self) -> Iterable[str]:
            if not self.sys("class", "my").exists():
                raise DetectorError("no /sys/class/my", source=self.name())
            return ["present"]

Ordinary failures are reported by raising DetectorError. Anything else
escaping discover() is treated as a fault by the aggregator.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Optional, Set

from ..config import get_settings
from ..exceptions import DetectorError


class FeatureSource(ABC):
    """Abstract base class for all feature sources."""

    @abstractmethod
    def name(self) -> str:
        """Stable identifier, used verbatim in every label key of this source."""

    @abstractmethod
    def discover(self) -> Iterable[str]:
        """Return the detected features. Raise DetectorError on failure."""

    # -------------------------------------------------------------------------
    # Host filesystem helpers
    # -------------------------------------------------------------------------
    def sys(self, *parts: str) -> Path:
        """Path below the configured sysfs root."""
        return get_settings().paths.sys(*parts)

    def proc(self, *parts: str) -> Path:
        """Path below the configured procfs root."""
        return get_settings().paths.proc(*parts)

    def read_sysfs(self, path: Path) -> Optional[str]:
        """Stripped file content, or None if the file is missing or unreadable."""
        try:
            return path.read_text().strip()
        except OSError:
            return None

    def error(self, message: str) -> DetectorError:
        return DetectorError(message, source=self.name())

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def read_cpu_flags(cpuinfo: Path) -> Set[str]:
    """
    Collect the ``flags`` of every processor entry in /proc/cpuinfo.

    Raises:
        OSError: if cpuinfo cannot be read
    """
    flags: Set[str] = set()
    with open(cpuinfo) as f:
        for line in f:
            key, sep, value = line.partition(":")
            if sep and key.strip() in ("flags", "Features"):
                flags.update(value.split())
    return flags


def list_dir(path: Path) -> List[Path]:
    """Sorted directory entries, empty if the directory does not exist."""
    try:
        return sorted(path.iterdir())
    except OSError:
        return []
