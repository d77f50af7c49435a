"""
Network feature source.

Looks for SR-IOV capable network interfaces:
- ``sriov``: some interface supports virtual functions
- ``sriov-configured``: some interface has virtual functions enabled
"""

from typing import List, Set

from ..logger import logger
from .base import FeatureSource, list_dir


class NetworkSource(FeatureSource):

    def name(self) -> str:
        return "network"

    def discover(self) -> List[str]:
        net_root = self.sys("class", "net")
        if not net_root.is_dir():
            raise self.error(f"no network interfaces found at {net_root}")

        features: Set[str] = set()
        for iface in list_dir(net_root):
            total = self._read_int(iface / "device" / "sriov_totalvfs")
            if not total:
                continue
            logger.debug(f"SR-IOV capable interface {iface.name}: {total} VFs")
            features.add("sriov")
            if self._read_int(iface / "device" / "sriov_numvfs"):
                features.add("sriov-configured")

        return sorted(features)

    def _read_int(self, path) -> int:
        value = self.read_sysfs(path)
        try:
            return int(value) if value else 0
        except ValueError:
            return 0
