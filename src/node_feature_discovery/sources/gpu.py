"""
GPU feature source.

Scans the PCI bus for an NVIDIA display controller (vendor 0x10de, class
0x03xxxx covering VGA and 3D controllers). Reports ``present`` when one is
found; a host without such a device is a discovery failure.
"""

from typing import List, Optional

from ..logger import logger
from .base import FeatureSource, list_dir


NVIDIA_VENDOR_ID = 0x10DE
PCI_CLASS_DISPLAY = 0x030000
PCI_CLASS_MASK = 0xFF0000


class GpuSource(FeatureSource):

    def name(self) -> str:
        return "gpu"

    def discover(self) -> List[str]:
        devices_root = self.sys("bus", "pci", "devices")
        for device in list_dir(devices_root):
            vendor = self._read_hex(device / "vendor")
            pci_class = self._read_hex(device / "class")
            if vendor != NVIDIA_VENDOR_ID or pci_class is None:
                continue
            if pci_class & PCI_CLASS_MASK == PCI_CLASS_DISPLAY:
                logger.debug(f"Found NVIDIA display adapter at {device.name}")
                return ["present"]

        raise self.error(
            "failed to detect a gpu, please check if the system has a gpu "
            f"(no NVIDIA display adapter under {devices_root})"
        )

    def _read_hex(self, path) -> Optional[int]:
        value = self.read_sysfs(path)
        if not value:
            return None
        try:
            return int(value, 16)
        except ValueError:
            return None
