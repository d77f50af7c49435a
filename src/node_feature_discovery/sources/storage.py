"""Storage feature source: ``nonrotationaldisk`` when an SSD/NVMe block device is present."""

from typing import List

from ..logger import logger
from .base import FeatureSource, list_dir


class StorageSource(FeatureSource):

    def name(self) -> str:
        return "storage"

    def discover(self) -> List[str]:
        block_root = self.sys("block")
        if not block_root.is_dir():
            raise self.error(f"no block devices found at {block_root}")

        for device in list_dir(block_root):
            if self.read_sysfs(device / "queue" / "rotational") == "0":
                logger.debug(f"Non-rotational block device: {device.name}")
                return ["nonrotationaldisk"]
        return []
