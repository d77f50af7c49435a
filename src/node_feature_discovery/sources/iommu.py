"""IOMMU feature source: ``enabled`` when the kernel registered an IOMMU."""

from typing import List

from .base import FeatureSource, list_dir


class IommuSource(FeatureSource):

    def name(self) -> str:
        return "iommu"

    def discover(self) -> List[str]:
        if list_dir(self.sys("class", "iommu")):
            return ["enabled"]
        return []
