"""SELinux feature source: ``enabled`` when SELinux is in enforcing mode."""

from typing import List

from .base import FeatureSource


class SelinuxSource(FeatureSource):

    def name(self) -> str:
        return "selinux"

    def discover(self) -> List[str]:
        enforce = self.read_sysfs(self.sys("fs", "selinux", "enforce"))
        if enforce == "1":
            return ["enabled"]
        return []
