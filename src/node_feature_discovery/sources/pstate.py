"""Intel P-State feature source: ``turbo`` when turbo boost is enabled."""

from typing import List

from .base import FeatureSource


class PstateSource(FeatureSource):

    def name(self) -> str:
        return "pstate"

    def discover(self) -> List[str]:
        no_turbo_path = self.sys("devices", "system", "cpu", "intel_pstate", "no_turbo")
        no_turbo = self.read_sysfs(no_turbo_path)
        if no_turbo is None:
            raise self.error(f"intel_pstate driver not enabled ({no_turbo_path} missing)")

        if no_turbo == "0":
            return ["turbo"]
        return []
