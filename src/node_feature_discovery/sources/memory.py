"""Memory feature source: ``numa`` on hosts with more than one NUMA node."""

import re
from typing import List

from .base import FeatureSource, list_dir

_NODE_DIR = re.compile(r"node\d+$")


class MemorySource(FeatureSource):

    def name(self) -> str:
        return "memory"

    def discover(self) -> List[str]:
        node_root = self.sys("devices", "system", "node")
        if not node_root.is_dir():
            raise self.error(f"NUMA topology not exposed at {node_root}")

        nodes = [p for p in list_dir(node_root) if _NODE_DIR.match(p.name)]
        if len(nodes) > 1:
            return ["numa"]
        return []
