"""
Intel Resource Director Technology (RDT) feature source.

Monitoring and allocation capabilities are read from the kernel's decoded
CPUID flags in /proc/cpuinfo.
"""

from typing import Dict, List

from .base import FeatureSource, read_cpu_flags


RDT_FLAG_NAMES: Dict[str, str] = {
    "cqm": "RDTMON",             # cache/memory monitoring
    "cqm_occup_llc": "RDTCMT",   # LLC occupancy monitoring
    "cqm_mbm_total": "RDTMBM",   # memory bandwidth monitoring
    "cat_l3": "RDTL3CA",         # L3 cache allocation
    "cat_l2": "RDTL2CA",         # L2 cache allocation
    "mba": "RDTMBA",             # memory bandwidth allocation
}


class RdtSource(FeatureSource):

    def name(self) -> str:
        return "rdt"

    def discover(self) -> List[str]:
        cpuinfo = self.proc("cpuinfo")
        try:
            flags = read_cpu_flags(cpuinfo)
        except OSError as e:
            raise self.error(f"failed to read {cpuinfo}: {e}") from e

        return sorted({RDT_FLAG_NAMES[flag] for flag in flags if flag in RDT_FLAG_NAMES})
