"""
Feature Sources - Detectors for host capabilities

Every source is registered by name in ``SOURCE_REGISTRY``. Names are used
verbatim as the namespace segment of the labels a source produces and as
the values accepted by ``--sources``.
"""

from typing import Callable, Dict, List, Sequence

from ..logger import logger
from .base import FeatureSource
from .cpuid import CpuidSource
from .fake import FakeSource
from .gpu import GpuSource
from .iommu import IommuSource
from .memory import MemorySource
from .network import NetworkSource
from .panic_fake import PanicFakeSource
from .pstate import PstateSource
from .rdt import RdtSource
from .selinux import SelinuxSource
from .storage import StorageSource


# Static name -> constructor table, in discovery order
SOURCE_REGISTRY: Dict[str, Callable[[], FeatureSource]] = {
    "cpuid": CpuidSource,
    "iommu": IommuSource,
    "memory": MemorySource,
    "network": NetworkSource,
    "pstate": PstateSource,
    "rdt": RdtSource,
    "selinux": SelinuxSource,
    "storage": StorageSource,
    "gpu": GpuSource,
    "fake": FakeSource,
    "panic_fake": PanicFakeSource,
}

# Sources enabled when none are configured (test sources excluded)
DEFAULT_SOURCES = (
    "cpuid",
    "iommu",
    "memory",
    "network",
    "pstate",
    "rdt",
    "selinux",
    "storage",
    "gpu",
)


def available_sources() -> List[str]:
    """Names of every registered source."""
    return list(SOURCE_REGISTRY)


def get_source(name: str) -> FeatureSource:
    """
    Instantiate a registered source.

    Raises:
        KeyError: if no source is registered under ``name``
    """
    return SOURCE_REGISTRY[name]()


def resolve_sources(names: Sequence[str]) -> List[FeatureSource]:
    """
    Instantiate the sources named in ``names``, in registry order.

    Unknown names are ignored with a warning. Blank names and duplicates
    are dropped.
    """
    wanted = {n for n in names if n}
    for unknown in sorted(n for n in wanted if n not in SOURCE_REGISTRY):
        logger.warning(f"Ignoring unknown feature source '{unknown}'")

    return [factory() for name, factory in SOURCE_REGISTRY.items() if name in wanted]


__all__ = [
    "FeatureSource",
    "SOURCE_REGISTRY",
    "DEFAULT_SOURCES",
    "available_sources",
    "get_source",
    "resolve_sources",
]
