"""
Node Feature Discovery - Publish host capabilities as Kubernetes node labels

Provides:
- Feature sources (CPUID, IOMMU, NUMA, SR-IOV, P-State, RDT, SELinux,
  storage, GPU) with per-source fault isolation
- Aggregation into namespaced, whitelist-filtered labels
- Reconciliation of those labels with the node object
- A fixed-interval discovery loop
"""

from ._version import __version__
from .aggregator import build_labels, get_feature_labels
from .config import DiscoveryConfig, build_discovery_config, get_settings
from .labels import LABEL_PREFIX, LABEL_VALUE, LabelWhitelist, Labels, make_label_key
from .orchestrator import CycleResult, DiscoveryAgent, configure_parameters
from .synchronizer import advertise_feature_labels, update_node_with_feature_labels

__all__ = [
    "__version__",
    # Labels
    "LABEL_PREFIX",
    "LABEL_VALUE",
    "Labels",
    "LabelWhitelist",
    "make_label_key",
    # Pipeline
    "build_labels",
    "get_feature_labels",
    "advertise_feature_labels",
    "update_node_with_feature_labels",
    "configure_parameters",
    "DiscoveryAgent",
    "CycleResult",
    # Configuration
    "DiscoveryConfig",
    "build_discovery_config",
    "get_settings",
]
