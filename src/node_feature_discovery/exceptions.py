"""
Node Feature Discovery Exception Hierarchy

Structured exception types for the discovery pipeline.
All exceptions inherit from NFDError for easy catching.

Usage:
    from node_feature_discovery.exceptions import DetectorError, ControlPlaneError

    try:
        advertise_feature_labels(helper, labels)
    except ControlPlaneError as e:
        logger.error(f"Publishing failed: {e}")
"""

from typing import Optional


class NFDError(Exception):
    """Base exception for all Node Feature Discovery errors."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(NFDError):
    """Invalid configuration value (whitelist regex, duration, env var)."""
    pass


# =============================================================================
# Detector Errors
# =============================================================================

class DetectorError(NFDError):
    """A feature source could not discover its features.

    Sources raise this to report an ordinary failure. The aggregator
    records it and drops the source's contribution for the cycle.
    """

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class DetectorFaultError(DetectorError):
    """A feature source terminated abnormally.

    Any exception other than DetectorError escaping ``discover()`` is
    converted into this error. The message is the text of the original
    fault, which is chained as ``__cause__``.
    """
    pass


# =============================================================================
# Control Plane Errors
# =============================================================================

class ControlPlaneError(NFDError):
    """Error talking to the Kubernetes API."""
    pass


class ClientAcquisitionError(ControlPlaneError):
    """Failed to build an API client (no in-cluster or kubeconfig credentials)."""
    pass


class NodeFetchError(ControlPlaneError):
    """Failed to read the node object this agent runs on."""
    pass


class NodePersistError(ControlPlaneError):
    """Failed to write the updated node object back."""
    pass
