"""
Centralized Configuration for Node Feature Discovery

Single source of truth for the discovery loop settings, host paths and
Kubernetes identity. Values are loaded from environment variables into
dataclasses; the CLI overrides them and freezes the result into a
DiscoveryConfig that is handed to the orchestrator.

Usage:
    from node_feature_discovery.config import get_settings

    sysfs = get_settings().paths.sysfs_root
"""

import math
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .exceptions import ConfigurationError


DEFAULT_SLEEP_INTERVAL = "60s"

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: str) -> float:
    """
    Parse a Go-style duration ("30s", "1m30s", "500ms", "2h") into seconds.

    A bare number is taken as seconds.

    Raises:
        ConfigurationError: if the string is not a valid non-negative duration
    """
    text = str(value).strip()
    if not text:
        raise ConfigurationError("empty duration")

    try:
        seconds = float(text)
    except ValueError:
        pos = 0
        seconds = 0.0
        while pos < len(text):
            match = _DURATION_PART.match(text, pos)
            if not match:
                raise ConfigurationError(f"invalid duration: {value!r}")
            seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
            pos = match.end()

    if not math.isfinite(seconds):
        raise ConfigurationError(f"invalid duration: {value!r}")
    if seconds < 0:
        raise ConfigurationError(f"negative duration: {value!r}")
    return seconds


def parse_source_list(raw: str) -> List[str]:
    """Split a comma separated source list, dropping blanks."""
    return [name.strip() for name in raw.split(",") if name.strip()]


def _env_sources() -> Optional[List[str]]:
    raw = os.environ.get("NFD_SOURCES")
    if raw is None:
        return None
    return parse_source_list(raw)


def _env_int(name: str) -> Optional[int]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


# =============================================================================
# Discovery Loop Configuration
# =============================================================================
@dataclass
class DiscoverySettings:
    """Loop behaviour. ``sources=None`` means every default source."""

    sleep_interval: str = field(default_factory=lambda: os.environ.get("NFD_SLEEP_INTERVAL", DEFAULT_SLEEP_INTERVAL))
    oneshot: bool = field(default_factory=lambda: os.environ.get("NFD_ONESHOT", "false").lower() == "true")
    no_publish: bool = field(default_factory=lambda: os.environ.get("NFD_NO_PUBLISH", "false").lower() == "true")
    sources: Optional[List[str]] = field(default_factory=_env_sources)
    label_whitelist: str = field(default_factory=lambda: os.environ.get("NFD_LABEL_WHITELIST", ""))
    max_workers: Optional[int] = field(default_factory=lambda: _env_int("NFD_MAX_WORKERS"))


# =============================================================================
# Host Path Configuration
# =============================================================================
@dataclass
class PathConfig:
    """Where the host's pseudo filesystems are mounted (inside a pod: /host-sys etc.)."""

    sysfs_root: Path = field(default_factory=lambda: Path(os.environ.get("NFD_SYSFS_ROOT", "/sys")))
    procfs_root: Path = field(default_factory=lambda: Path(os.environ.get("NFD_PROCFS_ROOT", "/proc")))

    def sys(self, *parts: str) -> Path:
        return self.sysfs_root.joinpath(*parts)

    def proc(self, *parts: str) -> Path:
        return self.procfs_root.joinpath(*parts)


# =============================================================================
# Kubernetes Configuration
# =============================================================================
@dataclass
class KubernetesConfig:
    """Identity of this agent in the cluster (normally set via the downward API)."""

    node_name: str = field(default_factory=lambda: os.environ.get("NODE_NAME", ""))
    pod_name: str = field(default_factory=lambda: os.environ.get("POD_NAME", ""))
    pod_namespace: str = field(default_factory=lambda: os.environ.get("POD_NAMESPACE", ""))
    kubeconfig: str = field(default_factory=lambda: os.environ.get("KUBECONFIG", ""))


@dataclass
class Settings:
    """
    Main configuration container.

    Usage:
        from node_feature_discovery.config import get_settings

        settings = get_settings()
        if settings.discovery.no_publish:
            ...
    """

    discovery: DiscoverySettings = field(default_factory=DiscoverySettings)
    paths: PathConfig = field(default_factory=PathConfig)
    kubernetes: KubernetesConfig = field(default_factory=KubernetesConfig)

    def reload(self) -> "Settings":
        """Reload settings from environment (useful after env changes)."""
        return Settings()


# =============================================================================
# Immutable Run Configuration
# =============================================================================
@dataclass(frozen=True)
class DiscoveryConfig:
    """Validated, immutable configuration for one agent process."""

    sleep_interval: float = 60.0
    oneshot: bool = False
    no_publish: bool = False
    sources: Tuple[str, ...] = ()
    label_whitelist: str = ""
    max_workers: Optional[int] = None

    def __post_init__(self):
        if self.sleep_interval <= 0:
            raise ConfigurationError(f"sleep interval must be positive, got {self.sleep_interval}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigurationError(f"max workers must be at least 1, got {self.max_workers}")


def build_discovery_config(
    settings: Optional["Settings"] = None,
    sleep_interval: Optional[str] = None,
    oneshot: Optional[bool] = None,
    no_publish: Optional[bool] = None,
    sources: Optional[List[str]] = None,
    label_whitelist: Optional[str] = None,
) -> DiscoveryConfig:
    """
    Freeze environment settings, overridden by explicit values, into a DiscoveryConfig.

    ``None`` for an override means "keep the environment value".
    """
    from .sources import DEFAULT_SOURCES

    discovery = (settings or get_settings()).discovery

    if sources is None:
        sources = discovery.sources
    if sources is None:
        sources = list(DEFAULT_SOURCES)

    return DiscoveryConfig(
        sleep_interval=parse_duration(sleep_interval if sleep_interval is not None else discovery.sleep_interval),
        oneshot=discovery.oneshot if oneshot is None else oneshot,
        no_publish=discovery.no_publish if no_publish is None else no_publish,
        sources=tuple(sources),
        label_whitelist=discovery.label_whitelist if label_whitelist is None else label_whitelist,
        max_workers=discovery.max_workers,
    )


# =============================================================================
# Global Settings Instance
# =============================================================================
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance (lazy initialization)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Force reload of settings from environment."""
    global _settings
    _settings = Settings()
    return _settings
