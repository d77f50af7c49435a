"""
Orchestrator - The discovery loop

Drives discovery cycles on a fixed interval:

    agent = DiscoveryAgent(build_discovery_config())
    exit_code = agent.run()

Each cycle discovers and aggregates labels, then publishes them unless
publishing is disabled. In oneshot mode the agent stops after the first
cycle and the exit code tells whether publishing succeeded. Otherwise
publish errors are logged and the next cycle, one interval later, is the
retry. Cycles never overlap: the wait starts once a cycle has finished.
"""

import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .aggregator import build_labels
from .config import DiscoveryConfig
from .exceptions import ControlPlaneError, DetectorError
from .k8s import APIHelpers, K8sHelpers
from .labels import LabelWhitelist, Labels
from .logger import logger
from .sources import FeatureSource, resolve_sources
from .synchronizer import update_node_with_feature_labels


@dataclass
class CycleResult:
    """Outcome of one discovery cycle."""
    labels: Labels
    source_errors: Dict[str, DetectorError] = field(default_factory=dict)
    published: bool = False
    publish_error: Optional[ControlPlaneError] = None

    @property
    def ok(self) -> bool:
        """True unless publishing was attempted and failed."""
        return self.publish_error is None


def configure_parameters(
    source_names: Sequence[str],
    label_whitelist: str,
) -> Tuple[List[FeatureSource], LabelWhitelist]:
    """
    Resolve enabled sources and compile the label whitelist.

    Raises:
        ConfigurationError: the whitelist is not a valid regular expression
    """
    whitelist = LabelWhitelist(label_whitelist)
    sources = resolve_sources(source_names)
    return sources, whitelist


class DiscoveryAgent:
    """
    Runs discovery cycles for one node.

    The configuration is fixed at construction. ``stop()`` (wired to
    SIGTERM/SIGINT by the CLI) ends the loop at the next wait; a running
    cycle always completes.
    """

    def __init__(
        self,
        config: DiscoveryConfig,
        helper: Optional[APIHelpers] = None,
    ):
        self.config = config
        self.sources, self.whitelist = configure_parameters(config.sources, config.label_whitelist)
        self.helper = helper or K8sHelpers()
        self._stop = threading.Event()
        self.cycles = 0
        self.last_result: Optional[CycleResult] = None

    def stop(self) -> None:
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def run_cycle(self) -> CycleResult:
        """Discover, aggregate and (unless disabled) publish once."""
        self.cycles += 1
        labels, errors = build_labels(self.sources, self.whitelist, self.config.max_workers)
        result = CycleResult(labels=labels, source_errors=errors)

        if errors:
            logger.warning(
                f"⚠️  {len(errors)} source(s) failed this cycle: {', '.join(sorted(errors))}"
            )

        try:
            update_node_with_feature_labels(self.helper, self.config.no_publish, labels)
            result.published = not self.config.no_publish
        except ControlPlaneError as e:
            logger.error(f"❌ Failed to advertise labels: {e}")
            result.publish_error = e

        return result

    def run(self) -> int:
        """
        Run cycles until oneshot completes or a stop is requested.

        Returns:
            Process exit code (0 = success)
        """
        names = ", ".join(n for n in self.config.sources if n) or "none"
        mode = "oneshot" if self.config.oneshot else f"every {self.config.sleep_interval:g}s"
        logger.info(f"🚀 Node feature discovery started ({mode}), sources: {names}")
        if not self.whitelist.is_match_all:
            logger.info(f"Label whitelist: {self.whitelist.pattern}")

        while True:
            result = self.run_cycle()
            self.last_result = result

            if self.config.oneshot:
                return 0 if result.ok else 1

            if self._stop.wait(self.config.sleep_interval):
                logger.info("Stop requested, exiting")
                return 0
