"""
Command line interface for the node feature discovery agent.

    nfd --oneshot --no-publish
    nfd --sources=cpuid,rdt --label-whitelist='.*rdt.*' --sleep-interval=30s

Option defaults come from the environment (see config.py), so the same
agent can be configured from a DaemonSet spec without arguments.
"""

import signal
import sys
from typing import Optional

import click

from ._version import display_version
from .config import build_discovery_config, parse_source_list
from .exceptions import ConfigurationError
from .labels import Labels
from .logger import logger
from .orchestrator import DiscoveryAgent
from .sources import DEFAULT_SOURCES, available_sources

# Lazy load rich; only dry runs print a table
_console = None


def get_console():
    global _console
    if _console is None:
        from rich.console import Console
        _console = Console()
    return _console


def print_labels(labels: Labels) -> None:
    """Print computed labels as a table (dry runs)."""
    from rich.table import Table

    table = Table(title=f"Feature labels ({len(labels)})")
    table.add_column("Label", style="cyan", no_wrap=True)
    table.add_column("Value", style="magenta")
    for key in sorted(labels):
        table.add_row(key, labels[key])

    get_console().print(table)


def _install_signal_handlers(agent: DiscoveryAgent) -> None:
    """First SIGTERM/SIGINT stops the agent after the current cycle, a second one acts as usual."""
    previous = {sig: signal.getsignal(sig) for sig in (signal.SIGTERM, signal.SIGINT)}

    def _handle(signum, frame):
        logger.info(f"Received signal {signum}, stopping after the current cycle")
        agent.stop()
        for sig, handler in previous.items():
            signal.signal(sig, handler if handler is not None else signal.SIG_DFL)

    for sig in previous:
        signal.signal(sig, _handle)


def _print_version(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"node-feature-discovery, version {display_version()}")
    ctx.exit()


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--sources",
    default=None,
    metavar="NAMES",
    help=(
        "Comma separated list of feature sources "
        f"[default: {','.join(DEFAULT_SOURCES)}; available: {','.join(available_sources())}]"
    ),
)
@click.option(
    "--label-whitelist",
    default=None,
    metavar="REGEX",
    help="Regular expression; only matching label keys are published [default: publish all]",
)
@click.option(
    "--oneshot",
    is_flag=True,
    help="Label once and exit.",
)
@click.option(
    "--no-publish",
    is_flag=True,
    help="Do not publish discovered features to the cluster-local Kubernetes API server.",
)
@click.option(
    "--sleep-interval",
    default=None,
    metavar="DURATION",
    help="Time to sleep between re-labeling, e.g. 60s, 1m30s [default: 60s]",
)
@click.option(
    "--version",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_print_version,
    help="Show the version and exit.",
)
def main(
    sources: Optional[str],
    label_whitelist: Optional[str],
    oneshot: bool,
    no_publish: bool,
    sleep_interval: Optional[str],
):
    """Node Feature Discovery - label this node with its hardware features."""
    try:
        config = build_discovery_config(
            sleep_interval=sleep_interval,
            # unset options fall back to the NFD_* environment
            oneshot=True if oneshot else None,
            no_publish=True if no_publish else None,
            sources=parse_source_list(sources) if sources is not None else None,
            label_whitelist=label_whitelist,
        )
        agent = DiscoveryAgent(config)
    except ConfigurationError as e:
        raise click.UsageError(str(e))

    logger.info(f"Node Feature Discovery {display_version()}")
    _install_signal_handlers(agent)
    exit_code = agent.run()

    if config.no_publish and config.oneshot and agent.last_result is not None:
        print_labels(agent.last_result.labels)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
