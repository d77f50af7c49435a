"""Version of the node feature discovery agent.

``__version__`` is static for packaging. ``display_version()`` is what the
agent logs at startup and prints for ``--version``: the base version plus
the commit the image was built from, when known. It is resolved on call,
so importing the package never runs git.
"""

import os
import subprocess
from pathlib import Path
from typing import Optional

__version__ = "0.1.0"

_SOURCE_ROOT = Path(__file__).resolve().parents[2]


def build_commit() -> Optional[str]:
    """Short commit hash from GIT_COMMIT (image builds) or the source checkout."""
    stamped = os.environ.get("GIT_COMMIT", "").strip()
    if stamped and stamped != "dev":
        return stamped[:8]

    try:
        out = subprocess.run(
            ["git", "rev-parse", "--short=8", "HEAD"],
            cwd=_SOURCE_ROOT,
            capture_output=True,
            text=True,
            timeout=2,
        )
    except (OSError, subprocess.TimeoutExpired):
        return None
    if out.returncode != 0:
        return None
    return out.stdout.strip() or None


def display_version() -> str:
    commit = build_commit()
    # PEP 440 local version identifier, e.g. 0.1.0+c6eea1c5
    return f"{__version__}+{commit}" if commit else __version__

