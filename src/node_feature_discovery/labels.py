"""
Label model for published node features.

Every label this agent writes has the shape

    node.alpha.kubernetes-incubator.io/nfd-<source>-<feature>: "true"

The value is a presence marker only. Labels outside ``LABEL_PREFIX`` are
never read, removed or overwritten.
"""

import re
from typing import Dict, Optional, Pattern

from .exceptions import ConfigurationError


# Label namespace for every label published by this agent
NAMESPACE = "node.alpha.kubernetes-incubator.io"
LABEL_PREFIX = f"{NAMESPACE}/nfd"
LABEL_VALUE = "true"

# Published label mapping (key -> "true")
Labels = Dict[str, str]


def make_label_key(source_name: str, feature: str, prefix: str = LABEL_PREFIX) -> str:
    """Namespaced label key for one feature of one source."""
    return f"{prefix}-{source_name}-{feature}"


class LabelWhitelist:
    """
    Compiled whitelist for label keys.

    Matching is an unanchored search, so ``rdt`` and ``.*rdt.*`` accept the
    same keys. The empty pattern accepts every key.
    """

    def __init__(self, pattern: str = ""):
        self.pattern = pattern or ""
        try:
            self._regex: Optional[Pattern[str]] = re.compile(self.pattern) if self.pattern else None
        except re.error as e:
            raise ConfigurationError(f"invalid label whitelist {pattern!r}: {e}") from e

    @property
    def is_match_all(self) -> bool:
        return self._regex is None

    def matches(self, key: str) -> bool:
        if self._regex is None:
            return True
        return self._regex.search(key) is not None

    def __eq__(self, other) -> bool:
        return isinstance(other, LabelWhitelist) and other.pattern == self.pattern

    def __hash__(self) -> int:
        return hash(self.pattern)

    def __repr__(self) -> str:
        return f"LabelWhitelist({self.pattern!r})"
