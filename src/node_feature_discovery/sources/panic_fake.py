"""Fake feature source for testing fault isolation: discover() always blows up."""

from typing import List

from .base import FeatureSource


class PanicFakeSource(FeatureSource):

    def name(self) -> str:
        return "panic_fake"

    def discover(self) -> List[str]:
        raise RuntimeError("fake panic error")
