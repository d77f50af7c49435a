"""Fake feature source for testing: always reports three features."""

from typing import List

from .base import FeatureSource


class FakeSource(FeatureSource):

    def name(self) -> str:
        return "fake"

    def discover(self) -> List[str]:
        return ["fakefeature1", "fakefeature2", "fakefeature3"]
