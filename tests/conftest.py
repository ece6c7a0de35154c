import random

import pytest

from mimi.content import ContentPools, VOCABULARY
from mimi.scheduler import ManualScheduler


class FakeSpeech:
    """Stands in for the speech service: records what rounds ask for."""

    def __init__(self):
        self.said = []
        self.warmed = []
        self.cancelled = 0

    def say(self, text):
        self.said.append(text)

    def warm(self, texts):
        self.warmed.extend(texts)

    def cancel(self):
        self.cancelled += 1


class BrokenSpeech(FakeSpeech):
    def say(self, text):
        raise RuntimeError("speaker unplugged")


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def clock():
    return ManualScheduler()


@pytest.fixture
def speech():
    return FakeSpeech()


@pytest.fixture
def pools():
    return ContentPools()


def pools_with(*word_ids):
    """Pools restricted to the given vocabulary ids (in that order)."""
    by_id = {item.id: item for item in VOCABULARY}
    return ContentPools(vocabulary=tuple(by_id[w] for w in word_ids))


@pytest.fixture
def make_pools():
    return pools_with


@pytest.fixture
def broken_speech():
    return BrokenSpeech()
