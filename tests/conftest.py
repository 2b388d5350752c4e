from __future__ import annotations

import random
from typing import List

import pytest

from sludge_sweep.audio import AudioSink
from sludge_sweep.game import GameState


class RecordingAudio(AudioSink):
    """Remembers every cue instead of playing it."""

    def __init__(self) -> None:
        self.played: List[str] = []
        self.music: List[bool] = []

    def play(self, name: str) -> None:
        self.played.append(name)

    def set_music(self, enabled: bool) -> None:
        self.music.append(enabled)


@pytest.fixture
def audio() -> RecordingAudio:
    return RecordingAudio()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def game(audio: RecordingAudio) -> GameState:
    """An empty 800x600 arena: no seeded sludge and no random spawns."""
    return GameState(
        audio=audio,
        rng=random.Random(1234),
        spawn_rate=0.0,
        initial_sludge=0,
    )
