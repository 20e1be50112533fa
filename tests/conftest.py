from __future__ import annotations

import logging

import pytest

from windeck.controller.bindings import InputConfig
from windeck.controller.frame import Button, GamepadFrame
from windeck.shell.context import NexusContext


class FakeSource:
    """Hands out scripted frames; None entries stand for failed reads."""

    def __init__(self, frames):
        self.frames = list(frames)
        self.polls = 0

    def poll(self):
        self.polls += 1
        if not self.frames:
            return None
        return self.frames.pop(0)


class FakeInjector:
    def __init__(self):
        self.keys: list[str] = []
        self.moves: list[tuple[int, int]] = []
        self.scrolls: list[int] = []

    def press_key(self, key):
        self.keys.append(key)

    def move_pointer(self, dx, dy):
        self.moves.append((dx, dy))

    def scroll(self, delta):
        self.scrolls.append(delta)

    @property
    def total(self) -> int:
        return len(self.keys) + len(self.moves) + len(self.scrolls)


def frame(*buttons: Button, **axes) -> GamepadFrame:
    held = Button.NONE
    for b in buttons:
        held |= b
    return GamepadFrame(buttons=held, **axes)


@pytest.fixture
def log():
    return logging.getLogger("windeck.tests")


@pytest.fixture
def input_cfg():
    return InputConfig()


@pytest.fixture
def context():
    return NexusContext()
