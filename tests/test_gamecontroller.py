"""Tests for GameController device selection, hot-plug and read failures."""
from __future__ import annotations

import logging
import types

import pytest

from windeck.controller import gamecontroller
from windeck.controller.frame import Button
from windeck.controller.gamecontroller import GameController


class FakePygame:
    JOYDEVICEADDED = 0x605
    JOYDEVICEREMOVED = 0x606

    class error(RuntimeError):
        pass

    def __init__(self, pads=()):
        self.pads = list(pads)
        self.pending = []
        self.joystick = types.SimpleNamespace(
            init=lambda: None,
            quit=lambda: None,
            get_count=lambda: len(self.pads),
            Joystick=lambda i: self.pads[i],
        )
        self.event = types.SimpleNamespace(pump=lambda: None, get=self._events)

    def init(self):
        pass

    def quit(self):
        pass

    def _events(self, event_types=None):
        out, self.pending = self.pending, []
        return out

    def post(self, event_type, pad):
        self.pending.append(types.SimpleNamespace(type=event_type, instance_id=pad.instance_id))


class FakePad:
    def __init__(self, guid, name="Pad", instance_id=0, pressed=()):
        self.guid = guid
        self.name = name
        self.instance_id = instance_id
        self.pressed = set(pressed)
        self.broken = False

    def init(self):
        pass

    def get_guid(self):
        return self.guid

    def get_name(self):
        return self.name

    def get_instance_id(self):
        return self.instance_id

    def get_numbuttons(self):
        if self.broken:
            raise FakePygame.error("device read failed")
        return 11

    def get_button(self, i):
        return 1 if i in self.pressed else 0

    def get_numaxes(self):
        return 6

    def get_axis(self, i):
        return -1.0 if i in (4, 5) else 0.0

    def get_numhats(self):
        return 1

    def get_hat(self, i):
        return (0, 0)


@pytest.fixture
def fake_pygame(monkeypatch):
    fake = FakePygame()
    monkeypatch.setattr(gamecontroller, "pygame", fake)
    return fake


def test_no_controller_gives_no_frame(fake_pygame, log, caplog):
    with caplog.at_level(logging.WARNING):
        pad = GameController(log)
    assert "waiting for one to be connected" in caplog.text
    assert pad.poll() is None
    assert pad.poll() is None


def test_index_selection_and_frame(fake_pygame, log):
    fake_pygame.pads = [FakePad("aa"), FakePad("bb", instance_id=1, pressed={0})]
    pad = GameController(log, index=1)
    frame = pad.poll()
    assert frame.buttons == Button.A
    assert frame.left_trigger == 0


def test_guid_selection_ignores_case(fake_pygame, log):
    first = FakePad("0300aa", instance_id=0, pressed={1})
    second = FakePad("0300BB", instance_id=1, pressed={2})
    fake_pygame.pads = [first, second]
    pad = GameController(log, guid="0300bb", index=0)
    assert pad.joystick is second
    assert pad.poll().buttons == Button.X


def test_read_error_drops_device_then_recovers(fake_pygame, log):
    device = FakePad("aa", pressed={0})
    fake_pygame.pads = [device]
    pad = GameController(log)

    device.broken = True
    assert pad.poll() is None
    assert pad.joystick is None

    device.broken = False
    assert pad.poll().buttons == Button.A
    assert pad.joystick is device


def test_unplug_and_replug(fake_pygame, log):
    device = FakePad("aa", instance_id=7, pressed={1})
    fake_pygame.pads = [device]
    pad = GameController(log)
    assert pad.poll() is not None

    fake_pygame.pads = []
    fake_pygame.post(FakePygame.JOYDEVICEREMOVED, device)
    assert pad.poll() is None
    assert pad.joystick is None

    replugged = FakePad("aa", instance_id=8, pressed={1})
    fake_pygame.pads = [replugged]
    fake_pygame.post(FakePygame.JOYDEVICEADDED, replugged)
    assert pad.poll().buttons == Button.B
    assert pad.joystick is replugged


def test_removal_of_other_device_is_ignored(fake_pygame, log):
    mine = FakePad("aa", instance_id=1)
    other = FakePad("bb", instance_id=2)
    fake_pygame.pads = [mine, other]
    pad = GameController(log)
    fake_pygame.post(FakePygame.JOYDEVICEREMOVED, other)
    assert pad.poll() is not None
    assert pad.joystick is mine


def test_list_devices(fake_pygame):
    fake_pygame.pads = [FakePad("aa", "Xbox Controller"), FakePad("bb", "DualSense")]
    assert GameController.list_devices() == [(0, "aa", "Xbox Controller"), (1, "bb", "DualSense")]
