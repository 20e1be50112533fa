#!/usr/bin/env python3
"""
gamecontroller.py
Single gamepad input source built on pygame.

poll() returns a GamepadFrame, or None when no controller can be read this
cycle (not plugged in, just removed, driver hiccup). A controller that comes
back is picked up again on a later poll.
"""

from dataclasses import dataclass, field

import pygame

from windeck.controller.bindings import ConfigError
from windeck.controller.frame import (
    AXIS_MAX,
    TRIGGER_MAX,
    Button,
    GamepadFrame,
    button_from_str,
    clamp_axis,
)

# pygame 2 layout for XInput pads on Windows
DEFAULT_BUTTON_INDICES = {
    Button.A: 0,
    Button.B: 1,
    Button.X: 2,
    Button.Y: 3,
    Button.LEFT_SHOULDER: 4,
    Button.RIGHT_SHOULDER: 5,
    Button.BACK: 6,
    Button.START: 7,
    Button.LEFT_THUMB: 8,
    Button.RIGHT_THUMB: 9,
}

DEFAULT_AXIS_INDICES = {
    "left_x": 0,
    "left_y": 1,
    "right_x": 2,
    "right_y": 3,
    "left_trigger": 4,
    "right_trigger": 5,
}


@dataclass
class PadLayout:
    buttons: dict = field(default_factory=lambda: dict(DEFAULT_BUTTON_INDICES))
    axes: dict = field(default_factory=lambda: dict(DEFAULT_AXIS_INDICES))
    dpad_hat: int = 0
    invert_y: bool = True   # pygame reports stick-up as negative

    @classmethod
    def from_ini(cls, cfg):
        obj = cls()
        for name, raw in cfg.items("buttons").items():
            try:
                obj.buttons[button_from_str(name)] = int(raw)
            except ValueError as exc:
                raise ConfigError(f"[buttons] {name}: {exc}") from None
        for name in DEFAULT_AXIS_INDICES:
            obj.axes[name] = cfg.get_int("axes", name, obj.axes[name])
        obj.dpad_hat = cfg.get_int("axes", "dpad_hat", obj.dpad_hat)
        obj.invert_y = cfg.get_bool("axes", "invert_y", obj.invert_y)
        return obj


def _read_axis(js, index: int) -> float:
    if index < 0 or index >= js.get_numaxes():
        return 0.0
    return float(js.get_axis(index))


def stick_value(v: float, invert: bool = False) -> int:
    if invert:
        v = -v
    return clamp_axis(round(v * AXIS_MAX))


def trigger_value(v: float) -> int:
    # triggers rest at -1.0 and read +1.0 fully pulled
    return max(0, min(TRIGGER_MAX, round((v + 1.0) / 2.0 * TRIGGER_MAX)))


def _read_trigger(js, index: int) -> int:
    if index < 0 or index >= js.get_numaxes():
        return 0
    return trigger_value(float(js.get_axis(index)))


def frame_from_joystick(js, layout: PadLayout) -> GamepadFrame:
    """Snapshot a pygame joystick (or anything with the same getters)."""
    buttons = Button.NONE
    num = js.get_numbuttons()
    for button, idx in layout.buttons.items():
        if 0 <= idx < num and js.get_button(idx):
            buttons |= button

    if 0 <= layout.dpad_hat < js.get_numhats():
        hx, hy = js.get_hat(layout.dpad_hat)
        if hx < 0:
            buttons |= Button.DPAD_LEFT
        elif hx > 0:
            buttons |= Button.DPAD_RIGHT
        if hy > 0:
            buttons |= Button.DPAD_UP
        elif hy < 0:
            buttons |= Button.DPAD_DOWN

    ax = layout.axes
    return GamepadFrame(
        buttons=buttons,
        left_x=stick_value(_read_axis(js, ax["left_x"])),
        left_y=stick_value(_read_axis(js, ax["left_y"]), layout.invert_y),
        right_x=stick_value(_read_axis(js, ax["right_x"])),
        right_y=stick_value(_read_axis(js, ax["right_y"]), layout.invert_y),
        left_trigger=_read_trigger(js, ax["left_trigger"]),
        right_trigger=_read_trigger(js, ax["right_trigger"]),
    )


class GameController:
    def __init__(self, log, layout: PadLayout | None = None, *, guid: str | None = None, index: int = 0):
        """
        Select the controller by GUID (stable across reboots) or by index.
        """
        self.log = log
        self.layout = layout or PadLayout()
        self.guid = guid
        self.index = index
        self.joystick = None

        pygame.init()
        pygame.joystick.init()

        if not self._attach():
            self.log.warning(
                f"[PAD] No controller at {'GUID ' + guid if guid else f'index {index}'}; "
                "waiting for one to be connected"
            )

    @classmethod
    def from_ini(cls, cfg, log):
        guid = cfg.get_str("device", "guid") or None
        return cls(log, PadLayout.from_ini(cfg), guid=guid, index=cfg.get_int("device", "index", 0))

    @staticmethod
    def list_devices():
        """
        Return list of all connected devices with (index, guid, name).
        """
        pygame.init()
        pygame.joystick.init()
        devices = []
        for i in range(pygame.joystick.get_count()):
            js = pygame.joystick.Joystick(i)
            devices.append((i, js.get_guid(), js.get_name()))
        return devices

    def _attach(self) -> bool:
        for i in range(pygame.joystick.get_count()):
            js = pygame.joystick.Joystick(i)
            if self.guid is not None:
                if js.get_guid().lower() != self.guid.lower():
                    continue
            elif i != self.index:
                continue
            js.init()
            self.joystick = js
            self.log.info(
                f"[PAD] Using {js.get_name()} (index={i} GUID={js.get_guid()}) "
                f"Buttons={js.get_numbuttons()} Axes={js.get_numaxes()} Hats={js.get_numhats()}"
            )
            return True
        return False

    def _handle_device_events(self):
        for ev in pygame.event.get((pygame.JOYDEVICEADDED, pygame.JOYDEVICEREMOVED)):
            if ev.type == pygame.JOYDEVICEREMOVED:
                if self.joystick is not None and ev.instance_id == self.joystick.get_instance_id():
                    self.log.warning("[PAD] Controller removed")
                    self.joystick = None
            elif self.joystick is None:
                self._attach()

    def poll(self) -> GamepadFrame | None:
        try:
            pygame.event.pump()
            self._handle_device_events()
            if self.joystick is None and not self._attach():
                return None
            return frame_from_joystick(self.joystick, self.layout)
        except pygame.error as exc:
            self.log.debug(f"[PAD] read failed: {exc}")
            self.joystick = None
            return None

    def close(self):
        pygame.joystick.quit()
        pygame.quit()
