#!/usr/bin/env python3
"""
detector.py - Turns two consecutive gamepad frames into actions.

Everything here is a pure function of (previous frame, current frame, config):
- key taps fire on the rising edge of a mapped button only,
- the UI-toggle chord fires on the rising edge of "all chord buttons held",
  never on the edge of a single member,
- the on-screen-keyboard chord needs the modifier merely held (level) and the
  second button newly pressed (edge),
- scroll and pointer motion are level-triggered and re-evaluated every frame.
"""

import math
from dataclasses import dataclass
from enum import Enum

from windeck.controller.frame import AXIS_MAX, Button, GamepadFrame


class ControlEvent(Enum):
    TOGGLE_UI_REQUESTED = "toggle_ui"
    OSK_TOGGLE_REQUESTED = "toggle_osk"


@dataclass(frozen=True)
class KeyTap:
    key: str


@dataclass(frozen=True)
class PointerMove:
    dx: int
    dy: int


@dataclass(frozen=True)
class Scroll:
    delta: int


@dataclass(frozen=True)
class ControlRequest:
    event: ControlEvent


def rising(prev: GamepadFrame, cur: GamepadFrame, button: Button) -> bool:
    """True when every bit of `button` is held now and not all of them were before."""
    return cur.held(button) and not prev.held(button)


def scroll_delta(right_y: int, cfg) -> int | None:
    """Wheel delta for the right stick, None inside the single-axis deadzone."""
    if abs(right_y) <= cfg.right_deadzone:
        return None
    delta = int(right_y / cfg.scroll_scale)
    return max(-cfg.scroll_limit, min(cfg.scroll_limit, delta))


def pointer_delta(left_x: int, left_y: int, cfg) -> tuple[int, int] | None:
    """Relative pointer step for the left stick, None inside the circular deadzone."""
    if math.hypot(left_x, left_y) <= cfg.left_deadzone:
        return None
    nx = max(-1.0, min(1.0, left_x / AXIS_MAX))
    ny = max(-1.0, min(1.0, left_y / AXIS_MAX))
    # stick up is positive, screen Y grows downwards
    return int(nx * cfg.pointer_max_speed), int(-ny * cfg.pointer_max_speed)


class GestureDetector:
    def __init__(self, log, input_cfg):
        self.log = log
        self.input_cfg = input_cfg

    def detect(self, prev: GamepadFrame, cur: GamepadFrame) -> list:
        cfg = self.input_cfg
        actions = []

        # ---------------- CHORDS ----------------
        if rising(prev, cur, cfg.toggle_ui_chord):
            actions.append(ControlRequest(ControlEvent.TOGGLE_UI_REQUESTED))
            if cfg.debug_inputs or cfg.log_buttons:
                self.log.info("[CHORD] toggle UI")

        if cur.held(cfg.osk_modifier) and rising(prev, cur, cfg.osk_button):
            actions.append(ControlRequest(ControlEvent.OSK_TOGGLE_REQUESTED))
            if cfg.debug_inputs or cfg.log_buttons:
                self.log.info("[CHORD] toggle on-screen keyboard")

        # ---------------- KEY TAPS (edge only) ----------------
        for kb in cfg.key_bindings:
            if rising(prev, cur, kb.button):
                actions.append(KeyTap(kb.key))
                if cfg.debug_inputs or cfg.log_buttons:
                    self.log.info(f"[KEY] {kb.button.name} → {kb.key} TAP")

        # ---------------- ANALOG (level) ----------------
        delta = scroll_delta(cur.right_y, cfg)
        if delta is not None:
            actions.append(Scroll(delta))

        step = pointer_delta(cur.left_x, cur.left_y, cfg)
        if step is not None:
            actions.append(PointerMove(*step))

        if (cfg.debug_inputs or cfg.log_axes) and (delta is not None or step is not None):
            self.log.info(
                f"[AXIS] L=({cur.left_x:+d},{cur.left_y:+d}) step={step} "
                f"RY={cur.right_y:+d} wheel={delta}"
            )
        return actions
