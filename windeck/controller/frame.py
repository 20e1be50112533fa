"""
frame.py - Gamepad snapshot types shared by the input source and the engine.

Analog values follow the XInput convention: sticks are signed 16-bit
integers with "stick up" positive, triggers are 0..255.
"""

from dataclasses import dataclass
from enum import IntFlag

AXIS_MIN = -32768
AXIS_MAX = 32767
TRIGGER_MAX = 255


class Button(IntFlag):
    NONE = 0
    DPAD_UP = 0x0001
    DPAD_DOWN = 0x0002
    DPAD_LEFT = 0x0004
    DPAD_RIGHT = 0x0008
    START = 0x0010
    BACK = 0x0020
    LEFT_THUMB = 0x0040
    RIGHT_THUMB = 0x0080
    LEFT_SHOULDER = 0x0100
    RIGHT_SHOULDER = 0x0200
    A = 0x1000
    B = 0x2000
    X = 0x4000
    Y = 0x8000


# Spellings accepted in the INI files ("start", "LeftThumb", "left_thumb", ...)
BUTTON_ALIASES = {
    "MENU": Button.START,
    "SELECT": Button.BACK,
    "VIEW": Button.BACK,
    "LS": Button.LEFT_THUMB,
    "RS": Button.RIGHT_THUMB,
    "L3": Button.LEFT_THUMB,
    "R3": Button.RIGHT_THUMB,
    "LB": Button.LEFT_SHOULDER,
    "RB": Button.RIGHT_SHOULDER,
}


def button_from_str(name: str) -> Button:
    """Map a config name like 'start', 'LeftThumb' or 'RS' to a Button."""
    key = name.strip().upper().replace("-", "_")
    if key in BUTTON_ALIASES:
        return BUTTON_ALIASES[key]
    if key in Button.__members__ and key != "NONE":
        return Button[key]
    # CamelCase -> SNAKE_CASE ("LeftThumb" -> "LEFT_THUMB")
    snake = "".join(
        ("_" + ch if ch.isupper() and i else ch) for i, ch in enumerate(name.strip())
    ).upper()
    if snake in Button.__members__ and snake != "NONE":
        return Button[snake]
    raise ValueError(f"Unknown gamepad button '{name}'")


def clamp_axis(value: int) -> int:
    return max(AXIS_MIN, min(AXIS_MAX, int(value)))


@dataclass(frozen=True)
class GamepadFrame:
    buttons: Button = Button.NONE
    left_x: int = 0
    left_y: int = 0
    right_x: int = 0
    right_y: int = 0
    left_trigger: int = 0
    right_trigger: int = 0

    def held(self, button: Button) -> bool:
        return (self.buttons & button) == button

    def __str__(self):
        names = "|".join(b.name for b in Button if b and b in self.buttons) or "-"
        return (
            f"buttons={names} L=({self.left_x:+6d},{self.left_y:+6d}) "
            f"R=({self.right_x:+6d},{self.right_y:+6d}) "
            f"LT={self.left_trigger:3d} RT={self.right_trigger:3d}"
        )


NEUTRAL_FRAME = GamepadFrame()
