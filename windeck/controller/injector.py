"""
injector.py - The three synthesized-input operations the engine needs.

All calls are fire-and-forget: failures inside SendInput/pyautogui are
logged by the backends and never reported back to the engine.
"""

from windeck.controller.keymapper import KeyMapper
from windeck.controller.mousecontroller import MouseController


class InputInjector:
    def __init__(self, keymapper, mouse):
        self.keymapper = keymapper
        self.mouse = mouse

    @classmethod
    def create(cls, log, *, use_sendinput: bool = True):
        return cls(
            KeyMapper(log, use_sendinput=use_sendinput),
            MouseController(log, use_sendinput=use_sendinput),
        )

    def press_key(self, key: str):
        self.keymapper.tap(key)

    def move_pointer(self, dx: int, dy: int):
        self.mouse.move_relative(dx, dy)

    def scroll(self, delta: int):
        self.mouse.wheel(delta)
