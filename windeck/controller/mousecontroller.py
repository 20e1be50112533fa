#!/usr/bin/env python3
"""
mousecontroller.py
Relative pointer motion and wheel scrolling.
Windows: SendInput (works with raw-input consumers). Elsewhere: pyautogui.
"""

import ctypes
import sys

WHEEL_DELTA = 120  # one notch, Windows wheel units

if sys.platform == "win32":
    import ctypes.wintypes as wt

    user32 = ctypes.windll.user32

    MOUSEEVENTF_MOVE = 0x0001
    MOUSEEVENTF_WHEEL = 0x0800
    INPUT_MOUSE = 0
    ULONG_PTR = ctypes.POINTER(ctypes.c_ulong)

    class MOUSEINPUT(ctypes.Structure):
        _fields_ = (("dx", wt.LONG),
                    ("dy", wt.LONG),
                    ("mouseData", wt.DWORD),
                    ("dwFlags", wt.DWORD),
                    ("time", wt.DWORD),
                    ("dwExtraInfo", ULONG_PTR))

    class INPUT(ctypes.Structure):
        class _INPUT(ctypes.Union):
            _fields_ = [("mi", MOUSEINPUT)]
        _anonymous_ = ("_input",)
        _fields_ = [("type", wt.DWORD),
                    ("_input", _INPUT)]


class MouseController:
    def __init__(self, log=None, *, use_sendinput: bool = True):
        self.log = log
        self.use_sendinput = use_sendinput and sys.platform == "win32"
        self._pyautogui = None
        # pyautogui on X11/macOS scrolls whole clicks, Windows takes raw wheel units
        self.wheel_in_notches = not self.use_sendinput and sys.platform != "win32"
        self._wheel_remainder = 0
        if self.use_sendinput:
            try:
                user32.SetProcessDPIAware()
            except (AttributeError, OSError):
                pass
        else:
            import pyautogui  # needs a display, only load it when it is the backend
            pyautogui.FAILSAFE = False
            self._pyautogui = pyautogui

    # --- Relative movement ---
    def move_relative(self, dx: int, dy: int):
        """Send relative mouse movement (like a real mouse)."""
        if dx == 0 and dy == 0:
            return
        if self.use_sendinput:
            self._send(MOUSEINPUT(dx, dy, 0, MOUSEEVENTF_MOVE, 0, None))
        else:
            self._pyautogui.moveRel(dx, dy, _pause=False)
        if self.log:
            self.log.debug(f"[MOUSE] Move dx={dx:+d} dy={dy:+d}")

    # --- Wheel scroll ---
    def wheel(self, delta: int):
        """Scroll by a signed wheel delta (positive = away from the user)."""
        if delta == 0:
            return
        if self.use_sendinput:
            # mouseData is a DWORD; negative deltas go in two's complement
            self._send(MOUSEINPUT(0, 0, delta & 0xFFFFFFFF, MOUSEEVENTF_WHEEL, 0, None))
        elif self.wheel_in_notches:
            notches = self._to_notches(delta)
            if notches:
                self._pyautogui.scroll(notches, _pause=False)
        else:
            self._pyautogui.scroll(delta, _pause=False)
        if self.log:
            self.log.debug(f"[MOUSE] Wheel delta={delta:+d}")

    def _to_notches(self, delta: int) -> int:
        """Accumulate wheel units, return the whole notches reached (sign kept)."""
        self._wheel_remainder += delta
        notches = int(self._wheel_remainder / WHEEL_DELTA)
        self._wheel_remainder -= notches * WHEEL_DELTA
        return notches

    def _send(self, mi):
        inp = INPUT()
        inp.type = INPUT_MOUSE
        inp.mi = mi
        if user32.SendInput(1, ctypes.byref(inp), ctypes.sizeof(inp)) == 0 and self.log:
            self.log.error("[MOUSE] SendInput failed")
