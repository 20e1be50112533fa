#!/usr/bin/env python3
"""
keymapper.py - Send momentary key presses using Windows SendInput
Supports combos like: "Enter", "F1", "Ctrl+Shift+F5", "Alt+Tab"
Falls back to pyautogui when SendInput is disabled or not available.
"""

import ctypes
import sys

if sys.platform == "win32":
    import ctypes.wintypes as wt

    user32 = ctypes.WinDLL("user32", use_last_error=True)

    INPUT_KEYBOARD = 1
    KEYEVENTF_KEYUP = 0x0002

    # pick correct ULONG_PTR
    if ctypes.sizeof(ctypes.c_void_p) == 8:
        ULONG_PTR = ctypes.c_ulonglong
    else:
        ULONG_PTR = ctypes.c_ulong

    class KEYBDINPUT(ctypes.Structure):
        _fields_ = [
            ("wVk", wt.WORD),
            ("wScan", wt.WORD),
            ("dwFlags", wt.DWORD),
            ("time", wt.DWORD),
            ("dwExtraInfo", ULONG_PTR),
        ]

    class MOUSEINPUT(ctypes.Structure):
        _fields_ = [
            ("dx", wt.LONG),
            ("dy", wt.LONG),
            ("mouseData", wt.DWORD),
            ("dwFlags", wt.DWORD),
            ("time", wt.DWORD),
            ("dwExtraInfo", ULONG_PTR),
        ]

    class HARDWAREINPUT(ctypes.Structure):
        _fields_ = [
            ("uMsg", wt.DWORD),
            ("wParamL", wt.WORD),
            ("wParamH", wt.WORD),
        ]

    class _INPUTUNION(ctypes.Union):
        _fields_ = [
            ("mi", MOUSEINPUT),
            ("ki", KEYBDINPUT),
            ("hi", HARDWAREINPUT),
        ]

    class INPUT(ctypes.Structure):
        _anonymous_ = ("u",)
        _fields_ = [
            ("type", wt.DWORD),
            ("u", _INPUTUNION),
        ]


_SPECIAL_VK = {
    "CTRL": 0x11,
    "CONTROL": 0x11,
    "ALT": 0x12,
    "SHIFT": 0x10,
    "WIN": 0x5B,   # Left Windows key
    "LWIN": 0x5B,
    "RWIN": 0x5C,
    "META": 0x5B,

    "ENTER": 0x0D,
    "RETURN": 0x0D,
    "ESC": 0x1B,
    "ESCAPE": 0x1B,
    "SPACE": 0x20,
    "TAB": 0x09,
    "BACKSPACE": 0x08,
    "BKSP": 0x08,
    "DEL": 0x2E,
    "DELETE": 0x2E,
    "INS": 0x2D,
    "INSERT": 0x2D,
    "HOME": 0x24,
    "END": 0x23,
    "PGUP": 0x21,
    "PAGEUP": 0x21,
    "PGDN": 0x22,
    "PAGEDOWN": 0x22,
    "LEFT": 0x25,
    "RIGHT": 0x27,
    "UP": 0x26,
    "DOWN": 0x28,
}

# pyautogui spells a few keys differently
_PYAUTOGUI_NAMES = {
    "CONTROL": "ctrl",
    "WIN": "winleft",
    "LWIN": "winleft",
    "RWIN": "winright",
    "META": "winleft",
    "RETURN": "enter",
    "ESCAPE": "esc",
    "BKSP": "backspace",
    "DEL": "delete",
    "INS": "insert",
    "PGUP": "pageup",
    "PGDN": "pagedown",
}


def vk_from_str(key: str) -> int:
    """Map a string like 'A', 'F1', 'Enter' to a Windows virtual-key code (0 if unknown)."""
    k = key.strip().upper()

    # single letters A–Z and digits 0–9
    if len(k) == 1 and ("A" <= k <= "Z" or "0" <= k <= "9"):
        return ord(k)

    # function keys F1–F24
    if k.startswith("F") and k[1:].isdigit():
        n = int(k[1:])
        if 1 <= n <= 24:
            return 0x70 + (n - 1)

    return _SPECIAL_VK.get(k, 0)


def split_combo(combo: str) -> list[str]:
    return [p.strip() for p in combo.split("+") if p.strip()]


class KeyMapper:
    def __init__(self, log=None, *, use_sendinput: bool = True):
        self.log = log
        self.use_sendinput = use_sendinput and sys.platform == "win32"
        self._pyautogui = None
        if not self.use_sendinput:
            import pyautogui  # needs a display, only load it when it is the backend
            pyautogui.FAILSAFE = False
            self._pyautogui = pyautogui

    def tap(self, combo: str) -> bool:
        """Press + release a combo. Down and up are delivered back to back."""
        parts = split_combo(combo)
        vks = [vk_from_str(p) for p in parts]
        if not vks or any(vk == 0 for vk in vks):
            if self.log:
                self.log.warning(f"[KEYMAPPER] Unknown key combo: {combo}")
            return False

        if self.use_sendinput:
            # press all in order, release in reverse order, one SendInput batch
            events = [(vk, True) for vk in vks] + [(vk, False) for vk in reversed(vks)]
            self._send_vks(events)
        else:
            names = [_PYAUTOGUI_NAMES.get(p.upper(), p.lower()) for p in parts]
            if len(names) == 1:
                self._pyautogui.press(names[0])
            else:
                self._pyautogui.hotkey(*names)

        if self.log:
            self.log.debug(f"[KEYMAPPER] TAP combo: {combo}")
        return True

    def _send_vks(self, events):
        n_inputs = len(events)
        arr = (INPUT * n_inputs)()
        for i, (vk, down) in enumerate(events):
            flags = 0 if down else KEYEVENTF_KEYUP
            arr[i].type = INPUT_KEYBOARD
            arr[i].ki = KEYBDINPUT(wVk=vk, wScan=0, dwFlags=flags, time=0, dwExtraInfo=0)
        n = user32.SendInput(n_inputs, arr, ctypes.sizeof(INPUT))
        if n != n_inputs:
            err = ctypes.get_last_error()
            if self.log:
                self.log.error(f"[KEYMAPPER] SendInput sent {n}/{n_inputs}, err={err}")
        elif self.log:
            self.log.debug(
                "[KEYMAPPER] " + " ".join(
                    f"{'DOWN' if down else 'UP'}:0x{vk:02X}" for vk, down in events
                )
            )
