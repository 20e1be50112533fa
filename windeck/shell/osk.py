#!/usr/bin/env python3
"""
osk.py - Windows on-screen keyboard, toggled by presence:
window found -> ask it to close, no window -> launch osk.exe.
"""

import sys

OSK_WINDOW_CLASS = "OSKMainClass"
OSK_EXECUTABLE = "osk.exe"


class OnScreenKeyboard:
    def __init__(self, log):
        self.log = log
        self.available = sys.platform == "win32"
        if self.available:
            import win32api
            import win32con
            import win32gui

            self._api = win32api
            self._con = win32con
            self._gui = win32gui

    def find_window(self):
        if not self.available:
            return None
        hwnd = self._gui.FindWindow(OSK_WINDOW_CLASS, None)
        return hwnd or None

    def is_present(self) -> bool:
        return self.find_window() is not None

    def show(self):
        self._api.ShellExecute(0, "open", OSK_EXECUTABLE, None, None, self._con.SW_SHOWNORMAL)
        self.log.info("[OSK] launched")

    def hide(self, hwnd):
        self._gui.PostMessage(hwnd, self._con.WM_CLOSE, 0, 0)
        self.log.info("[OSK] closed")

    def toggle(self) -> bool | None:
        """Returns True if shown, False if hidden, None when unsupported."""
        if not self.available:
            self.log.warning(f"[OSK] On-screen keyboard not supported on {sys.platform}")
            return None
        hwnd = self.find_window()
        if hwnd is None:
            self.show()
            return True
        self.hide(hwnd)
        return False
