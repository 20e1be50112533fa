"""
registry.py - Read-only access to the two registry locations discovery needs.

WindowsRegistry talks to the real registry through pywin32. NullRegistry is
used on other platforms and answers "nothing installed". Tests hand in their
own object with the same two methods.
"""

import sys

HKLM = "HKEY_LOCAL_MACHINE"
STEAM_KEY = r"SOFTWARE\Valve\Steam"
UNINSTALL_KEY = r"SOFTWARE\Microsoft\Windows\CurrentVersion\Uninstall"

KEY_WOW64_64KEY = 0x0100
KEY_WOW64_32KEY = 0x0200

UNINSTALL_FIELDS = ("DisplayName", "InstallLocation", "Publisher")


class NullRegistry:
    def steam_install_path(self) -> str | None:
        return None

    def uninstall_entries(self):
        return iter(())


class WindowsRegistry:
    def __init__(self, log=None):
        import pywintypes
        import win32api
        import win32con

        self.log = log
        self._api = win32api
        self._con = win32con
        self._error = pywintypes.error

    def _open(self, root, path: str, view: int):
        return self._api.RegOpenKeyEx(root, path, 0, self._con.KEY_READ | view)

    def _value(self, hkey, name: str) -> str | None:
        try:
            value, _kind = self._api.RegQueryValueEx(hkey, name)
        except self._error:
            return None
        return str(value) if value is not None else None

    def steam_install_path(self) -> str | None:
        try:
            hkey = self._open(self._con.HKEY_LOCAL_MACHINE, STEAM_KEY, KEY_WOW64_32KEY)
        except self._error:
            return None
        try:
            return self._value(hkey, "InstallPath")
        finally:
            self._api.RegCloseKey(hkey)

    def uninstall_entries(self):
        """Yield one {field: value-or-None} dict per uninstall subkey."""
        try:
            root = self._open(self._con.HKEY_LOCAL_MACHINE, UNINSTALL_KEY, KEY_WOW64_64KEY)
        except self._error as exc:
            if self.log:
                self.log.warning(f"[DISCOVERY] Cannot open uninstall inventory: {exc}")
            return
        try:
            for subkey, *_rest in self._api.RegEnumKeyEx(root):
                try:
                    hkey = self._api.RegOpenKeyEx(root, subkey, 0, self._con.KEY_READ | KEY_WOW64_64KEY)
                except self._error:
                    continue
                try:
                    yield {name: self._value(hkey, name) for name in UNINSTALL_FIELDS}
                finally:
                    self._api.RegCloseKey(hkey)
        finally:
            self._api.RegCloseKey(root)


def default_registry(log=None):
    if sys.platform == "win32":
        return WindowsRegistry(log)
    return NullRegistry()
