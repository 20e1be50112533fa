import os
from pathlib import Path

DEFAULT_EXE_SUFFIXES = (".exe",)


def find_first_executable(directory, suffixes=DEFAULT_EXE_SUFFIXES) -> Path | None:
    """First executable in a sorted, top-down walk of `directory` (files before subdirs)."""
    wanted = tuple(s.lower() for s in suffixes)
    for root, dirs, files in os.walk(directory):
        dirs.sort(key=str.lower)
        for name in sorted(files, key=str.lower):
            if name.lower().endswith(wanted):
                return Path(root) / name
    return None


def resolve_game_path(install_dir, suffixes=DEFAULT_EXE_SUFFIXES) -> str | None:
    """Executable inside the install dir, the dir itself if it holds none, None if it is gone."""
    install_dir = Path(install_dir)
    if not install_dir.is_dir():
        return None
    exe = find_first_executable(install_dir, suffixes)
    return str(exe if exe is not None else install_dir)
