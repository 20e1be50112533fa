#!/usr/bin/env python3
"""
steam.py - Games installed through Steam.

    <steam>/steamapps/libraryfolders.vdf   -> extra library roots ("path" values)
    <root>/steamapps/appmanifest_*.acf     -> appid, name, installdir
    <root>/steamapps/common/<installdir>   -> searched for the first executable

A manifest that cannot be read, does not parse, lacks one of the three
fields or points at a missing directory is skipped; the rest of the library
is still reported.
"""

from pathlib import Path

from windeck.discovery import keyvalues
from windeck.discovery.executables import DEFAULT_EXE_SUFFIXES, resolve_game_path
from windeck.discovery.models import Game


def library_paths(vdf_text: str) -> list[str]:
    """Every "path" value of a libraryfolders.vdf document, in file order."""
    doc = keyvalues.loads(vdf_text)
    root = keyvalues.get_ci(doc, "libraryfolders")
    if root is None:
        # very old clients: "LibraryFolders" { "1" "D:\\Games" }
        root = next((v for v in doc.values() if isinstance(v, dict)), {})
    if not isinstance(root, dict):
        return []
    paths = []
    for key, entry in root.items():
        if isinstance(entry, dict):
            path = keyvalues.get_ci(entry, "path")
            if isinstance(path, str) and path:
                paths.append(path)
        elif key.isdigit() and entry:
            paths.append(entry)
    return paths


def parse_manifest(text: str) -> tuple[str, str, str] | None:
    """(appid, name, installdir) from an appmanifest, None when incomplete."""
    doc = keyvalues.loads(text)
    state = keyvalues.get_ci(doc, "AppState", doc)
    app_id = keyvalues.get_ci(state, "appid")
    name = keyvalues.get_ci(state, "name")
    install_dir = keyvalues.get_ci(state, "installdir")
    if not (isinstance(app_id, str) and app_id.isdigit()):
        return None
    if not (isinstance(name, str) and name and isinstance(install_dir, str) and install_dir):
        return None
    return app_id, name, install_dir


class SteamLibraryScanner:
    def __init__(self, log, steam_path, *, exe_suffixes=DEFAULT_EXE_SUFFIXES):
        self.log = log
        self.steam_path = Path(steam_path)
        self.exe_suffixes = exe_suffixes

    def library_roots(self) -> list[Path]:
        roots = [self.steam_path]
        vdf = self.steam_path / "steamapps" / "libraryfolders.vdf"
        try:
            text = vdf.read_text(encoding="utf-8", errors="replace")
            extra = library_paths(text)
        except FileNotFoundError:
            extra = []
        except (OSError, keyvalues.KeyValuesError) as exc:
            self.log.warning(f"[DISCOVERY] Cannot read {vdf}: {exc}")
            extra = []

        seen = {self._norm(self.steam_path)}
        for p in extra:
            path = Path(p)
            if self._norm(path) not in seen:
                seen.add(self._norm(path))
                roots.append(path)
        return roots

    @staticmethod
    def _norm(path: Path) -> str:
        return str(path).rstrip("\\/").lower()

    def games(self) -> list[Game]:
        found = []
        for root in self.library_roots():
            steamapps = root / "steamapps"
            if not steamapps.is_dir():
                self.log.debug(f"[DISCOVERY] No steamapps in {root}")
                continue
            for manifest in sorted(steamapps.glob("appmanifest_*.acf")):
                game = self._game_from_manifest(steamapps, manifest)
                if game is not None:
                    found.append(game)
        return found

    def _game_from_manifest(self, steamapps: Path, manifest: Path) -> Game | None:
        try:
            fields = parse_manifest(manifest.read_text(encoding="utf-8", errors="replace"))
        except (OSError, keyvalues.KeyValuesError) as exc:
            self.log.debug(f"[DISCOVERY] Skipping {manifest.name}: {exc}")
            return None
        if fields is None:
            self.log.debug(f"[DISCOVERY] Skipping {manifest.name}: incomplete manifest")
            return None

        app_id, name, install_dir = fields
        path = resolve_game_path(steamapps / "common" / install_dir, self.exe_suffixes)
        if path is None:
            self.log.debug(f"[DISCOVERY] Skipping {name}: install dir missing")
            return None
        return Game(name=name, path=path, app_id=app_id)
