#!/usr/bin/env python3
"""
scanner.py - DiscoveryService: Steam library first, then the Windows
uninstall inventory. One bad entry (or one whole source failing) never
aborts the scan.
"""

from dataclasses import dataclass

from windeck.discovery.executables import DEFAULT_EXE_SUFFIXES, resolve_game_path
from windeck.discovery.models import Game
from windeck.discovery.registry import default_registry
from windeck.discovery.steam import SteamLibraryScanner


@dataclass
class DiscoveryConfig:
    steam_enabled: bool = True
    registry_enabled: bool = True
    steam_path: str = ""
    vendor_markers: tuple = ("Microsoft",)
    exclude_name_markers: tuple = ("Update",)
    exe_suffixes: tuple = DEFAULT_EXE_SUFFIXES

    @classmethod
    def from_ini(cls, cfg):
        obj = cls()
        obj.steam_enabled = cfg.get_bool("discovery", "steam", obj.steam_enabled)
        obj.registry_enabled = cfg.get_bool("discovery", "registry", obj.registry_enabled)
        obj.steam_path = cfg.get_str("discovery", "steam_path", obj.steam_path)
        if cfg.has("discovery", "vendor_markers"):
            obj.vendor_markers = tuple(cfg.get_list("discovery", "vendor_markers"))
        if cfg.has("discovery", "exclude_name_markers"):
            obj.exclude_name_markers = tuple(cfg.get_list("discovery", "exclude_name_markers"))
        if cfg.has("discovery", "exe_suffixes"):
            obj.exe_suffixes = tuple(cfg.get_list("discovery", "exe_suffixes")) or DEFAULT_EXE_SUFFIXES
        return obj


def is_listed_application(name: str, publisher: str, cfg: DiscoveryConfig) -> bool:
    """Uninstall-inventory filter: drop platform vendor software and updates."""
    if not name:
        return False
    if any(m and m in (publisher or "") for m in cfg.vendor_markers):
        return False
    if any(m and m in name for m in cfg.exclude_name_markers):
        return False
    return True


class DiscoveryService:
    def __init__(self, log, cfg: DiscoveryConfig | None = None, registry=None):
        self.log = log
        self.cfg = cfg or DiscoveryConfig()
        self.registry = registry if registry is not None else default_registry(log)

    def scan(self) -> list[Game]:
        games: list[Game] = []
        if self.cfg.steam_enabled:
            games.extend(self._scan_source("steam", self.steam_games))
        if self.cfg.registry_enabled:
            games.extend(self._scan_source("registry", self.registry_games))
        self.log.info(f"[DISCOVERY] Found {len(games)} games")
        return games

    def _scan_source(self, label, scan):
        try:
            found = scan()
        except Exception as exc:  # one broken source must not hide the others
            self.log.warning(f"[DISCOVERY] {label} scan failed: {exc!r}")
            return []
        self.log.info(f"[DISCOVERY] {label}: {len(found)} entries")
        return found

    # ---------------- Steam ----------------
    def steam_games(self) -> list[Game]:
        steam_path = self.cfg.steam_path or self.registry.steam_install_path()
        if not steam_path:
            self.log.info("[DISCOVERY] Steam not installed")
            return []
        return SteamLibraryScanner(
            self.log, steam_path, exe_suffixes=self.cfg.exe_suffixes
        ).games()

    # ---------------- Uninstall inventory ----------------
    def registry_games(self) -> list[Game]:
        games = []
        for entry in self.registry.uninstall_entries():
            name = (entry.get("DisplayName") or "").strip()
            location = (entry.get("InstallLocation") or "").strip().strip('"')
            publisher = entry.get("Publisher") or ""
            if not location or not is_listed_application(name, publisher, self.cfg):
                continue
            path = resolve_game_path(location, self.cfg.exe_suffixes)
            if path is None:
                self.log.debug(f"[DISCOVERY] Skipping {name}: {location} missing")
                continue
            games.append(Game(name=name, path=path))
        return games
