#!/usr/bin/env python3
"""
main.py - Entry point for WinDeck Nexus
"""

import argparse
import ctypes
import sys
from pathlib import Path

from windeck.controller.bindings import InputConfig
from windeck.controller.engine import InputTranslationEngine
from windeck.controller.gamecontroller import GameController
from windeck.controller.injector import InputInjector
from windeck.discovery.scanner import DiscoveryConfig, DiscoveryService
from windeck.file.inireader import IniReader
from windeck.logger.logger import setup_logger
from windeck.shell.commands import ConsoleCommands
from windeck.shell.context import NexusContext
from windeck.shell.osk import OnScreenKeyboard
from windeck.shell.shell import NexusShell
from windeck.ui.bridge import UiBridge
from windeck.ui.surface import HeadlessSurface

APP_DIR = Path(__file__).resolve().parent


def check_single_instance(mutex_name="WinDeckNexusMutex"):
    """Ensure only one instance of this program runs (Windows only)."""
    if sys.platform != "win32":
        return None
    kernel32 = ctypes.windll.kernel32
    kernel32.CreateMutexW.restype = ctypes.c_void_p
    handle = kernel32.CreateMutexW(None, False, mutex_name)

    # ERROR_ALREADY_EXISTS = 183
    if kernel32.GetLastError() == 183:
        print("Another instance is already running.")
        sys.exit(1)
    return handle


# ----------------------------------------------------------------------
# Config selector
# ----------------------------------------------------------------------
def select_config_file(explicit: str | None, log):
    if explicit:
        return explicit

    # Look for *.ini files in current directory
    ini_files = sorted(Path(".").glob("*.ini"))
    if not ini_files:
        log.warning("No INI configuration file found, using built-in defaults.")
        return None

    if len(ini_files) == 1:
        log.info(f"Found only one config: {ini_files[0]}")
        return str(ini_files[0])

    # Multiple INIs → let user choose
    print("\nAvailable config files:")
    for idx, f in enumerate(ini_files, start=1):
        print(f"  {idx}. {f.name}")
    while True:
        try:
            choice = int(input("Select config file [1-{}]: ".format(len(ini_files))))
            if 1 <= choice <= len(ini_files):
                return str(ini_files[choice - 1])
        except ValueError:
            pass
        print("Invalid choice, try again.")


def _page(cfg, option: str, default: str) -> str:
    page = Path(cfg.get_str("ui", option, default))
    if not page.is_absolute():
        page = APP_DIR / page
    return page.as_uri()


# ----------------------------------------------------------------------
# Main runner
# ----------------------------------------------------------------------
def run_main(log, cfgfile):
    cfg = IniReader(cfgfile)

    input_cfg = InputConfig.from_ini(cfg, log)
    discovery_cfg = DiscoveryConfig.from_ini(cfg)

    games = DiscoveryService(log, discovery_cfg).scan()

    context = NexusContext()
    surface = HeadlessSurface(log)
    shell = NexusShell(
        log,
        context,
        surface,
        OnScreenKeyboard(log),
        config_page=_page(cfg, "guides_page", "ui/guides.html"),
        surface_factory=lambda title: HeadlessSurface(log, title),
    )

    source = GameController.from_ini(cfg, log)
    injector = InputInjector.create(log, use_sendinput=input_cfg.use_sendinput)
    engine = InputTranslationEngine(log, source, injector, context, input_cfg)
    engine.start()

    UiBridge(log, surface, games, _page(cfg, "index_page", "ui/index.html")).start()

    ConsoleCommands(log, shell).start()

    log.info("Chords: LeftThumb+RightThumb = toggle UI, Start+X = on-screen keyboard")
    try:
        shell.run()
    except KeyboardInterrupt:
        log.info("[EXIT] User aborted.")
        context.request_shutdown()
    finally:
        engine.join(timeout=1.0)
        source.close()


def main():
    check_single_instance()
    parser = argparse.ArgumentParser(description="WinDeck Nexus - drive the desktop with a gamepad")
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="INI config file (default: ask user if multiple exist)",
    )
    parser.add_argument(
        "--list-devices",
        action="store_true",
        help="Print connected controllers (index, GUID, name) and exit",
    )
    parser.add_argument("--log", default="windeck.log", help="Log file (overwritten each run)")
    args = parser.parse_args()

    if args.list_devices:
        for idx, guid, name in GameController.list_devices():
            print(f"  Index={idx:2d} | GUID={guid} | Name='{name}'")
        return

    log = setup_logger("windeck", logfile=args.log)
    log.info("Starting WinDeck Nexus")

    cfgfile = select_config_file(args.config, log)
    run_main(log, cfgfile)


if __name__ == "__main__":
    main()
