#!/usr/bin/env python3
"""
commands.py - Menu commands typed in the console window.

    t / toggle   show or hide the launcher (the only way back once it is shown)
    c / config   open the guides page
    q / exit     quit
    ?            list the commands

Lines are read on a daemon thread and posted to the shell queue like every
other request; nothing here touches the UI directly.
"""

import sys
import threading

from windeck.shell.shell import MenuCommand

COMMANDS = {
    "t": MenuCommand.TOGGLE_UI,
    "toggle": MenuCommand.TOGGLE_UI,
    "c": MenuCommand.OPEN_CONFIG,
    "config": MenuCommand.OPEN_CONFIG,
    "q": MenuCommand.EXIT,
    "quit": MenuCommand.EXIT,
    "exit": MenuCommand.EXIT,
}

HELP = "Commands: t=toggle UI, c=guides, q=exit"


class ConsoleCommands:
    def __init__(self, log, shell, stream=None):
        self.log = log
        self.shell = shell
        self.stream = stream
        self._thread: threading.Thread | None = None

    def handle(self, line: str) -> MenuCommand | None:
        text = line.strip().lower()
        if not text:
            return None
        if text == "?":
            print(HELP)
            return None
        command = COMMANDS.get(text)
        if command is None:
            self.log.warning(f"[CONSOLE] Unknown command '{text}' ({HELP})")
            return None
        self.log.info(f"[CONSOLE] {command.name}")
        self.shell.post(command)
        return command

    def run(self):
        stream = self.stream or sys.stdin
        try:
            for line in stream:
                if self.handle(line) is MenuCommand.EXIT:
                    return
        except (OSError, ValueError) as exc:
            self.log.warning(f"[CONSOLE] Command input closed: {exc}")

    def start(self) -> bool:
        stream = self.stream or sys.stdin
        if stream is None or (self.stream is None and not stream.isatty()):
            self.log.info("[CONSOLE] Console commands disabled (stdin not interactive)")
            return False
        self._thread = threading.Thread(target=self.run, name="windeck-console", daemon=True)
        self._thread.start()
        self.log.info(f"[CONSOLE] {HELP}")
        return True
