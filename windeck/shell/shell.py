#!/usr/bin/env python3
"""
shell.py - UI-side message loop.

Owns the launcher surface and its visibility. The engine thread and the menu
post messages onto context.messages; everything that touches windows runs
here, on the shell thread.
"""

import queue
from enum import Enum

from windeck.controller.detector import ControlEvent


class MenuCommand(Enum):
    TOGGLE_UI = "toggle_ui"
    OPEN_CONFIG = "open_config"
    EXIT = "exit"


class NexusShell:
    def __init__(self, log, context, surface, osk, *, config_page: str = "", surface_factory=None):
        self.log = log
        self.context = context
        self.surface = surface
        self.osk = osk
        self.config_page = config_page
        self.surface_factory = surface_factory
        self.config_surface = None

    # ---------------------------------------------------------------
    # Message loop
    # ---------------------------------------------------------------
    def run(self, poll_timeout: float = 0.25):
        self.log.info("[SHELL] Running")
        while self.context.running:
            try:
                msg = self.context.messages.get(timeout=poll_timeout)
            except queue.Empty:
                continue
            self.dispatch(msg)
        self.log.info("[SHELL] Stopped")

    def pump(self) -> int:
        """Handle every queued message without blocking."""
        handled = 0
        while True:
            try:
                msg = self.context.messages.get_nowait()
            except queue.Empty:
                return handled
            self.dispatch(msg)
            handled += 1

    def post(self, command: MenuCommand):
        """Menu entry point: same queue as the engine uses."""
        self.context.post(command)

    def dispatch(self, msg):
        try:
            self._handle(msg)
        except Exception as exc:  # keep the loop alive for later messages
            self.log.warning(f"[SHELL] Handling {msg!r} failed: {exc!r}")

    def _handle(self, msg):
        if msg in (ControlEvent.TOGGLE_UI_REQUESTED, MenuCommand.TOGGLE_UI):
            self.toggle_ui()
        elif msg is ControlEvent.OSK_TOGGLE_REQUESTED:
            self.osk.toggle()
        elif msg is MenuCommand.OPEN_CONFIG:
            self.open_config()
        elif msg is MenuCommand.EXIT:
            self.exit()
        else:
            self.log.warning(f"[SHELL] Unknown message: {msg!r}")

    # ---------------------------------------------------------------
    # Actions
    # ---------------------------------------------------------------
    def toggle_ui(self):
        visible = not self.context.ui_visible
        self.context.set_ui_visible(visible)
        if visible:
            self.surface.show()
        else:
            self.surface.hide()
        self.log.info(f"[SHELL] UI {'VISIBLE (gamepad translation paused)' if visible else 'HIDDEN'}")

    def open_config(self):
        if self.config_surface is not None:
            self.config_surface.show()
            return
        if self.surface_factory is None:
            self.log.warning("[SHELL] No configuration surface available")
            return
        self.config_surface = self.surface_factory("WinDeck Nexus Guides")
        self.config_surface.create_environment()
        self.config_surface.create_controller()
        self.config_surface.show()
        self.config_surface.navigate(self.config_page)

    def exit(self):
        self.log.info("[SHELL] Exit requested")
        self.context.request_shutdown()
        self.surface.close()
        if self.config_surface is not None:
            self.config_surface.close()
