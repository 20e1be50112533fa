#!/usr/bin/env python3
"""
executor.py - Executes detector actions:
- key taps through the injector
- relative pointer motion and wheel scrolling
- control requests posted to the shell queue (never called directly, the
  shell may be busy with window work that must stay on its own thread)

A failing action is logged and skipped; the remaining actions of the cycle
still run.
"""

from windeck.controller.detector import ControlRequest, KeyTap, PointerMove, Scroll


class InputExecutor:
    def __init__(self, log, injector, context):
        self.log = log
        self.injector = injector
        self.context = context

    def execute(self, actions):
        for action in actions:
            try:
                self.handle_action(action)
            except Exception as exc:  # injection backends raise OSError, pyautogui its own errors
                self.log.warning(f"[EXECUTOR] {action!r} failed: {exc!r}")

    def handle_action(self, action):
        if isinstance(action, KeyTap):
            self.injector.press_key(action.key)

        elif isinstance(action, PointerMove):
            self.injector.move_pointer(action.dx, action.dy)

        elif isinstance(action, Scroll):
            self.injector.scroll(action.delta)

        elif isinstance(action, ControlRequest):
            if self.context.post(action.event):
                self.log.debug(f"[EXECUTOR] posted {action.event.name}")
            else:
                self.log.warning(f"[EXECUTOR] shell queue full, dropped {action.event.name}")

        else:
            self.log.warning(f"[EXECUTOR] Unsupported action: {action!r}")
