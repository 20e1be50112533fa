"""
context.py - State shared between the shell thread and the engine thread.

Both flags are threading.Event objects, so reads and writes are atomic.
The engine only ever reads `ui_visible`; only the shell writes it. Control
requests travel through `messages`, never through direct calls.
"""

import queue
import threading


class NexusContext:
    def __init__(self, *, max_messages: int = 64):
        self._running = threading.Event()
        self._running.set()
        self._ui_visible = threading.Event()
        self.messages: queue.Queue = queue.Queue(maxsize=max_messages)

    # --- running ---
    @property
    def running(self) -> bool:
        return self._running.is_set()

    def request_shutdown(self):
        self._running.clear()

    # --- visibility gate / suppression ---
    @property
    def ui_visible(self) -> bool:
        return self._ui_visible.is_set()

    def set_ui_visible(self, visible: bool):
        if visible:
            self._ui_visible.set()
        else:
            self._ui_visible.clear()

    @property
    def suppressed(self) -> bool:
        """Engine view of the gate: no gamepad translation while the UI is up."""
        return self._ui_visible.is_set()

    # --- hand-off ---
    def post(self, message) -> bool:
        """Queue a message for the shell thread without blocking the caller."""
        try:
            self.messages.put_nowait(message)
            return True
        except queue.Full:
            return False
