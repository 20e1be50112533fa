#!/usr/bin/env python3
"""
engine.py - Input translation engine: fixed-cadence polling loop.

One cycle:
  1. read the suppression snapshot (UI visible -> do nothing this cycle)
  2. poll the controller; no frame -> skip detection/injection
  3. detect against the previous frame and execute the actions
  4. remember the frame (only when one was actually read)
then sleep the fixed interval, whatever happened.

While suppressed the controller is not read at all, so the previous frame
stays as it was before suppression began. The first cycle after the UI is
hidden again compares against that older frame.
"""

import threading
import time

from windeck.controller.detector import GestureDetector
from windeck.controller.executor import InputExecutor
from windeck.controller.frame import NEUTRAL_FRAME, GamepadFrame


class InputTranslationEngine:
    def __init__(self, log, source, injector, context, input_cfg, *, sleep=time.sleep):
        self.log = log
        self.source = source
        self.context = context
        self.input_cfg = input_cfg
        self.detector = GestureDetector(log, input_cfg)
        self.executor = InputExecutor(log, injector, context)
        self.previous_frame: GamepadFrame = NEUTRAL_FRAME
        self._sleep = sleep
        self._thread: threading.Thread | None = None
        self._was_available = None

    # ------------------------------------------------------------------
    # One cycle
    # ------------------------------------------------------------------
    def step(self) -> bool:
        """Run a single cycle without sleeping. Returns True if a frame was processed."""
        if self.context.suppressed:
            return False

        try:
            frame = self.source.poll()
        except Exception as exc:  # a driver blowing up counts as "no input"
            self.log.debug(f"[ENGINE] poll raised {exc!r}; skipping cycle")
            frame = None

        self._note_availability(frame is not None)
        if frame is None:
            return False

        try:
            self.executor.execute(self.detector.detect(self.previous_frame, frame))
        except Exception as exc:
            self.log.warning(f"[ENGINE] cycle failed: {exc!r}")
        self.previous_frame = frame
        return True

    def _note_availability(self, available: bool):
        if available != self._was_available:
            if available:
                self.log.info("[ENGINE] Controller input available")
            elif self._was_available is not None:
                self.log.warning("[ENGINE] Controller input unavailable, skipping frames")
            self._was_available = available

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------
    def run(self):
        interval = self.input_cfg.poll_interval
        self.log.info(f"[ENGINE] Polling every {interval * 1000:.0f} ms")
        while self.context.running:
            self.step()
            self._sleep(interval)
        self.log.info("[ENGINE] Stopped")

    def start(self):
        self._thread = threading.Thread(target=self.run, name="windeck-engine", daemon=True)
        self._thread.start()
        return self._thread

    def join(self, timeout: float | None = None):
        if self._thread is not None:
            self._thread.join(timeout)
