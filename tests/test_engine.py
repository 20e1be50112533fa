"""Tests for the polling loop and its suppression / failure handling."""
from __future__ import annotations

from windeck.controller.detector import ControlEvent
from windeck.controller.engine import InputTranslationEngine
from windeck.controller.frame import NEUTRAL_FRAME, Button

from conftest import FakeInjector, FakeSource, frame


def _engine(log, input_cfg, context, frames, **kwargs):
    source = FakeSource(frames)
    injector = FakeInjector()
    engine = InputTranslationEngine(log, source, injector, context, input_cfg, **kwargs)
    return engine, source, injector


def _queued(context):
    out = []
    while not context.messages.empty():
        out.append(context.messages.get_nowait())
    return out


def test_held_button_produces_one_key_press(log, input_cfg, context):
    engine, _, injector = _engine(log, input_cfg, context, [frame(Button.A)] * 10)
    for _ in range(10):
        engine.step()
    assert injector.keys == ["Enter"]


def test_previous_frame_tracks_last_read_frame(log, input_cfg, context):
    engine, _, _ = _engine(log, input_cfg, context, [frame(Button.B), frame(Button.Y)])
    assert engine.previous_frame == NEUTRAL_FRAME
    engine.step()
    assert engine.previous_frame == frame(Button.B)
    engine.step()
    assert engine.previous_frame == frame(Button.Y)


def test_failed_read_skips_cycle_and_keeps_history(log, input_cfg, context):
    held = frame(Button.A, left_x=32767)
    engine, source, injector = _engine(log, input_cfg, context, [held, None, None, held])
    results = [engine.step() for _ in range(4)]
    assert results == [True, False, False, True]
    assert source.polls == 4
    # reconnect with A still down is not a new press
    assert injector.keys == ["Enter"]
    # pointer motion only in the two cycles that had a frame
    assert injector.moves == [(15, 0), (15, 0)]
    assert engine.previous_frame == held


def test_source_exception_counts_as_unavailable(log, input_cfg, context):
    class Exploding:
        def poll(self):
            raise RuntimeError("driver went away")

    engine = InputTranslationEngine(log, Exploding(), FakeInjector(), context, input_cfg)
    assert engine.step() is False
    assert engine.previous_frame == NEUTRAL_FRAME


def test_suppressed_cycle_injects_nothing_and_does_not_poll(log, input_cfg, context):
    busy = frame(Button.A, Button.B, Button.LEFT_THUMB, Button.RIGHT_THUMB,
                 left_x=32767, right_y=32767)
    engine, source, injector = _engine(log, input_cfg, context, [busy, busy])
    context.set_ui_visible(True)
    for _ in range(3):
        assert engine.step() is False
    assert source.polls == 0
    assert injector.total == 0
    assert _queued(context) == []


def test_previous_frame_goes_stale_while_suppressed(log, input_cfg, context):
    engine, _, injector = _engine(
        log, input_cfg, context, [frame(Button.A), frame(Button.A), NEUTRAL_FRAME, frame(Button.B)]
    )
    engine.step()                      # A pressed -> Enter
    context.set_ui_visible(True)
    engine.step()                      # suppressed, nothing read
    context.set_ui_visible(False)
    engine.step()                      # A still held: compared with pre-suppression frame
    assert injector.keys == ["Enter"]
    engine.step()
    engine.step()
    assert injector.keys == ["Enter", "Escape"]


def test_chord_held_through_suppression_does_not_refire(log, input_cfg, context):
    both = frame(Button.LEFT_THUMB, Button.RIGHT_THUMB)
    engine, _, _ = _engine(log, input_cfg, context, [both, both, both])
    engine.step()
    assert _queued(context) == [ControlEvent.TOGGLE_UI_REQUESTED]
    context.set_ui_visible(True)
    engine.step()
    context.set_ui_visible(False)
    engine.step()
    engine.step()
    assert _queued(context) == []


def test_control_events_are_posted_not_called(log, input_cfg, context):
    engine, _, injector = _engine(
        log, input_cfg, context,
        [frame(Button.START), frame(Button.START, Button.X),
         frame(Button.LEFT_THUMB, Button.RIGHT_THUMB)],
    )
    for _ in range(3):
        engine.step()
    assert _queued(context) == [
        ControlEvent.OSK_TOGGLE_REQUESTED,
        ControlEvent.TOGGLE_UI_REQUESTED,
    ]
    assert injector.keys == ["LWin"]


def test_full_queue_drops_request_without_blocking(log, input_cfg):
    from windeck.shell.context import NexusContext

    context = NexusContext(max_messages=1)
    both = frame(Button.LEFT_THUMB, Button.RIGHT_THUMB)
    engine, _, _ = _engine(log, input_cfg, context, [both, NEUTRAL_FRAME, both])
    for _ in range(3):
        engine.step()
    assert context.messages.qsize() == 1


def test_run_sleeps_fixed_interval_and_stops_on_shutdown(log, input_cfg, context):
    sleeps = []

    def fake_sleep(seconds):
        sleeps.append(seconds)
        if len(sleeps) == 3:
            context.request_shutdown()

    engine, source, _ = _engine(log, input_cfg, context, [None, frame(Button.A)], sleep=fake_sleep)
    engine.run()
    assert sleeps == [0.016, 0.016, 0.016]
    assert source.polls == 3


def test_run_keeps_sleeping_while_suppressed(log, input_cfg, context):
    sleeps = []

    def fake_sleep(seconds):
        sleeps.append(seconds)
        if len(sleeps) == 2:
            context.request_shutdown()

    context.set_ui_visible(True)
    engine, source, _ = _engine(log, input_cfg, context, [], sleep=fake_sleep)
    engine.run()
    assert len(sleeps) == 2
    assert source.polls == 0


def test_start_runs_on_background_thread(log, input_cfg, context):
    engine, _, injector = _engine(log, input_cfg, context, [frame(Button.B)],
                                  sleep=lambda s: context.request_shutdown())
    thread = engine.start()
    engine.join(timeout=2.0)
    assert not thread.is_alive()
    assert thread.daemon
    assert injector.keys == ["Escape"]


def test_injection_failure_keeps_engine_running(log, input_cfg, context, caplog):
    class RefusingInjector(FakeInjector):
        def press_key(self, key):
            raise OSError("injection refused")

    sleeps = []

    def fake_sleep(seconds):
        sleeps.append(seconds)
        if len(sleeps) == 2:
            context.request_shutdown()

    injector = RefusingInjector()
    source = FakeSource([frame(Button.A, left_x=32767), frame(left_x=32767)])
    engine = InputTranslationEngine(log, source, injector, context, input_cfg, sleep=fake_sleep)
    with caplog.at_level("WARNING"):
        engine.run()
    assert sleeps == [0.016, 0.016]
    # the move queued after the failed key tap still went out
    assert injector.moves == [(15, 0), (15, 0)]
    assert engine.previous_frame == frame(left_x=32767)
    assert "injection refused" in caplog.text


def test_detector_failure_skips_cycle_only(log, input_cfg, context):
    engine, _, injector = _engine(log, input_cfg, context, [frame(Button.A), frame(Button.B)])

    def explode(prev, cur):
        raise RuntimeError("bad frame")

    real_detect = engine.detector.detect
    engine.detector.detect = explode
    assert engine.step() is True
    assert engine.previous_frame == frame(Button.A)
    engine.detector.detect = real_detect
    engine.step()
    assert injector.keys == ["Escape"]
