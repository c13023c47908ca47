from __future__ import annotations

from handgest.streaming.config import default_engine_config
from handgest.streaming.mode import Mode, ModeStateMachine, ModeTransition, TransitionEffect

CONFIG = default_engine_config()
UP, DOWN = CONFIG.gestures


def _machine() -> ModeStateMachine:
    return ModeStateMachine(transitions=CONFIG.transitions)


def test_starts_waiting():
    assert _machine().current is Mode.WAITING


def test_enter_fires_once():
    m = _machine()

    first = m.update([UP])
    second = m.update([UP])

    assert first == ModeTransition(Mode.WAITING, Mode.GESTURE)
    assert first.entered and not first.exited
    assert second == ModeTransition(Mode.GESTURE, Mode.GESTURE)
    assert not second.entered and not second.changed


def test_exit_returns_to_waiting():
    m = _machine()
    m.update([UP])

    t = m.update([DOWN])

    assert t.exited
    assert m.current is Mode.WAITING


def test_no_trigger_holds_mode():
    m = _machine()
    m.update([UP])

    assert m.update([]).current is Mode.GESTURE


def test_non_trigger_gesture_holds_mode():
    m = ModeStateMachine(transitions={"Hand up": TransitionEffect.ENTER_GESTURE})

    assert m.update([DOWN]).current is Mode.WAITING
    m.update([UP])
    assert m.update([DOWN]).current is Mode.GESTURE


def test_enter_wins_when_both_triggers_active():
    m = _machine()

    assert m.update([DOWN, UP]).current is Mode.GESTURE


def test_exit_while_waiting_is_not_an_edge():
    t = _machine().update([DOWN])

    assert not t.exited and not t.changed
