from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from handgest.streaming.bands import GestureDefinition

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    WAITING = "waiting"
    GESTURE = "gesture"


class TransitionEffect(str, Enum):
    ENTER_GESTURE = "enter_gesture"
    EXIT_GESTURE = "exit_gesture"
    NO_EFFECT = "no_effect"


@dataclass(frozen=True)
class ModeTransition:
    previous: Mode
    current: Mode

    @property
    def entered(self) -> bool:
        return self.previous is not Mode.GESTURE and self.current is Mode.GESTURE

    @property
    def exited(self) -> bool:
        return self.previous is Mode.GESTURE and self.current is Mode.WAITING

    @property
    def changed(self) -> bool:
        return self.previous is not self.current


class ModeStateMachine:
    """Two-state WAITING/GESTURE mode driven by trigger gestures.

    An active ENTER_GESTURE trigger wins over an active EXIT_GESTURE trigger.
    With no trigger active the mode holds.
    """

    def __init__(self, *, transitions: Mapping[str, TransitionEffect]):
        self.transitions = dict(transitions)
        self.current: Mode = Mode.WAITING

    def _effects(self, active: Sequence[GestureDefinition]) -> set[TransitionEffect]:
        return {self.transitions.get(g.name, TransitionEffect.NO_EFFECT) for g in active}

    def update(self, active: Sequence[GestureDefinition]) -> ModeTransition:
        previous = self.current
        effects = self._effects(active)

        if TransitionEffect.ENTER_GESTURE in effects:
            self.current = Mode.GESTURE
        elif TransitionEffect.EXIT_GESTURE in effects:
            self.current = Mode.WAITING

        transition = ModeTransition(previous=previous, current=self.current)
        if transition.changed:
            logger.info("Mode %s -> %s", previous.value, self.current.value)
        return transition
