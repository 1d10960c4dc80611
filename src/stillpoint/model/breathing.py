# -*- test-case-name: stillpoint.model.test.test_breathing -*-
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from twisted.logger import Logger

from .boundaries import (
    BreathingObserver,
    BreathingPhase,
    InvalidState,
    NoBreathingObserver,
)
from .countdown import checkDuration
from .scheduling import ScheduledHandle, SchedulingPort

log = Logger()


@dataclass(frozen=True)
class PhaseStep:
    """
    How long a phase lasts, and which phase follows it.
    """

    seconds: int
    nextPhase: BreathingPhase


@dataclass(frozen=True)
class BreathingPattern:
    """
    A named breathing exercise: how long to inhale, hold, and exhale.  A
    C{holdSeconds} of 0 skips the hold entirely.
    """

    name: str
    inhaleSeconds: int
    holdSeconds: int
    exhaleSeconds: int

    def __post_init__(self) -> None:
        checkDuration(self.inhaleSeconds)
        checkDuration(self.exhaleSeconds)
        if isinstance(self.holdSeconds, bool) or not isinstance(
            self.holdSeconds, int
        ):
            raise ValueError(f"{self.holdSeconds!r} is not a hold duration")
        if self.holdSeconds < 0:
            raise ValueError(f"negative hold duration {self.holdSeconds}")

    def phaseTable(self) -> Mapping[BreathingPhase, PhaseStep]:
        """
        The repeating cycle described by this pattern.
        """
        table = {
            BreathingPhase.Inhale: PhaseStep(
                self.inhaleSeconds,
                BreathingPhase.Hold
                if self.holdSeconds
                else BreathingPhase.Exhale,
            ),
            BreathingPhase.Exhale: PhaseStep(
                self.exhaleSeconds, BreathingPhase.Inhale
            ),
        }
        if self.holdSeconds:
            table[BreathingPhase.Hold] = PhaseStep(
                self.holdSeconds, BreathingPhase.Exhale
            )
        return table


relaxingBreath = BreathingPattern("4-7-8", 4, 7, 8)
boxBreath = BreathingPattern("4-4-4", 4, 4, 4)
simpleBreath = BreathingPattern("simple", 4, 0, 4)

builtinPatterns: Mapping[str, BreathingPattern] = {
    each.name: each for each in [relaxingBreath, boxBreath, simpleBreath]
}


@dataclass(frozen=True)
class BreathingState:
    """
    A snapshot of a L{BreathingCycle}.
    """

    pattern: BreathingPattern
    phase: BreathingPhase

    @property
    def active(self) -> bool:
        return self.phase is not BreathingPhase.Idle


@dataclass
class BreathingCycle:
    """
    Guided breathing: cycles through the phases of a L{BreathingPattern}
    until stopped.
    """

    _scheduler: SchedulingPort
    _observer: BreathingObserver = field(default_factory=NoBreathingObserver)
    _pattern: BreathingPattern = relaxingBreath
    "The pattern the next cycle will follow."

    _phase: BreathingPhase = field(init=False, default=BreathingPhase.Idle)
    _table: Mapping[BreathingPhase, PhaseStep] = field(
        init=False, default_factory=dict
    )
    """
    How long each phase of the current cycle lasts and which phase follows
    it, built from C{_pattern} when the cycle starts.
    """

    _pendingAdvance: ScheduledHandle | None = field(init=False, default=None)
    "The scheduled move to the next phase, if the cycle is running."

    _generation: int = field(init=False, default=0)
    """
    Incremented whenever a pending advance is cancelled, so that an advance
    from an earlier run can tell it is stale.
    """

    @property
    def active(self) -> bool:
        return self._phase is not BreathingPhase.Idle

    @property
    def state(self) -> BreathingState:
        return BreathingState(self._pattern, self._phase)

    def selectPattern(self, pattern: BreathingPattern) -> BreathingState:
        """
        Use C{pattern} the next time the cycle starts.

        @raise InvalidState: if the cycle is running.
        """
        if self.active:
            raise InvalidState(
                f"cannot select pattern {pattern.name!r} while breathing "
                f"({self._phase.value})"
            )
        self._pattern = pattern
        return self.state

    def start(self) -> BreathingState:
        if self.active:
            return self.state
        self._cancelPending()
        self._table = self._pattern.phaseTable()
        log.debug("breathing started: {pattern}", pattern=self._pattern.name)
        self._enter(BreathingPhase.Inhale)
        return self.state

    def stop(self) -> BreathingState:
        if not self.active:
            return self.state
        self._cancelPending()
        self._phase = BreathingPhase.Idle
        log.debug("breathing stopped")
        self._observer.phaseChanged(BreathingPhase.Idle, 0)
        return self.state

    def toggle(self) -> BreathingState:
        if self.active:
            return self.stop()
        return self.start()

    def _cancelPending(self) -> None:
        self._generation += 1
        pending, self._pendingAdvance = self._pendingAdvance, None
        if pending is not None:
            self._scheduler.cancel(pending)

    def _enter(self, phase: BreathingPhase) -> None:
        generation = self._generation
        seconds = self._table[phase].seconds
        self._phase = phase
        self._observer.phaseChanged(phase, seconds)
        if generation != self._generation:
            # stopped from within the notification
            return

        def advance() -> None:
            self._advance(generation)

        self._pendingAdvance = self._scheduler.schedule(
            seconds * 1000, advance
        )

    def _advance(self, generation: int) -> None:
        if generation != self._generation or not self.active:
            log.debug("ignoring stale breathing phase advance")
            return
        self._pendingAdvance = None
        self._enter(self._table[self._phase].nextPhase)
