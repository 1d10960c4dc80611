from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .countdown import CountdownState


class InvalidState(Exception):
    """
    A configuration-type command was attempted while the engine it configures
    is running.
    """


class CountdownStatus(Enum):
    """
    The status of a countdown timer.
    """

    Idle = "Idle"
    Running = "Running"
    Paused = "Paused"
    Completed = "Completed"


class BreathingPhase(Enum):
    """
    One segment of a breathing cycle, or L{BreathingPhase.Idle} when no cycle
    is running.
    """

    Idle = "Idle"
    Inhale = "Inhale"
    Hold = "Hold"
    Exhale = "Exhale"


class CountdownObserver(Protocol):
    """
    Notifications delivered by a L{CountdownTimer}, synchronously, after the
    state they describe has taken effect.
    """

    def countdownTick(
        self, remainingSeconds: int, elapsedFraction: float
    ) -> None:
        """
        One second has elapsed; C{remainingSeconds} remain, and the session is
        C{elapsedFraction} complete.
        """

    def countdownCompleted(self) -> None:
        """
        The countdown reached zero.  Delivered exactly once per session, before
        the timer re-arms itself.
        """

    def countdownStatusChanged(self, state: CountdownState) -> None:
        """
        The countdown's status (or its configured duration) changed.
        """


class BreathingObserver(Protocol):
    """
    Notifications delivered by a L{BreathingCycle}.
    """

    def phaseChanged(self, phase: BreathingPhase, phaseSeconds: int) -> None:
        """
        A new phase began and will last C{phaseSeconds}; when the cycle stops,
        this is called with L{BreathingPhase.Idle} and 0.
        """


@dataclass
class NoCountdownObserver(CountdownObserver):
    """
    Do-nothing implementation of a countdown observer.
    """

    def countdownTick(
        self, remainingSeconds: int, elapsedFraction: float
    ) -> None:
        ...

    def countdownCompleted(self) -> None:
        ...

    def countdownStatusChanged(self, state: CountdownState) -> None:
        ...


@dataclass
class NoBreathingObserver(BreathingObserver):
    """
    Do-nothing implementation of a breathing observer.
    """

    def phaseChanged(self, phase: BreathingPhase, phaseSeconds: int) -> None:
        ...
