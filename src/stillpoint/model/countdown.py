# -*- test-case-name: stillpoint.model.test.test_countdown -*-
from __future__ import annotations

from dataclasses import dataclass, field

from twisted.logger import Logger

from .boundaries import (
    CountdownObserver,
    CountdownStatus,
    InvalidState,
    NoCountdownObserver,
)
from .scheduling import ScheduledHandle, SchedulingPort

log = Logger()

TICK_MILLISECONDS = 1000
DEFAULT_DURATION = 5 * 60


def checkDuration(seconds: int) -> int:
    """
    Make sure that C{seconds} is a usable session length: a positive, whole
    number of seconds.
    """
    if isinstance(seconds, bool) or not isinstance(seconds, int):
        raise ValueError(f"{seconds!r} is not a whole number of seconds")
    if seconds < 1:
        raise ValueError(f"{seconds} is not a positive number of seconds")
    return seconds


@dataclass(frozen=True)
class CountdownState:
    """
    A snapshot of a L{CountdownTimer}.
    """

    totalSeconds: int
    remainingSeconds: int
    status: CountdownStatus

    @property
    def elapsedFraction(self) -> float:
        """
        The proportion of the session consumed so far, between 0.0 and 1.0.
        """
        return (self.totalSeconds - self.remainingSeconds) / self.totalSeconds


@dataclass
class CountdownTimer:
    """
    A meditation countdown, ticking once per second while running.

    When the countdown reaches zero it reports completion and then immediately
    re-arms itself, returning to L{CountdownStatus.Idle} with the full
    configured duration remaining.
    """

    _scheduler: SchedulingPort
    "Where ticks get scheduled."

    _observer: CountdownObserver = field(default_factory=NoCountdownObserver)
    "Who to tell about ticks, completion and status changes."

    _totalSeconds: int = DEFAULT_DURATION
    "The configured session length."

    _remainingSeconds: int = field(init=False, default=0)
    _status: CountdownStatus = field(init=False, default=CountdownStatus.Idle)

    _pendingTick: ScheduledHandle | None = field(init=False, default=None)
    "The one outstanding tick, if we are running."

    _generation: int = field(init=False, default=0)
    """
    Incremented every time the pending tick is cancelled, so that a tick which
    fires anyway can tell that it is stale.
    """

    def __post_init__(self) -> None:
        checkDuration(self._totalSeconds)
        self._remainingSeconds = self._totalSeconds

    @property
    def state(self) -> CountdownState:
        return CountdownState(
            self._totalSeconds, self._remainingSeconds, self._status
        )

    def configure(self, duration: int) -> CountdownState:
        """
        Set the session length to C{duration} seconds, discarding any progress.

        @raise InvalidState: if the countdown is running.
        """
        if self._status is CountdownStatus.Running:
            raise InvalidState(
                f"cannot configure a {duration}s session while the countdown "
                f"is running"
            )
        checkDuration(duration)
        self._cancelPending()
        self._totalSeconds = self._remainingSeconds = duration
        log.debug("countdown configured for {duration}s", duration=duration)
        self._setStatus(CountdownStatus.Idle)
        return self.state

    def start(self) -> CountdownState:
        """
        Start (or resume) counting down.
        """
        if self._status is CountdownStatus.Running:
            return self.state
        self._cancelPending()
        generation = self._generation
        self._setStatus(CountdownStatus.Running)
        if generation != self._generation:
            return self.state
        self._scheduleTick()
        log.debug(
            "countdown running, {remaining}/{total}s left",
            remaining=self._remainingSeconds,
            total=self._totalSeconds,
        )
        return self.state

    def pause(self) -> CountdownState:
        """
        Stop counting down, keeping the remaining time.

        A countdown which has just reached zero is already completing, so
        pausing it then does nothing.
        """
        if (
            self._status is not CountdownStatus.Running
            or self._remainingSeconds == 0
        ):
            return self.state
        self._cancelPending()
        self._setStatus(CountdownStatus.Paused)
        return self.state

    def reset(self) -> CountdownState:
        """
        Stop counting down and restore the full configured duration.
        """
        self._cancelPending()
        self._remainingSeconds = self._totalSeconds
        self._setStatus(CountdownStatus.Idle)
        return self.state

    def toggle(self) -> CountdownState:
        """
        Pause if running, start otherwise.
        """
        if self._status is CountdownStatus.Running:
            return self.pause()
        return self.start()

    def _setStatus(self, status: CountdownStatus) -> None:
        self._status = status
        self._observer.countdownStatusChanged(self.state)

    def _cancelPending(self) -> None:
        self._generation += 1
        pending, self._pendingTick = self._pendingTick, None
        if pending is not None:
            self._scheduler.cancel(pending)

    def _scheduleTick(self) -> None:
        generation = self._generation

        def tick() -> None:
            self._tick(generation)

        self._pendingTick = self._scheduler.schedule(TICK_MILLISECONDS, tick)

    def _tick(self, generation: int) -> None:
        if (
            generation != self._generation
            or self._status is not CountdownStatus.Running
        ):
            log.debug("ignoring stale countdown tick")
            return
        self._pendingTick = None
        self._remainingSeconds -= 1
        self._observer.countdownTick(
            self._remainingSeconds, self.state.elapsedFraction
        )
        if generation != self._generation:
            # the observer paused or reset us from within the notification
            return
        if self._remainingSeconds > 0:
            self._scheduleTick()
            return
        log.info(
            "countdown of {total}s completed", total=self._totalSeconds
        )
        self._setStatus(CountdownStatus.Completed)
        self._observer.countdownCompleted()
        self.reset()
