# -*- test-case-name: stillpoint.model.test.test_sanctuary -*-
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from twisted.logger import Logger

from .boundaries import (
    BreathingObserver,
    CountdownObserver,
    CountdownStatus,
)
from .breathing import BreathingCycle
from .configuration import Configuration
from .countdown import CountdownTimer
from .scheduling import SchedulingPort

log = Logger()


class SanctuaryObserver(CountdownObserver, BreathingObserver, Protocol):
    """
    Something that wants to hear about both the countdown and the breathing
    cycle.
    """


@dataclass
class Sanctuary:
    """
    One relaxation session: a countdown and a breathing cycle, side by side,
    sharing nothing but a scheduler.  Commands here are the ones the user can
    actually issue, via buttons or keys.
    """

    countdown: CountdownTimer
    breathing: BreathingCycle
    configuration: Configuration = field(default_factory=Configuration)

    @classmethod
    def build(
        cls,
        scheduler: SchedulingPort,
        observer: SanctuaryObserver,
        configuration: Configuration | None = None,
    ) -> Sanctuary:
        if configuration is None:
            configuration = Configuration()
        return cls(
            CountdownTimer(scheduler, observer, configuration.defaultDuration),
            BreathingCycle(scheduler, observer, configuration.pattern()),
            configuration,
        )

    def selectDuration(self, seconds: int) -> bool:
        """
        Choose a new session length, unless the countdown is running, in which
        case the choice is ignored.

        @return: whether the duration was changed.
        """
        if self.countdown.state.status is CountdownStatus.Running:
            log.debug(
                "ignoring duration {seconds}s while running", seconds=seconds
            )
            return False
        self.countdown.configure(seconds)
        return True

    def selectPattern(self, name: str) -> bool:
        """
        Choose the breathing pattern called C{name}, unless breathing is
        underway, in which case the choice is ignored.

        @raise KeyError: if there's no pattern by that name.

        @return: whether the pattern was changed.
        """
        pattern = self.configuration.pattern(name)
        if self.breathing.active:
            log.debug("ignoring pattern {name} while breathing", name=name)
            return False
        self.breathing.selectPattern(pattern)
        return True

    def spacePressed(self) -> None:
        self.countdown.toggle()

    def escapePressed(self) -> None:
        """
        Abandon whatever is in progress.
        """
        if self.countdown.state.status is CountdownStatus.Running:
            self.countdown.reset()
        self.breathing.stop()
