# -*- test-case-name: stillpoint.model.test.test_scheduling -*-
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

from twisted.internet.interfaces import IReactorTime


class ScheduledHandle(Protocol):
    """
    A callback that has been scheduled to run later.
    """

    def active(self) -> bool:
        """
        Has this callback neither run nor been cancelled yet?
        """

    def cancel(self) -> None:
        """
        Prevent this callback from running.
        """


class SchedulingPort(Protocol):
    """
    The capability to run a callback after a delay, and to cancel it before it
    fires.
    """

    def schedule(
        self, delayMilliseconds: int, callback: Callable[[], None]
    ) -> ScheduledHandle:
        """
        Run C{callback} after C{delayMilliseconds}; return a handle which can
        be passed to L{SchedulingPort.cancel}.
        """

    def cancel(self, handle: ScheduledHandle) -> None:
        """
        Cancel the given C{handle}, if it has not already fired or been
        cancelled.
        """


@dataclass
class ReactorScheduler:
    """
    L{SchedulingPort} on top of a Twisted L{IReactorTime}, either the real
    reactor or a L{twisted.internet.task.Clock} in tests.
    """

    reactor: IReactorTime

    def schedule(
        self, delayMilliseconds: int, callback: Callable[[], None]
    ) -> ScheduledHandle:
        return self.reactor.callLater(delayMilliseconds / 1000.0, callback)

    def cancel(self, handle: ScheduledHandle) -> None:
        # IDelayedCall.cancel raises AlreadyCalled / AlreadyCancelled
        if handle.active():
            handle.cancel()


_ReactorSchedulerImplements: type[SchedulingPort] = ReactorScheduler
