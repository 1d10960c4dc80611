# -*- test-case-name: stillpoint.test.test_terminal -*-
"""
A presentation adapter that renders a L{Sanctuary} as lines of text, and the
C{stillpoint} command that uses it.
"""
from __future__ import annotations

import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import IO, Iterator, Sequence

from twisted.internet.defer import Deferred
from twisted.internet.interfaces import IReactorTime
from twisted.internet.task import react
from twisted.logger import (
    FilteringLogObserver,
    Logger,
    LogLevel,
    LogLevelFilterPredicate,
    globalLogBeginner,
    textFileLogObserver,
)
from twisted.python import usage
from twisted.python.failure import Failure
from twisted.python.filepath import FilePath

from .model.boundaries import BreathingPhase
from .model.configuration import Configuration, loadConfiguration
from .model.countdown import CountdownState, checkDuration
from .model.display import (
    clockFace,
    completionMessage,
    instructionFor,
    startButtonLabel,
)
from .model.sanctuary import Sanctuary, SanctuaryObserver
from .model.scheduling import ReactorScheduler

log = Logger()


@contextmanager
def showFailures() -> Iterator[None]:
    """
    Print a traceback to stderr if the wrapped operation fails, then let the
    exception continue on its way.
    """
    try:
        yield
    except Exception:
        sys.stderr.write(Failure().getTraceback())
        raise


@dataclass
class TerminalPresenter:
    """
    Writes one line per notification to C{stream}.
    """

    stream: IO[str]
    completed: Deferred[None] = field(default_factory=Deferred)
    "Fires the first time a countdown completes."
    totalSeconds: int = field(init=False, default=0)

    def _line(self, text: str) -> None:
        self.stream.write(text + "\n")
        self.stream.flush()

    def countdownTick(
        self, remainingSeconds: int, elapsedFraction: float
    ) -> None:
        self._line(
            f"{clockFace(remainingSeconds)} {elapsedFraction * 100:5.1f}%"
        )

    def countdownCompleted(self) -> None:
        self._line(completionMessage(self.totalSeconds))
        if not self.completed.called:
            self.completed.callback(None)

    def countdownStatusChanged(self, state: CountdownState) -> None:
        self.totalSeconds = state.totalSeconds
        self._line(
            f"[{startButtonLabel(state.status)}] "
            f"{clockFace(state.remainingSeconds)}"
        )

    def phaseChanged(self, phase: BreathingPhase, phaseSeconds: int) -> None:
        self._line(instructionFor(phase, phaseSeconds))


_TerminalPresenterImplements: type[SanctuaryObserver] = TerminalPresenter


def seconds(value: str) -> int:
    return checkDuration(int(value))


seconds.coerceDoc = "Must be a positive whole number."  # type:ignore


class Options(usage.Options):
    synopsis = "Usage: stillpoint [options]"

    optParameters = [
        ["duration", "d", None, "Session length, in seconds.", seconds],
        ["pattern", "p", None, "Name of the breathing pattern to follow."],
        ["config", "c", None, "Path to a configuration file."],
    ]
    optFlags = [
        ["no-breathing", None, "Count down without guiding breathing."],
        ["verbose", "v", "Log engine activity to stderr."],
    ]

    def configuration(self) -> Configuration:
        if self["config"] is None:
            return loadConfiguration()
        return loadConfiguration(FilePath(self["config"]))


def meditate(
    reactor: IReactorTime,
    options: Options,
    configuration: Configuration,
    stream: IO[str] = sys.stdout,
) -> Deferred[None]:
    """
    Run one session, with breathing guidance unless asked not to, and fire
    the result when the countdown completes.
    """
    presenter = TerminalPresenter(stream)
    sanctuary = Sanctuary.build(
        ReactorScheduler(reactor), presenter, configuration
    )
    with showFailures():
        if options["duration"] is not None:
            sanctuary.selectDuration(options["duration"])
        if options["pattern"] is not None:
            sanctuary.selectPattern(options["pattern"])
        if not options["no-breathing"]:
            sanctuary.breathing.start()
        sanctuary.countdown.start()

    def finished(ignored: None) -> None:
        sanctuary.breathing.stop()
        log.info("session finished")

    return presenter.completed.addCallback(finished)


def run(argv: Sequence[str] | None = None) -> None:
    options = Options()
    try:
        options.parseOptions(argv)
        configuration = options.configuration()
    except (usage.UsageError, ValueError) as e:
        raise SystemExit(f"{options}\nstillpoint: {e}")
    if options["pattern"] not in (None, *configuration.patterns):
        raise SystemExit(
            f"stillpoint: unknown pattern {options['pattern']!r}; choose "
            f"from {', '.join(configuration.patterns)}"
        )
    if options["verbose"]:
        globalLogBeginner.beginLoggingTo(
            [
                FilteringLogObserver(
                    textFileLogObserver(sys.stderr),
                    [LogLevelFilterPredicate(LogLevel.debug)],
                )
            ]
        )
    react(lambda reactor: meditate(reactor, options, configuration))
