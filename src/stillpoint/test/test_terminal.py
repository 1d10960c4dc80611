from contextlib import redirect_stderr
from io import StringIO
from shutil import rmtree
from tempfile import mkdtemp
from unittest import TestCase

from twisted.internet.task import Clock
from twisted.python.usage import UsageError

from stillpoint.model.boundaries import BreathingPhase, CountdownStatus
from stillpoint.model.configuration import Configuration
from stillpoint.model.countdown import CountdownState
from stillpoint.terminal import (
    Options,
    TerminalPresenter,
    meditate,
    run,
    showFailures,
)


class TerminalPresenterTests(TestCase):
    def setUp(self) -> None:
        self.stream = StringIO()
        self.presenter = TerminalPresenter(self.stream)

    def test_lines(self) -> None:
        self.presenter.countdownStatusChanged(
            CountdownState(300, 300, CountdownStatus.Running)
        )
        self.presenter.countdownTick(299, 1 / 300)
        self.presenter.phaseChanged(BreathingPhase.Hold, 7)
        self.assertEqual(
            self.stream.getvalue().splitlines(),
            ["[Running...] 05:00", "04:59   0.3%", "Hold for 7 seconds"],
        )

    def test_completedOnce(self) -> None:
        """
        The presenter's C{completed} Deferred fires on the first completion
        and later completions don't disturb it.
        """
        results: list[object] = []
        self.presenter.completed.addCallback(results.append)
        self.presenter.countdownStatusChanged(
            CountdownState(60, 0, CountdownStatus.Completed)
        )
        self.presenter.countdownCompleted()
        self.presenter.countdownCompleted()
        self.assertEqual(results, [None])
        self.assertIn(
            "Meditation session complete! (1 minute of stillness)",
            self.stream.getvalue(),
        )


class MeditateTests(TestCase):
    def setUp(self) -> None:
        self.clock = Clock()
        self.stream = StringIO()

    def meditate(self, *argv: str) -> list[object]:
        options = Options()
        options.parseOptions(list(argv))
        results: list[object] = []
        meditate(
            self.clock, options, Configuration(), self.stream
        ).addCallback(results.append)
        return results

    def test_session(self) -> None:
        """
        A session counts down while guiding breathing, and when the countdown
        completes, breathing stops and the result fires.
        """
        results = self.meditate("--duration", "3", "--pattern", "simple")
        self.clock.pump([1, 1])
        self.assertEqual(results, [])
        self.clock.advance(1)
        self.assertEqual(results, [None])
        self.assertEqual(self.clock.getDelayedCalls(), [])
        self.assertEqual(
            self.stream.getvalue().splitlines(),
            [
                "[Start] 00:03",
                "Breathe in for 4 seconds",
                "[Running...] 00:03",
                "00:02  33.3%",
                "00:01  66.7%",
                "00:00 100.0%",
                "[Start] 00:00",
                "Meditation session complete! (3 seconds of stillness)",
                'Click "Start Breathing" to begin your practice',
                "[Start] 00:03",
            ],
        )

    def test_noBreathing(self) -> None:
        self.meditate("--duration", "1", "--no-breathing")
        self.clock.advance(1)
        self.assertNotIn("Breathe", self.stream.getvalue())

    def test_badDuration(self) -> None:
        with self.assertRaises(UsageError):
            Options().parseOptions(["--duration", "0"])


class RunTests(TestCase):
    def setUp(self) -> None:
        directory = mkdtemp()
        self.addCleanup(rmtree, directory)
        self.config = directory + "/missing.json"

    def test_unknownPattern(self) -> None:
        with self.assertRaises(SystemExit) as raised:
            run(["--config", self.config, "--pattern", "nope"])
        self.assertIn("unknown pattern 'nope'", str(raised.exception))

    def test_usageError(self) -> None:
        with self.assertRaises(SystemExit) as raised:
            run(["--bogus"])
        self.assertIn("Usage: stillpoint [options]", str(raised.exception))


class ShowFailuresTests(TestCase):
    def test_reportsAndReraises(self) -> None:
        err = StringIO()
        with redirect_stderr(err), self.assertRaises(ZeroDivisionError):
            with showFailures():
                1 / 0
        self.assertIn("ZeroDivisionError", err.getvalue())
