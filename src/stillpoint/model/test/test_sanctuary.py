from unittest import TestCase

from twisted.internet.task import Clock

from ..boundaries import BreathingPhase, CountdownStatus
from ..breathing import BreathingPattern, simpleBreath
from ..configuration import Configuration
from ..countdown import CountdownState
from ..sanctuary import Sanctuary
from ..scheduling import ReactorScheduler
from .fakes import RecordingObserver


class SanctuaryTests(TestCase):
    """
    Tests for L{Sanctuary}.
    """

    def setUp(self) -> None:
        self.clock = Clock()
        self.observer = RecordingObserver()
        self.sanctuary = Sanctuary.build(
            ReactorScheduler(self.clock), self.observer
        )

    def test_builtFromConfiguration(self) -> None:
        quick = BreathingPattern("quick", 1, 1, 1)
        sanctuary = Sanctuary.build(
            ReactorScheduler(self.clock),
            self.observer,
            Configuration(
                durationChoices=(30,),
                defaultDuration=30,
                patterns={"quick": quick},
                defaultPattern="quick",
            ),
        )
        self.assertEqual(sanctuary.countdown.state.totalSeconds, 30)
        self.assertEqual(sanctuary.breathing.state.pattern, quick)

    def test_selectDuration(self) -> None:
        self.assertTrue(self.sanctuary.selectDuration(600))
        self.assertEqual(
            self.sanctuary.countdown.state,
            CountdownState(600, 600, CountdownStatus.Idle),
        )

    def test_selectDurationWhileRunning(self) -> None:
        """
        Duration choices made while the countdown runs are ignored.
        """
        self.sanctuary.countdown.start()
        self.assertFalse(self.sanctuary.selectDuration(600))
        self.assertEqual(self.sanctuary.countdown.state.totalSeconds, 300)

    def test_selectPattern(self) -> None:
        self.assertTrue(self.sanctuary.selectPattern("simple"))
        self.assertEqual(self.sanctuary.breathing.state.pattern, simpleBreath)
        with self.assertRaises(KeyError):
            self.sanctuary.selectPattern("nope")

    def test_selectPatternWhileBreathing(self) -> None:
        self.sanctuary.breathing.start()
        self.assertFalse(self.sanctuary.selectPattern("simple"))
        self.assertEqual(
            self.sanctuary.breathing.state.pattern.name, "4-7-8"
        )

    def test_spaceToggles(self) -> None:
        self.sanctuary.spacePressed()
        self.clock.pump([1] * 3)
        self.sanctuary.spacePressed()
        self.assertEqual(
            self.sanctuary.countdown.state,
            CountdownState(300, 297, CountdownStatus.Paused),
        )
        self.sanctuary.spacePressed()
        self.assertIs(
            self.sanctuary.countdown.state.status, CountdownStatus.Running
        )

    def test_escape(self) -> None:
        """
        Escape resets a running countdown and stops breathing.
        """
        self.sanctuary.countdown.start()
        self.sanctuary.breathing.start()
        self.clock.pump([1] * 10)
        self.sanctuary.escapePressed()
        self.assertEqual(
            self.sanctuary.countdown.state,
            CountdownState(300, 300, CountdownStatus.Idle),
        )
        self.assertFalse(self.sanctuary.breathing.active)
        self.assertEqual(self.clock.getDelayedCalls(), [])

    def test_escapeLeavesPausedCountdown(self) -> None:
        self.sanctuary.countdown.start()
        self.clock.pump([1] * 10)
        self.sanctuary.countdown.pause()
        self.sanctuary.escapePressed()
        self.assertEqual(
            self.sanctuary.countdown.state,
            CountdownState(300, 290, CountdownStatus.Paused),
        )

    def test_independentEngines(self) -> None:
        """
        The countdown completing has no effect on the breathing cycle.
        """
        self.sanctuary.selectDuration(6)
        self.sanctuary.selectPattern("simple")
        self.sanctuary.breathing.start()
        self.sanctuary.countdown.start()
        self.clock.pump([1] * 6)
        self.assertEqual(self.observer.only("completed"), [()])
        self.assertTrue(self.sanctuary.breathing.active)
        self.assertEqual(
            self.observer.only("phase"),
            [
                (BreathingPhase.Inhale, 4),
                (BreathingPhase.Exhale, 4),
            ],
        )
