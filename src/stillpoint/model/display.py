# -*- test-case-name: stillpoint.model.test.test_display -*-
"""
Text and geometry derived from engine state, for whatever is drawing it.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from dateutil.relativedelta import relativedelta

from .boundaries import BreathingPhase, CountdownStatus


def _counted(amount: int, unit: str) -> str:
    return f"{amount} {unit}" + ("" if amount == 1 else "s")


def intervalSummary(seconds: int) -> str:
    """
    Describe the length of a session, like C{"10 minutes"} or C{"1 minute
    and 30 seconds"}.  Sessions are measured in minutes, so anything a day
    or longer is still counted in hours.
    """
    delta = relativedelta(seconds=seconds)
    parts = [
        _counted(amount, unit)
        for amount, unit in [
            (delta.days * 24 + delta.hours, "hour"),
            (delta.minutes, "minute"),
            (delta.seconds, "second"),
        ]
        if amount
    ]
    if not parts:
        return _counted(0, "second")
    *leading, last = parts
    if not leading:
        return last
    return f"{', '.join(leading)} and {last}"


def clockFace(seconds: int) -> str:
    """
    Format a number of seconds as C{MM:SS}.
    """
    minutes, seconds = divmod(seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"


@dataclass(frozen=True)
class ProgressRing:
    """
    A circular progress indicator drawn as a dashed stroke, which is fully
    offset (invisible) at the start of a session and fully drawn at the end.
    """

    radius: float = 90.0

    @property
    def circumference(self) -> float:
        return 2 * math.pi * self.radius

    def dashOffset(self, elapsedFraction: float) -> float:
        return self.circumference - (elapsedFraction * self.circumference)


idleInstruction = 'Click "Start Breathing" to begin your practice'

_instructionFormats = {
    BreathingPhase.Inhale: "Breathe in for {} seconds",
    BreathingPhase.Hold: "Hold for {} seconds",
    BreathingPhase.Exhale: "Breathe out for {} seconds",
}


def instructionFor(phase: BreathingPhase, seconds: int) -> str:
    if phase is BreathingPhase.Idle:
        return idleInstruction
    return _instructionFormats[phase].format(seconds)


def startButtonLabel(status: CountdownStatus) -> str:
    return {
        CountdownStatus.Running: "Running...",
        CountdownStatus.Paused: "Resume",
    }.get(status, "Start")


def completionMessage(totalSeconds: int) -> str:
    return (
        f"Meditation session complete! "
        f"({intervalSummary(totalSeconds)} of stillness)"
    )
