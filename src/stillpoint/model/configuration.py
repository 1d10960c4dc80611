# -*- test-case-name: stillpoint.model.test.test_configuration -*-
from __future__ import annotations

from dataclasses import dataclass, field
from json import dumps, loads
from os import environ
from os.path import expanduser
from typing import Mapping, Sequence

from twisted.logger import Logger
from twisted.python.filepath import FilePath

from .breathing import BreathingPattern, builtinPatterns, relaxingBreath
from .countdown import DEFAULT_DURATION, checkDuration
from .schema import SavedConfiguration

log = Logger()

defaultConfigurationPath = FilePath(
    environ.get(
        "STILLPOINT_CONFIG",
        expanduser("~/.config/stillpoint/configuration.json"),
    )
)


@dataclass(frozen=True)
class Configuration:
    """
    The choices offered to the user: session lengths and breathing patterns.
    """

    durationChoices: Sequence[int] = (5 * 60, 10 * 60, 15 * 60, 20 * 60)
    defaultDuration: int = DEFAULT_DURATION
    patterns: Mapping[str, BreathingPattern] = field(
        default_factory=lambda: dict(builtinPatterns)
    )
    defaultPattern: str = relaxingBreath.name

    def __post_init__(self) -> None:
        for each in self.durationChoices:
            checkDuration(each)
        checkDuration(self.defaultDuration)
        if self.defaultPattern not in self.patterns:
            raise ValueError(
                f"default pattern {self.defaultPattern!r} is not one of "
                f"{sorted(self.patterns)}"
            )

    def pattern(self, name: str | None = None) -> BreathingPattern:
        """
        Look up a pattern by C{name}, or the default pattern.

        @raise KeyError: if there is no such pattern.
        """
        return self.patterns[self.defaultPattern if name is None else name]

    def toJSONable(self) -> SavedConfiguration:
        return {
            "durationChoices": list(self.durationChoices),
            "defaultDuration": self.defaultDuration,
            "patterns": [
                {
                    "name": pattern.name,
                    "inhaleSeconds": pattern.inhaleSeconds,
                    "holdSeconds": pattern.holdSeconds,
                    "exhaleSeconds": pattern.exhaleSeconds,
                }
                for pattern in self.patterns.values()
            ],
            "defaultPattern": self.defaultPattern,
        }

    @classmethod
    def fromJSONable(cls, saved: SavedConfiguration) -> Configuration:
        try:
            return cls(
                durationChoices=tuple(saved["durationChoices"]),
                defaultDuration=saved["defaultDuration"],
                patterns={
                    each["name"]: BreathingPattern(
                        each["name"],
                        each["inhaleSeconds"],
                        each["holdSeconds"],
                        each["exhaleSeconds"],
                    )
                    for each in saved["patterns"]
                },
                defaultPattern=saved["defaultPattern"],
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"malformed configuration: {e!r}") from e


def loadConfiguration(
    path: FilePath[str] = defaultConfigurationPath,
) -> Configuration:
    """
    Load the configuration saved at C{path}, or the default configuration if
    nothing has been saved there yet.
    """
    if not path.isfile():
        log.debug("no configuration at {path}, using defaults", path=path.path)
        return Configuration()
    return Configuration.fromJSONable(loads(path.getContent()))


def saveConfiguration(
    configuration: Configuration,
    path: FilePath[str] = defaultConfigurationPath,
) -> None:
    """
    Save C{configuration} to C{path}, replacing whatever was there.
    """
    if not path.parent().isdir():
        path.parent().makedirs(True)
    path.setContent(
        dumps(configuration.toJSONable(), indent=2).encode("utf-8")
    )
