"""
Daily stand-up time handling.

A stand-up time is configured as a 12-hour clock string such as ``9:30AM`` or
``12:00PM``. ``Schedule.next_trigger`` turns it into today's trigger instant,
relative to whatever ``now`` the caller passes in.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .errors import ParseError


class Period(Enum):
    AM = "AM"
    PM = "PM"

    @classmethod
    def parse(cls, text: str) -> "Period":
        try:
            return cls(text)
        except ValueError:
            raise ParseError(f"Expected AM or PM, got {text!r}") from None


# H:MM or HH:MM, ASCII digits only, then exactly two period characters
TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})(..)", re.ASCII)


@dataclass(frozen=True)
class Schedule:
    """A daily wall-clock time, stored as parsed (12-hour hour plus period)."""

    hour: int
    minute: int
    period: Period

    @classmethod
    def parse(cls, text: str) -> "Schedule":
        """Parse ``H:MMAM`` / ``HH:MMPM`` (no space before the period)."""
        match = TIME_PATTERN.fullmatch(text) if isinstance(text, str) else None
        if match is None:
            raise ParseError(f"Stand-up time {text!r} must look like H:MM followed by AM/PM, e.g. 9:00AM")

        period = Period.parse(match.group(3))
        hour = int(match.group(1))
        minute = int(match.group(2))
        if not 1 <= hour <= 12:
            raise ParseError(f"Hour must be between 1 and 12 in stand-up time {text!r}")
        if not 0 <= minute <= 59:
            raise ParseError(f"Minute must be between 0 and 59 in stand-up time {text!r}")
        return cls(hour=hour, minute=minute, period=period)

    @property
    def hour_24(self) -> int:
        if self.hour == 12:
            return 0 if self.period is Period.AM else 12
        return self.hour if self.period is Period.AM else self.hour + 12

    def next_trigger(self, now: datetime) -> datetime:
        """Return the trigger instant on ``now``'s calendar date.

        The result may lie before or after ``now``; comparing the two is up to
        the caller. Nothing is cached, so call this again whenever "today's"
        trigger is needed.
        """
        return now.replace(hour=self.hour_24, minute=self.minute, second=0, microsecond=0)

    def __str__(self) -> str:
        return f"{self.hour}:{self.minute:02d}{self.period.value}"
