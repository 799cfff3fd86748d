"""
IGC Time - the fixed six-digit HHMMSS clock field.

No date, no timezone (IGC times are UTC by convention), no leap seconds.
"""

from __future__ import annotations

from dataclasses import dataclass

from igc.errors import InvalidSyntax, OutOfRange
from igc.layout import TIME_LENGTH, is_digits


@dataclass(frozen=True)
class Time:
    """A time of day as stored in B, K and similar records."""

    hours: int
    minutes: int
    seconds: int

    def __post_init__(self) -> None:
        if not 0 <= self.hours <= 23:
            raise OutOfRange(f"Hour out of range: {self.hours}")
        if not 0 <= self.minutes <= 59:
            raise OutOfRange(f"Minute out of range: {self.minutes}")
        if not 0 <= self.seconds <= 59:
            raise OutOfRange(f"Second out of range: {self.seconds}")

    @classmethod
    def from_hms(cls, hours: int, minutes: int, seconds: int) -> Time:
        return cls(hours=hours, minutes=minutes, seconds=seconds)

    @classmethod
    def parse(cls, text: str) -> Time:
        """Parse ``HHMMSS``.

        Raises InvalidSyntax for anything but six ASCII digits and
        OutOfRange for an impossible hour, minute or second.
        """
        if len(text) != TIME_LENGTH or not is_digits(text):
            raise InvalidSyntax(f"Expected 6 digits HHMMSS, got {text!r}")
        return cls(
            hours=int(text[0:2]),
            minutes=int(text[2:4]),
            seconds=int(text[4:6]),
        )

    def format(self) -> str:
        return f"{self.hours:02d}{self.minutes:02d}{self.seconds:02d}"

    def __str__(self) -> str:
        return self.format()
