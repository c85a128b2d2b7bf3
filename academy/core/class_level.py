# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class level value type.

A class belongs either to a numbered level (1, 2, 3, ...) or to one of two
tracks that have no number: conversation and IELTS. ClassLevel is the tagged
variant used everywhere a level is read, compared or filtered on.

Parsing rules:
    - integers (and integral floats) become Numeric(n), n >= 1
    - numeric-looking strings ("3", " 3 ", "3.0") become Numeric(n)
    - any other string is trimmed, lower-cased and must name a track

Serialization is the inverse: Numeric(n) -> n, tracks -> their name.

Example:
    >>> ClassLevel.parse("3") == ClassLevel.numeric(3)
    True
    >>> ClassLevel.parse(" IELTS ").to_value()
    'ielts'
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_NUMERIC_RE = re.compile(r"^[+-]?\d+(\.0*)?$")

# Level numbers are stored in a 32-bit integer column.
MAX_LEVEL_NUMBER = 2**31 - 1


class InvalidClassLevelError(ValueError):
    """Raised when a value cannot be interpreted as a class level."""

    pass


class LevelTrack(str, Enum):
    """Storage tag for the three level variants."""

    NUMERIC = "numeric"
    CONVERSATION = "conversation"
    IELTS = "ielts"


SENTINEL_TRACKS = {
    LevelTrack.CONVERSATION.value: LevelTrack.CONVERSATION,
    LevelTrack.IELTS.value: LevelTrack.IELTS,
}


@dataclass(frozen=True)
class ClassLevel:
    """A numbered level or a named track.

    Attributes:
        track: Which variant this is.
        number: Level number for the numeric variant, None for tracks.
    """

    track: LevelTrack
    number: int | None = None

    def __post_init__(self) -> None:
        if self.track is LevelTrack.NUMERIC:
            if self.number is None or self.number < 1:
                raise InvalidClassLevelError("Numeric level must be a positive integer")
            if self.number > MAX_LEVEL_NUMBER:
                raise InvalidClassLevelError(f"Level number must be at most {MAX_LEVEL_NUMBER}")
        elif self.number is not None:
            raise InvalidClassLevelError(f"The {self.track.value} track has no level number")

    @classmethod
    def numeric(cls, number: int) -> ClassLevel:
        return cls(LevelTrack.NUMERIC, number)

    @classmethod
    def conversation(cls) -> ClassLevel:
        return cls(LevelTrack.CONVERSATION)

    @classmethod
    def ielts(cls) -> ClassLevel:
        return cls(LevelTrack.IELTS)

    @classmethod
    def parse(cls, raw: object) -> ClassLevel:
        """Interpret a raw request or storage value as a level.

        Args:
            raw: An int, float, string or existing ClassLevel.

        Returns:
            The parsed level.

        Raises:
            InvalidClassLevelError: If the value names no level.
        """
        if isinstance(raw, ClassLevel):
            return raw
        if isinstance(raw, bool):
            raise InvalidClassLevelError(f"Invalid level: {raw!r}")
        if isinstance(raw, int):
            return cls.numeric(raw)
        if isinstance(raw, float):
            if not raw.is_integer():
                raise InvalidClassLevelError(f"Invalid level: {raw!r}")
            return cls.numeric(int(raw))
        if isinstance(raw, str):
            text = raw.strip()
            if _NUMERIC_RE.match(text):
                return cls.numeric(int(text.split(".", 1)[0]))
            track = SENTINEL_TRACKS.get(text.lower())
            if track is not None:
                return cls(track)
        raise InvalidClassLevelError(f"Invalid level: {raw!r}")

    @classmethod
    def from_columns(cls, track: str, number: int | None) -> ClassLevel:
        """Rebuild a level from its two storage columns."""
        return cls(LevelTrack(track), number)

    @property
    def is_numeric(self) -> bool:
        return self.track is LevelTrack.NUMERIC

    def to_value(self) -> int | str:
        """Serialize to the wire form: the number, or the track name."""
        if self.is_numeric:
            return self.number  # type: ignore[return-value]
        return self.track.value

    def __str__(self) -> str:
        return str(self.to_value())
