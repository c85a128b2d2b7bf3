# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class table and the class-owned side of the enrollment relationship."""

from typing import Any

from sqlalchemy import JSON, Boolean, ColumnElement, ForeignKey, Index, Integer, String, and_
from sqlalchemy.orm import Mapped, mapped_column

from academy.core.class_level import ClassLevel, LevelTrack
from academy.infrastructure.database.models.base import Base, id_column

DEFAULT_CLASS_IMAGE = "level_img_0.webp"
DEFAULT_TIMEZONE = "Etc/UTC"


class Class(Base):
    """A scheduled class of a numbered level or of a track.

    The level is stored as two columns: ``level_track`` tags the variant
    and ``level_number`` holds the number for numbered levels only.
    ``schedule`` is a JSON list of ``{day, start_time, end_time, timezone}``.
    """

    __tablename__ = "classes"

    id: Mapped[str] = id_column()
    level_track: Mapped[str] = mapped_column(String(20), nullable=False)
    level_number: Mapped[int | None] = mapped_column(Integer)
    age_group: Mapped[str] = mapped_column(String(100), nullable=False)
    instructor: Mapped[str] = mapped_column(String(255), nullable=False)
    image: Mapped[str] = mapped_column(String(255), nullable=False, default=DEFAULT_CLASS_IMAGE)
    link: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    schedule: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    is_enrollment_open: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("ix_classes_level", "level_track", "level_number"),
        Index("ix_classes_duplicate_key", "level_track", "level_number", "age_group", "instructor"),
    )

    @property
    def level(self) -> ClassLevel:
        return ClassLevel.from_columns(self.level_track, self.level_number)

    @level.setter
    def level(self, value: ClassLevel) -> None:
        self.level_track = value.track.value
        self.level_number = value.number

    @classmethod
    def level_is(cls, level: ClassLevel) -> ColumnElement[bool]:
        """SQL condition matching classes at exactly this level."""
        if level.track is LevelTrack.NUMERIC:
            return and_(cls.level_track == level.track.value, cls.level_number == level.number)
        return cls.level_track == level.track.value

    @classmethod
    def track_is(cls, track: LevelTrack) -> ColumnElement[bool]:
        return cls.level_track == track.value


class ClassRosterEntry(Base):
    """One entry of a class roster.

    Mirrors a user's enrolled-classes entry; the user id is not a foreign
    key for the same reason UserEnrolledClass.class_id is not.
    """

    __tablename__ = "class_roster"

    class_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("classes.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)

    __table_args__ = (
        Index("ix_class_roster_user_id", "user_id"),
    )
