# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class request/response models."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from academy.core.class_level import ClassLevel
from academy.infrastructure.database.models import DEFAULT_TIMEZONE, Class
from academy.models.common import APIModel


class ScheduleEntry(APIModel):
    """One weekly meeting of a class."""

    day: str = Field(min_length=1)
    start_time: str = Field(min_length=1)
    end_time: str = Field(min_length=1)
    timezone: str = DEFAULT_TIMEZONE

    def slot(self) -> tuple[str, str, str]:
        """The part of an entry that identifies a meeting slot."""
        return (self.day, self.start_time, self.end_time)


def _normalize_level(value: Any) -> int | str:
    return ClassLevel.parse(value).to_value()


class TrackClassCreateRequest(APIModel):
    """Create a class whose level is implied by the route (conversation or IELTS)."""

    age_group: str = Field(min_length=1)
    instructor: str = Field(min_length=1)
    schedule: list[ScheduleEntry] = Field(default_factory=list)
    image: str | None = None
    link: str | None = None
    is_enrollment_open: bool = True


class ClassCreateRequest(TrackClassCreateRequest):
    """Create a class at an explicit level."""

    level: int | str

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, value: Any) -> int | str:
        return _normalize_level(value)


class ClassUpdateRequest(APIModel):
    """Partial class update; omitted fields keep their current value."""

    level: int | str | None = None
    age_group: str | None = Field(default=None, min_length=1)
    instructor: str | None = Field(default=None, min_length=1)
    schedule: list[ScheduleEntry] | None = None
    image: str | None = None
    link: str | None = None
    is_enrollment_open: bool | None = None

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, value: Any) -> int | str | None:
        if value is None:
            return None
        return _normalize_level(value)


class ClassSummary(APIModel):
    """Class fields shown next to a student, without the roster."""

    id: str
    level: int | str
    age_group: str
    instructor: str
    schedule: list[ScheduleEntry]
    is_enrollment_open: bool
    image: str

    @classmethod
    def from_model(cls, class_: Class) -> ClassSummary:
        return cls(
            id=class_.id,
            level=class_.level.to_value(),
            age_group=class_.age_group,
            instructor=class_.instructor,
            schedule=[ScheduleEntry.model_validate(entry) for entry in class_.schedule],
            is_enrollment_open=class_.is_enrollment_open,
            image=class_.image,
        )


class ClassResponse(ClassSummary):
    """Full class record including its roster."""

    link: str
    roster: list[str] = Field(default_factory=list)

    @classmethod
    def from_model(cls, class_: Class, roster: list[str] | None = None) -> ClassResponse:
        summary = ClassSummary.from_model(class_)
        return cls(
            **summary.model_dump(),
            link=class_.link,
            roster=roster or [],
        )


class ClassMutationResponse(APIModel):
    """Result of a create, or of a rejected duplicate, carrying the class."""

    message: str
    class_: ClassResponse = Field(alias="class")
