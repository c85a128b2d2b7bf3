# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class service for the class catalog.

This module provides the ClassService class for:
- Listing numbered-level classes and track (conversation / IELTS) classes
- Creating and updating classes with duplicate-schedule detection
- Roster and enrolled-class views
- Deleting classes through the membership cascade

Two classes are duplicates when level, age group and instructor match and
their schedules hold the same meeting slots (day, start, end) regardless of
order. Timezone is not part of a slot.
"""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import ColumnElement, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.class_level import ClassLevel, InvalidClassLevelError, LevelTrack
from academy.domains.membership import ClassNotFoundError as MembershipClassNotFoundError
from academy.domains.membership import MembershipService
from academy.infrastructure.database import relations
from academy.infrastructure.database.models import DEFAULT_CLASS_IMAGE, Class, User
from academy.models.class_ import (
    ClassCreateRequest,
    ClassResponse,
    ClassUpdateRequest,
    ScheduleEntry,
    TrackClassCreateRequest,
)
from academy.models.user import UserResponse
from academy.utils.identifiers import is_valid_id

logger = logging.getLogger(__name__)

Slot = tuple[str, str, str]

_TRACK_LABELS = {
    None: "Class",
    LevelTrack.CONVERSATION: "Conversation class",
    LevelTrack.IELTS: "IELTS class",
}


class ClassServiceError(Exception):
    """Base exception for class service errors."""

    pass


class InvalidClassIdError(ClassServiceError):
    """Raised when a class or user id is malformed."""

    pass


class InvalidClassFilterError(ClassServiceError):
    """Raised when a listing filter is not a valid level."""

    pass


class ClassNotFoundError(ClassServiceError):
    """Raised when a class is not found."""

    pass


class StudentNotFoundError(ClassServiceError):
    """Raised when the user whose classes are requested is not found."""

    pass


class DuplicateClassError(ClassServiceError):
    """Raised when an equivalent class already exists.

    Attributes:
        existing: The class that the request duplicates.
    """

    def __init__(self, message: str, existing: ClassResponse) -> None:
        super().__init__(message)
        self.existing = existing


def _slots(schedule: Iterable[ScheduleEntry | dict]) -> list[Slot]:
    slots = []
    for entry in schedule:
        if isinstance(entry, ScheduleEntry):
            slots.append(entry.slot())
        else:
            slots.append((entry["day"], entry["start_time"], entry["end_time"]))
    return slots


def schedules_match(left: Iterable[ScheduleEntry | dict], right: Iterable[ScheduleEntry | dict]) -> bool:
    """Compare two schedules as unordered collections of meeting slots."""
    left_slots = _slots(left)
    right_slots = _slots(right)
    return len(left_slots) == len(right_slots) and set(left_slots) == set(right_slots)


def _track_label(track: LevelTrack | None) -> str:
    return _TRACK_LABELS[track]


class ClassService:
    """Service for the class catalog.

    Track-scoped methods take ``track``; a class outside the track is
    treated as missing.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_classes(
        self,
        level: str | None = None,
        instructor: str | None = None,
        age_group: str | None = None,
        numeric_only: bool = True,
    ) -> list[ClassResponse]:
        """List classes with optional exact-match filters.

        Args:
            level: Level filter.
            instructor: Instructor name.
            age_group: Age group.
            numeric_only: Exclude conversation and IELTS classes.

        Returns:
            Matching classes.

        Raises:
            InvalidClassFilterError: If the level filter is not a level.
        """
        conditions: list[ColumnElement[bool]] = []
        if numeric_only:
            conditions.append(Class.track_is(LevelTrack.NUMERIC))
        if level is not None and level.strip():
            try:
                conditions.append(Class.level_is(ClassLevel.parse(level)))
            except InvalidClassLevelError as e:
                raise InvalidClassFilterError(f"Invalid level filter: {level}") from e
        if instructor is not None:
            conditions.append(Class.instructor == instructor)
        if age_group is not None:
            conditions.append(Class.age_group == age_group)

        return await self._query_classes(conditions)

    async def list_track(self, track: LevelTrack) -> list[ClassResponse]:
        """List the classes of one named track."""
        return await self._query_classes([Class.track_is(track)])

    async def get_class(self, class_id: str, track: LevelTrack | None = None) -> ClassResponse:
        """Get a class by id.

        Raises:
            InvalidClassIdError: If the id is malformed.
            ClassNotFoundError: If the class is not found.
        """
        class_ = await self._get_class(class_id, track)
        roster = await relations.roster_user_ids(self.db, class_.id)
        return ClassResponse.from_model(class_, roster)

    async def get_class_students(self, class_id: str) -> list[UserResponse]:
        """Full user records of everyone on a class roster.

        Roster ids with no matching user are skipped.

        Raises:
            InvalidClassIdError: If the id is malformed.
            ClassNotFoundError: If the class is not found.
        """
        class_ = await self._get_class(class_id)
        roster = await relations.roster_user_ids(self.db, class_.id)
        if not roster:
            return []

        result = await self.db.execute(
            select(User).where(User.id.in_(roster)).order_by(User.last_name, User.first_name, User.id)
        )
        users = list(result.scalars().all())
        enrolled = await relations.enrolled_class_ids_for(self.db, [u.id for u in users])
        return [UserResponse.from_model(user, enrolled[user.id]) for user in users]

    async def list_enrolled_classes(self, user_id: str) -> list[ClassResponse]:
        """Classes a user is enrolled in.

        Enrolled ids with no matching class are skipped.

        Raises:
            InvalidClassIdError: If the user id is malformed.
            StudentNotFoundError: If the user is not found.
        """
        if not is_valid_id(user_id):
            raise InvalidClassIdError("Invalid ID")
        if await self.db.get(User, user_id) is None:
            raise StudentNotFoundError("User not found")

        class_ids = await relations.enrolled_class_ids(self.db, user_id)
        if not class_ids:
            return []
        return await self._query_classes([Class.id.in_(class_ids)])

    async def create_class(self, request: ClassCreateRequest) -> ClassResponse:
        """Create a class at an explicit level.

        Raises:
            DuplicateClassError: If an equivalent class exists.
        """
        level = ClassLevel.parse(request.level)
        return await self._create(level, request, track=None)

    async def create_track_class(
        self,
        track: LevelTrack,
        request: TrackClassCreateRequest,
    ) -> ClassResponse:
        """Create a class in a named track; the level is the track.

        Raises:
            DuplicateClassError: If an equivalent class exists in the track.
        """
        return await self._create(ClassLevel(track), request, track=track)

    async def update_class(
        self,
        class_id: str,
        request: ClassUpdateRequest,
        track: LevelTrack | None = None,
    ) -> ClassResponse:
        """Apply a partial update.

        On track routes the level stays fixed to the track.

        Raises:
            InvalidClassIdError: If the id is malformed.
            ClassNotFoundError: If the class is not found (or not in the track).
            DuplicateClassError: If the result would duplicate another class.
        """
        class_ = await self._get_class(class_id, track)

        level = class_.level
        if request.level is not None and track is None:
            level = ClassLevel.parse(request.level)
        age_group = request.age_group if request.age_group is not None else class_.age_group
        instructor = request.instructor if request.instructor is not None else class_.instructor
        schedule = request.schedule if request.schedule is not None else class_.schedule

        await self._reject_duplicate(
            level, age_group, instructor, schedule, track=track, exclude_id=class_.id
        )

        class_.level = level
        class_.age_group = age_group
        class_.instructor = instructor
        if request.schedule is not None:
            class_.schedule = [entry.model_dump() for entry in request.schedule]
        if request.image is not None:
            class_.image = request.image
        if request.link is not None:
            class_.link = request.link
        if request.is_enrollment_open is not None:
            class_.is_enrollment_open = request.is_enrollment_open

        await self.db.commit()
        logger.info("Updated class %s", class_.id)

        roster = await relations.roster_user_ids(self.db, class_.id)
        return ClassResponse.from_model(class_, roster)

    async def delete_class(self, class_id: str, track: LevelTrack | None = None) -> None:
        """Delete a class after removing it from every enrolled user.

        Raises:
            InvalidClassIdError: If the id is malformed.
            ClassNotFoundError: If the class is not found (or not in the track).
            ConsistencyGapError: If some users could not be updated.
        """
        if not is_valid_id(class_id):
            raise InvalidClassIdError("Invalid ID")

        def in_track(class_: Class) -> bool:
            return track is None or class_.level_track == track.value

        try:
            await MembershipService(self.db).cascade_delete_class(class_id, in_track)
        except MembershipClassNotFoundError as e:
            raise ClassNotFoundError(f"{_track_label(track)} not found") from e

    async def _create(
        self,
        level: ClassLevel,
        request: TrackClassCreateRequest,
        track: LevelTrack | None,
    ) -> ClassResponse:
        await self._reject_duplicate(
            level, request.age_group, request.instructor, request.schedule, track=track
        )

        class_ = Class(
            level=level,
            age_group=request.age_group,
            instructor=request.instructor,
            schedule=[entry.model_dump() for entry in request.schedule],
            image=request.image or DEFAULT_CLASS_IMAGE,
            link=request.link or "",
            is_enrollment_open=request.is_enrollment_open,
        )
        self.db.add(class_)
        await self.db.commit()

        logger.info("Created class %s at level %s", class_.id, level)
        return ClassResponse.from_model(class_)

    async def _reject_duplicate(
        self,
        level: ClassLevel,
        age_group: str,
        instructor: str,
        schedule: Iterable[ScheduleEntry | dict],
        track: LevelTrack | None,
        exclude_id: str | None = None,
    ) -> None:
        stmt = (
            select(Class)
            .where(
                Class.level_is(level),
                Class.age_group == age_group,
                Class.instructor == instructor,
            )
            .order_by(Class.id)
        )
        if exclude_id is not None:
            stmt = stmt.where(Class.id != exclude_id)

        schedule = list(schedule)
        result = await self.db.execute(stmt)
        for candidate in result.scalars().all():
            if schedules_match(candidate.schedule, schedule):
                roster = await relations.roster_user_ids(self.db, candidate.id)
                raise DuplicateClassError(
                    f"{_track_label(track)} already exists",
                    ClassResponse.from_model(candidate, roster),
                )

    async def _get_class(self, class_id: str, track: LevelTrack | None = None) -> Class:
        if not is_valid_id(class_id):
            raise InvalidClassIdError("Invalid ID")
        class_ = await self.db.get(Class, class_id)
        if class_ is None or (track is not None and class_.level_track != track.value):
            raise ClassNotFoundError(f"{_track_label(track)} not found")
        return class_

    async def _query_classes(self, conditions: list[ColumnElement[bool]]) -> list[ClassResponse]:
        result = await self.db.execute(
            select(Class)
            .where(*conditions)
            .order_by(Class.level_track, Class.level_number, Class.age_group, Class.id)
        )
        classes = list(result.scalars().all())
        rosters = await relations.roster_user_ids_for(self.db, [c.id for c in classes])
        return [ClassResponse.from_model(class_, rosters[class_.id]) for class_ in classes]
