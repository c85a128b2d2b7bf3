# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Roster query service for staff-facing user listings.

This module provides the RosterQueryService class for:
- Paginated student listing joined with enrolled-class summaries
- Admin listing of all users with role and text filters

Filtering, counting and paging all run in SQL. The total is computed over
the same predicate as the page, so it counts distinct students regardless
of how many matching classes each one has.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from sqlalchemy import ColumnElement, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.class_level import ClassLevel, InvalidClassLevelError
from academy.infrastructure.database.models import (
    PRIVILEGE_STUDENT,
    PRIVILEGES,
    Class,
    User,
    UserEnrolledClass,
)
from academy.models.class_ import ClassSummary
from academy.models.user import StudentPage, StudentWithClasses, UserListItem, UserPage
from academy.utils.query import (
    LIKE_ESCAPE,
    clamp_limit,
    clamp_page,
    contains_pattern,
    positive_int,
)

logger = logging.getLogger(__name__)


class RosterQueryError(Exception):
    """Base exception for roster query errors."""

    pass


class InvalidPrivilegeFilterError(RosterQueryError):
    """Raised when the privilege filter names no role."""

    pass


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _enrolled_class_exists(*conditions: ColumnElement[bool]) -> ColumnElement[bool]:
    """EXISTS over the user's enrolled classes, correlated to the outer User."""
    return (
        select(UserEnrolledClass.user_id)
        .join(Class, Class.id == UserEnrolledClass.class_id)
        .where(UserEnrolledClass.user_id == User.id, *conditions)
        .exists()
    )


def _name_or_email_matches(pattern: str) -> list[ColumnElement[bool]]:
    return [
        User.first_name.ilike(pattern, escape=LIKE_ESCAPE),
        User.last_name.ilike(pattern, escape=LIKE_ESCAPE),
        User.email.ilike(pattern, escape=LIKE_ESCAPE),
    ]


class RosterQueryService:
    """Service for listing users and students.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_students(
        self,
        page: object = None,
        limit: object = None,
        level: str | None = None,
        q: str | None = None,
    ) -> StudentPage:
        """List students with their enrolled classes.

        Args:
            page: Requested page, clamped to >= 1.
            limit: Requested page size, clamped to [1, 200].
            level: Restrict to students with a class at this level.
            q: Literal, case-insensitive substring matched against name,
                email, or the instructor / age group of an enrolled class.

        Returns:
            One page of students ordered by last name, first name and id.
            A level filter that names no level matches no student.
        """
        page_number = clamp_page(page)
        page_size = clamp_limit(limit)

        class_level: ClassLevel | None = None
        level = _clean(level)
        if level is not None:
            try:
                class_level = ClassLevel.parse(level)
            except InvalidClassLevelError:
                logger.debug("Level filter %r names no level; returning no students", level)
                return StudentPage(items=[], total=0, page=page_number, limit=page_size)

        conditions = self._student_conditions(class_level, _clean(q))

        total = await self._count(conditions)
        result = await self.db.execute(
            select(User)
            .where(*conditions)
            .order_by(User.last_name, User.first_name, User.id)
            .offset((page_number - 1) * page_size)
            .limit(page_size)
        )
        students = list(result.scalars().all())
        classes_by_user = await self._class_summaries_for([s.id for s in students])

        items = [
            StudentWithClasses(
                **UserListItem.model_validate(student).model_dump(),
                enrolled_classes=classes_by_user.get(student.id, []),
            )
            for student in students
        ]
        return StudentPage(items=items, total=total, page=page_number, limit=page_size)

    async def list_users(
        self,
        privilege: str | None = None,
        q: str | None = None,
        page: object = None,
        limit: object = None,
    ) -> UserPage | list[UserListItem]:
        """List all users for administration.

        Paging applies only when both page and limit are positive integers; otherwise
        the full filtered list is returned.

        Args:
            privilege: Restrict to one role.
            q: Literal, case-insensitive substring of name or email.
            page: Requested page.
            limit: Requested page size.

        Returns:
            A page of users, or the full list when not paging.

        Raises:
            InvalidPrivilegeFilterError: If the role filter is unknown.
        """
        conditions: list[ColumnElement[bool]] = []
        privilege = _clean(privilege)
        if privilege is not None:
            if privilege not in PRIVILEGES:
                raise InvalidPrivilegeFilterError(f"Invalid privilege: {privilege}")
            conditions.append(User.privilege == privilege)

        q = _clean(q)
        if q is not None:
            conditions.append(or_(*_name_or_email_matches(contains_pattern(q))))

        stmt = select(User).where(*conditions).order_by(User.last_name, User.first_name, User.id)

        requested_page = positive_int(page)
        requested_limit = positive_int(limit)
        if requested_page is None or requested_limit is None:
            result = await self.db.execute(stmt)
            return [UserListItem.model_validate(user) for user in result.scalars().all()]

        page_number = clamp_page(requested_page)
        page_size = clamp_limit(requested_limit)
        total = await self._count(conditions)
        result = await self.db.execute(
            stmt.offset((page_number - 1) * page_size).limit(page_size)
        )
        items = [UserListItem.model_validate(user) for user in result.scalars().all()]
        return UserPage(items=items, total=total, page=page_number, limit=page_size)

    def _student_conditions(
        self,
        class_level: ClassLevel | None,
        q: str | None,
    ) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = [User.privilege == PRIVILEGE_STUDENT]

        if class_level is not None:
            conditions.append(_enrolled_class_exists(Class.level_is(class_level)))

        if q is not None:
            pattern = contains_pattern(q)
            conditions.append(
                or_(
                    *_name_or_email_matches(pattern),
                    _enrolled_class_exists(
                        or_(
                            Class.instructor.ilike(pattern, escape=LIKE_ESCAPE),
                            Class.age_group.ilike(pattern, escape=LIKE_ESCAPE),
                        )
                    ),
                )
            )

        return conditions

    async def _count(self, conditions: list[ColumnElement[bool]]) -> int:
        matching = select(User.id).where(*conditions).subquery()
        total = await self.db.scalar(select(func.count()).select_from(matching))
        return int(total or 0)

    async def _class_summaries_for(self, user_ids: list[str]) -> dict[str, list[ClassSummary]]:
        """Load enrolled-class summaries for a page of users in one query."""
        if not user_ids:
            return {}

        result = await self.db.execute(
            select(UserEnrolledClass.user_id, Class)
            .select_from(UserEnrolledClass)
            .join(Class, Class.id == UserEnrolledClass.class_id)
            .where(UserEnrolledClass.user_id.in_(user_ids))
            .order_by(UserEnrolledClass.user_id, Class.level_track, Class.level_number, Class.id)
        )

        summaries: dict[str, list[ClassSummary]] = defaultdict(list)
        for user_id, class_ in result.all():
            summaries[user_id].append(ClassSummary.from_model(class_))
        return summaries
