# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Membership service for the User<->Class relationship.

The relationship is stored twice: in the user's enrolled-classes set and
in the class roster. This service is the only writer of either set and
keeps them mirrored:

    for all (u, c): c.id in u.enrolled_classes  <=>  u.id in c.roster

Writes are ordered (user side, then class side) and each side commits on
its own. Both sides use set semantics, so a retried or concurrent
duplicate request converges to the same state. If the second side fails
after the first committed, the one-sided edge is logged with both ids and
reported as a ConsistencyGapError.

Cascades remove each pair independently, both sides of a pair in one
commit, and refuse to delete the entity if any removal failed. Re-running
a failed cascade is safe.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from academy.infrastructure.database import relations
from academy.infrastructure.database.models import Class, User
from academy.utils.identifiers import is_valid_id

logger = logging.getLogger(__name__)

SetWrite = Callable[..., Awaitable[None]]


class MembershipError(Exception):
    """Base exception for membership errors."""

    pass


class InvalidIdentifierError(MembershipError):
    """Raised when a user or class id is malformed."""

    pass


class UserNotFoundError(MembershipError):
    """Raised when the user does not exist."""

    pass


class ClassNotFoundError(MembershipError):
    """Raised when the class does not exist."""

    pass


class AlreadyEnrolledError(MembershipError):
    """Raised when the user already has the class in their set."""

    pass


class NotEnrolledError(MembershipError):
    """Raised when the user does not have the class in their set."""

    pass


class EnrollmentClosedError(MembershipError):
    """Raised when the class does not accept new enrollments."""

    pass


class ConsistencyGapError(MembershipError):
    """Raised when only part of a two-sided write was applied.

    The mirrors may disagree until the operation is retried or repaired.

    Attributes:
        user_id: User on one end of the affected edge(s).
        class_id: Class on the other end of the affected edge(s).
        failed_ids: Opposite-side ids whose removal failed during a cascade.
    """

    def __init__(
        self,
        message: str,
        user_id: str | None = None,
        class_id: str | None = None,
        failed_ids: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.user_id = user_id
        self.class_id = class_id
        self.failed_ids = failed_ids or []


class MembershipService:
    """Service for enrollment, unenrollment and cascading deletes.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def enroll(self, user_id: str, class_id: str) -> None:
        """Enroll a user in a class.

        Args:
            user_id: User identifier.
            class_id: Class identifier.

        Raises:
            InvalidIdentifierError: If either id is malformed.
            UserNotFoundError: If the user does not exist.
            AlreadyEnrolledError: If the user is already enrolled.
            ClassNotFoundError: If the class does not exist.
            EnrollmentClosedError: If the class is closed for enrollment.
            ConsistencyGapError: If the roster write failed after the user write.
        """
        self._require_ids(user_id, class_id)
        await self._get_user(user_id)

        # Guard only; concurrent requests may both pass, the set writes absorb it.
        if await relations.is_enrolled(self.db, user_id=user_id, class_id=class_id):
            raise AlreadyEnrolledError("Already enrolled in this class")

        class_ = await self.db.get(Class, class_id)
        if class_ is None:
            raise ClassNotFoundError("Class not found")
        if not class_.is_enrollment_open:
            raise EnrollmentClosedError("Enrollment is currently closed for this class.")

        await self._write_both_sides(
            "enroll",
            user_id,
            class_id,
            user_side=relations.add_enrolled_class,
            class_side=relations.add_roster_member,
        )
        logger.info("Enrolled user %s in class %s", user_id, class_id)

    async def unenroll(self, user_id: str, class_id: str) -> None:
        """Remove a user from a class.

        Enrollment-open is not checked; a closed class can still be left.

        Args:
            user_id: User identifier.
            class_id: Class identifier.

        Raises:
            InvalidIdentifierError: If either id is malformed.
            UserNotFoundError: If the user does not exist.
            NotEnrolledError: If the user is not enrolled in the class.
            ConsistencyGapError: If the roster write failed after the user write.
        """
        self._require_ids(user_id, class_id)
        await self._get_user(user_id)

        if not await relations.is_enrolled(self.db, user_id=user_id, class_id=class_id):
            raise NotEnrolledError("Not enrolled in this class")

        await self._write_both_sides(
            "unenroll",
            user_id,
            class_id,
            user_side=relations.remove_enrolled_class,
            class_side=relations.remove_roster_member,
        )
        logger.info("Unenrolled user %s from class %s", user_id, class_id)

    async def cascade_delete_user(
        self,
        user_id: str,
        before_delete: Callable[[User], Awaitable[None]] | None = None,
    ) -> None:
        """Remove a user from every roster, then delete the user.

        Args:
            user_id: User identifier.
            before_delete: Hook run once the user is out of every class and
                before the record is deleted; an exception aborts the delete
                and leaves the user with no enrollments.

        Raises:
            InvalidIdentifierError: If the id is malformed.
            UserNotFoundError: If the user does not exist.
            ConsistencyGapError: If any roster removal failed; the user is kept.
        """
        self._require_ids(user_id)
        user = await self._get_user(user_id)

        class_ids = await relations.enrolled_class_ids(self.db, user_id)
        failed = await self._remove_each(
            class_ids,
            lambda class_id: self._remove_pair(user_id, class_id),
            describe=lambda class_id: f"user {user_id} from class {class_id} roster",
        )
        if failed:
            raise ConsistencyGapError(
                f"Failed to remove user from {len(failed)} class roster(s); user not deleted",
                user_id=user_id,
                failed_ids=failed,
            )

        await relations.clear_user_side(self.db, user_id)
        await self.db.commit()

        if before_delete is not None:
            await before_delete(user)

        await self.db.execute(delete(User).where(User.id == user_id))
        await self.db.commit()
        logger.info("Deleted user %s after leaving %d class(es)", user_id, len(class_ids))

    async def cascade_delete_class(
        self,
        class_id: str,
        class_filter: Callable[[Class], bool] | None = None,
    ) -> None:
        """Remove a class from every rostered user, then delete the class.

        Args:
            class_id: Class identifier.
            class_filter: Optional predicate the class must satisfy, used by
                track-specific routes; a class failing it counts as missing.

        Raises:
            InvalidIdentifierError: If the id is malformed.
            ClassNotFoundError: If the class does not exist.
            ConsistencyGapError: If any enrollment removal failed; the class is kept.
        """
        self._require_ids(class_id)
        class_ = await self.db.get(Class, class_id)
        if class_ is None or (class_filter is not None and not class_filter(class_)):
            raise ClassNotFoundError("Class not found")

        user_ids = await relations.roster_user_ids(self.db, class_id)
        failed = await self._remove_each(
            user_ids,
            lambda user_id: self._remove_pair(user_id, class_id),
            describe=lambda user_id: f"class {class_id} from user {user_id} enrolled classes",
        )
        if failed:
            raise ConsistencyGapError(
                f"Failed to remove class from {len(failed)} user(s); class not deleted",
                class_id=class_id,
                failed_ids=failed,
            )

        await relations.clear_class_side(self.db, class_id)
        await self.db.execute(delete(Class).where(Class.id == class_id))
        await self.db.commit()
        logger.info("Deleted class %s after releasing %d user(s)", class_id, len(user_ids))

    async def _write_both_sides(
        self,
        action: str,
        user_id: str,
        class_id: str,
        user_side: SetWrite,
        class_side: SetWrite,
    ) -> None:
        await user_side(self.db, user_id=user_id, class_id=class_id)
        await self.db.commit()

        try:
            await class_side(self.db, user_id=user_id, class_id=class_id)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Consistency gap on %s: user side committed, class side failed "
                "(user=%s, class=%s): %s",
                action,
                user_id,
                class_id,
                e,
            )
            raise ConsistencyGapError(
                f"Partial {action}: user {user_id} updated but class {class_id} roster was not",
                user_id=user_id,
                class_id=class_id,
            ) from e

    async def _remove_pair(self, user_id: str, class_id: str) -> None:
        # Both sides in one commit, so a failed pair is left fully enrolled.
        await relations.remove_roster_member(self.db, user_id=user_id, class_id=class_id)
        await relations.remove_enrolled_class(self.db, user_id=user_id, class_id=class_id)

    async def _remove_each(
        self,
        target_ids: list[str],
        remove: Callable[[str], Awaitable[None]],
        describe: Callable[[str], str],
    ) -> list[str]:
        failed: list[str] = []
        for target_id in target_ids:
            try:
                await remove(target_id)
                await self.db.commit()
            except SQLAlchemyError as e:
                await self.db.rollback()
                failed.append(target_id)
                logger.error("Failed to remove %s: %s", describe(target_id), e)
        return failed

    async def _get_user(self, user_id: str) -> User:
        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise UserNotFoundError("User not found")
        return user

    @staticmethod
    def _require_ids(*ids: str) -> None:
        for value in ids:
            if not is_valid_id(value):
                raise InvalidIdentifierError("Invalid ID")
