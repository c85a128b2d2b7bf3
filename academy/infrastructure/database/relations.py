# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Set primitives for the two mirrors of the User<->Class relationship.

Both mirrors have a composite primary key, so they behave as sets:
adding uses INSERT ... ON CONFLICT DO NOTHING (a duplicate add is a no-op)
and removing is a plain DELETE (removing an absent member is a no-op).

None of these functions commit; the caller decides where each write ends.
"""

from sqlalchemy import delete, exists, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from academy.infrastructure.database.connection import DatabaseError
from academy.infrastructure.database.models import ClassRosterEntry, UserEnrolledClass

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


async def _add_if_absent(db: AsyncSession, model: type, **values: str) -> None:
    dialect = db.get_bind().dialect.name
    insert = _INSERT_BY_DIALECT.get(dialect)
    if insert is None:
        raise DatabaseError(f"Set insert is not supported on the {dialect} dialect")
    await db.execute(insert(model).values(**values).on_conflict_do_nothing())


async def add_enrolled_class(db: AsyncSession, *, user_id: str, class_id: str) -> None:
    await _add_if_absent(db, UserEnrolledClass, user_id=user_id, class_id=class_id)


async def remove_enrolled_class(db: AsyncSession, *, user_id: str, class_id: str) -> None:
    await db.execute(
        delete(UserEnrolledClass).where(
            UserEnrolledClass.user_id == user_id,
            UserEnrolledClass.class_id == class_id,
        )
    )


async def add_roster_member(db: AsyncSession, *, user_id: str, class_id: str) -> None:
    await _add_if_absent(db, ClassRosterEntry, class_id=class_id, user_id=user_id)


async def remove_roster_member(db: AsyncSession, *, user_id: str, class_id: str) -> None:
    await db.execute(
        delete(ClassRosterEntry).where(
            ClassRosterEntry.class_id == class_id,
            ClassRosterEntry.user_id == user_id,
        )
    )


async def is_enrolled(db: AsyncSession, *, user_id: str, class_id: str) -> bool:
    """Check membership on the user side, which is the authoritative guard."""
    stmt = select(
        exists().where(
            UserEnrolledClass.user_id == user_id,
            UserEnrolledClass.class_id == class_id,
        )
    )
    return bool(await db.scalar(stmt))


async def enrolled_class_ids(db: AsyncSession, user_id: str) -> list[str]:
    result = await db.execute(
        select(UserEnrolledClass.class_id)
        .where(UserEnrolledClass.user_id == user_id)
        .order_by(UserEnrolledClass.class_id)
    )
    return list(result.scalars().all())


async def roster_user_ids(db: AsyncSession, class_id: str) -> list[str]:
    result = await db.execute(
        select(ClassRosterEntry.user_id)
        .where(ClassRosterEntry.class_id == class_id)
        .order_by(ClassRosterEntry.user_id)
    )
    return list(result.scalars().all())


async def clear_user_side(db: AsyncSession, user_id: str) -> None:
    """Drop every enrolled-classes entry owned by a user."""
    await db.execute(delete(UserEnrolledClass).where(UserEnrolledClass.user_id == user_id))


async def clear_class_side(db: AsyncSession, class_id: str) -> None:
    """Drop every roster entry owned by a class."""
    await db.execute(delete(ClassRosterEntry).where(ClassRosterEntry.class_id == class_id))


async def enrolled_class_ids_for(db: AsyncSession, user_ids: list[str]) -> dict[str, list[str]]:
    """Enrolled-class ids for many users, keyed by user id."""
    grouped: dict[str, list[str]] = {user_id: [] for user_id in user_ids}
    if not user_ids:
        return grouped
    result = await db.execute(
        select(UserEnrolledClass.user_id, UserEnrolledClass.class_id)
        .where(UserEnrolledClass.user_id.in_(user_ids))
        .order_by(UserEnrolledClass.user_id, UserEnrolledClass.class_id)
    )
    for user_id, class_id in result.all():
        grouped[user_id].append(class_id)
    return grouped


async def roster_user_ids_for(db: AsyncSession, class_ids: list[str]) -> dict[str, list[str]]:
    """Roster user ids for many classes, keyed by class id."""
    grouped: dict[str, list[str]] = {class_id: [] for class_id in class_ids}
    if not class_ids:
        return grouped
    result = await db.execute(
        select(ClassRosterEntry.class_id, ClassRosterEntry.user_id)
        .where(ClassRosterEntry.class_id.in_(class_ids))
        .order_by(ClassRosterEntry.class_id, ClassRosterEntry.user_id)
    )
    for class_id, user_id in result.all():
        grouped[class_id].append(user_id)
    return grouped
