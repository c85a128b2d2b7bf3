# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Membership service."""

from uuid import uuid4

import pytest
from sqlalchemy import exists, select
from sqlalchemy.exc import OperationalError

from academy.domains.membership import (
    AlreadyEnrolledError,
    ClassNotFoundError,
    ConsistencyGapError,
    EnrollmentClosedError,
    InvalidIdentifierError,
    MembershipService,
    NotEnrolledError,
    UserNotFoundError,
)
from academy.infrastructure.database import relations
from academy.infrastructure.database.models import Class, User


def _db_failure() -> OperationalError:
    return OperationalError("INSERT", {}, Exception("disk I/O error"))


@pytest.fixture
def membership(db) -> MembershipService:
    """Create membership service on the test database."""
    return MembershipService(db=db)


async def _user_exists(db, user_id: str) -> bool:
    return bool(await db.scalar(select(exists().where(User.id == user_id))))


async def _class_exists(db, class_id: str) -> bool:
    return bool(await db.scalar(select(exists().where(Class.id == class_id))))


class TestEnroll:
    """Tests for enrollment."""

    async def test_enroll_writes_both_sides(self, db, membership, make_user, make_class, assert_consistent):
        """Test enrolling adds the class to the user and the user to the roster."""
        user = await make_user()
        class_ = await make_class()

        await membership.enroll(user.id, class_.id)

        assert await relations.enrolled_class_ids(db, user.id) == [class_.id]
        assert await relations.roster_user_ids(db, class_.id) == [user.id]
        await assert_consistent()

    async def test_enroll_twice_rejected_without_change(
        self, db, membership, make_user, make_class, assert_consistent
    ):
        """Test a repeated enroll is rejected and leaves a single membership."""
        user = await make_user()
        class_ = await make_class()
        await membership.enroll(user.id, class_.id)

        with pytest.raises(AlreadyEnrolledError):
            await membership.enroll(user.id, class_.id)

        assert await relations.enrolled_class_ids(db, user.id) == [class_.id]
        assert await relations.roster_user_ids(db, class_.id) == [user.id]
        await assert_consistent()

    async def test_enroll_closed_class(self, db, membership, make_user, make_class):
        """Test a class closed for enrollment rejects new students."""
        user = await make_user()
        class_ = await make_class(is_enrollment_open=False)

        with pytest.raises(EnrollmentClosedError):
            await membership.enroll(user.id, class_.id)

        assert await relations.enrolled_class_ids(db, user.id) == []

    async def test_enroll_unknown_user(self, membership, make_class):
        class_ = await make_class()

        with pytest.raises(UserNotFoundError):
            await membership.enroll(str(uuid4()), class_.id)

    async def test_enroll_unknown_class(self, membership, make_user):
        user = await make_user()

        with pytest.raises(ClassNotFoundError):
            await membership.enroll(user.id, str(uuid4()))

    @pytest.mark.parametrize("bad_id", ["", "123", "not-a-uuid"])
    async def test_enroll_malformed_ids(self, membership, bad_id):
        with pytest.raises(InvalidIdentifierError):
            await membership.enroll(bad_id, str(uuid4()))
        with pytest.raises(InvalidIdentifierError):
            await membership.enroll(str(uuid4()), bad_id)

    async def test_class_side_failure_reports_gap(self, db, membership, make_user, make_class, monkeypatch):
        """Test a failed roster write after the user write is reported, not hidden."""
        user = await make_user()
        class_ = await make_class()
        user_id, class_id = user.id, class_.id

        async def failing_add(*args, **kwargs):
            raise _db_failure()

        monkeypatch.setattr(relations, "add_roster_member", failing_add)

        with pytest.raises(ConsistencyGapError) as exc_info:
            await membership.enroll(user_id, class_id)

        assert exc_info.value.user_id == user_id
        assert exc_info.value.class_id == class_id
        assert await relations.enrolled_class_ids(db, user_id) == [class_id]
        assert await relations.roster_user_ids(db, class_id) == []

    async def test_set_writes_are_idempotent(self, db, make_user, make_class):
        """Test adding the same member twice stores it once."""
        user = await make_user()
        class_ = await make_class()

        for _ in range(2):
            await relations.add_enrolled_class(db, user_id=user.id, class_id=class_.id)
            await relations.add_roster_member(db, user_id=user.id, class_id=class_.id)
        await db.commit()

        assert await relations.enrolled_class_ids(db, user.id) == [class_.id]
        assert await relations.roster_user_ids(db, class_.id) == [user.id]


class TestUnenroll:
    """Tests for unenrollment."""

    async def test_unenroll_removes_both_sides(self, db, membership, make_user, make_class, assert_consistent):
        user = await make_user()
        class_ = await make_class()
        await membership.enroll(user.id, class_.id)

        await membership.unenroll(user.id, class_.id)

        assert await relations.enrolled_class_ids(db, user.id) == []
        assert await relations.roster_user_ids(db, class_.id) == []
        await assert_consistent()

    async def test_unenroll_when_not_enrolled(self, db, membership, make_user, make_class, assert_consistent):
        """Test leaving a class the user is not in is rejected and changes nothing."""
        user = await make_user()
        class_ = await make_class()

        with pytest.raises(NotEnrolledError):
            await membership.unenroll(user.id, class_.id)

        assert await relations.roster_user_ids(db, class_.id) == []
        await assert_consistent()

    async def test_unenroll_from_closed_class(self, db, membership, make_user, make_class):
        """Test closing enrollment does not trap enrolled students."""
        user = await make_user()
        class_ = await make_class()
        await membership.enroll(user.id, class_.id)
        class_.is_enrollment_open = False
        await db.commit()

        await membership.unenroll(user.id, class_.id)

        assert await relations.enrolled_class_ids(db, user.id) == []

    async def test_sequence_keeps_relation_mirrored(self, membership, make_user, make_class, assert_consistent):
        """Test an interleaved enroll/unenroll sequence keeps both sides equal."""
        users = [await make_user() for _ in range(3)]
        classes = [await make_class() for _ in range(2)]

        for user in users:
            for class_ in classes:
                await membership.enroll(user.id, class_.id)
        await membership.unenroll(users[0].id, classes[1].id)
        await membership.unenroll(users[2].id, classes[0].id)
        await membership.enroll(users[0].id, classes[1].id)

        await assert_consistent()


class TestCascadeDeleteUser:
    """Tests for deleting a user."""

    async def test_user_removed_from_every_roster(
        self, db, membership, make_user, make_class, assert_consistent
    ):
        user = await make_user()
        other = await make_user()
        classes = [await make_class() for _ in range(3)]
        for class_ in classes:
            await membership.enroll(user.id, class_.id)
            await membership.enroll(other.id, class_.id)
        user_id = user.id

        await membership.cascade_delete_user(user_id)

        assert not await _user_exists(db, user_id)
        for class_ in classes:
            assert await relations.roster_user_ids(db, class_.id) == [other.id]
        await assert_consistent()

    async def test_hook_runs_before_delete(self, db, membership, make_user, make_class):
        """Test the hook sees the user already out of every class."""
        user = await make_user()
        class_ = await make_class()
        await membership.enroll(user.id, class_.id)
        seen: list[list[str]] = []

        async def hook(target: User) -> None:
            seen.append(await relations.roster_user_ids(db, class_.id))

        await membership.cascade_delete_user(user.id, before_delete=hook)

        assert seen == [[]]

    async def test_failing_hook_keeps_user(self, db, membership, make_user, make_class, assert_consistent):
        """Test a hook error aborts the delete and leaves a consistent, unenrolled user."""
        user = await make_user()
        class_ = await make_class()
        await membership.enroll(user.id, class_.id)
        user_id = user.id

        async def hook(target: User) -> None:
            raise RuntimeError("identity provider down")

        with pytest.raises(RuntimeError):
            await membership.cascade_delete_user(user_id, before_delete=hook)

        assert await _user_exists(db, user_id)
        assert await relations.enrolled_class_ids(db, user_id) == []
        await assert_consistent()

    async def test_partial_failure_keeps_user(
        self, db, membership, make_user, make_class, monkeypatch, assert_consistent
    ):
        """Test a failed roster removal is reported and the user is not deleted."""
        user = await make_user()
        kept = await make_class()
        released = await make_class()
        await membership.enroll(user.id, kept.id)
        await membership.enroll(user.id, released.id)
        user_id, kept_id, released_id = user.id, kept.id, released.id

        original = relations.remove_roster_member

        async def flaky_remove(session, *, user_id: str, class_id: str) -> None:
            if class_id == kept_id:
                raise _db_failure()
            await original(session, user_id=user_id, class_id=class_id)

        monkeypatch.setattr(relations, "remove_roster_member", flaky_remove)

        with pytest.raises(ConsistencyGapError) as exc_info:
            await membership.cascade_delete_user(user_id)

        assert exc_info.value.failed_ids == [kept_id]
        assert await _user_exists(db, user_id)
        assert await relations.enrolled_class_ids(db, user_id) == [kept_id]
        assert await relations.roster_user_ids(db, released_id) == []
        await assert_consistent()

        monkeypatch.setattr(relations, "remove_roster_member", original)
        await membership.cascade_delete_user(user_id)
        assert not await _user_exists(db, user_id)
        await assert_consistent()

    async def test_unknown_user(self, membership):
        with pytest.raises(UserNotFoundError):
            await membership.cascade_delete_user(str(uuid4()))


class TestCascadeDeleteClass:
    """Tests for deleting a class."""

    async def test_class_removed_from_every_user(
        self, db, membership, make_user, make_class, assert_consistent
    ):
        users = [await make_user() for _ in range(3)]
        doomed = await make_class()
        survivor = await make_class()
        for user in users:
            await membership.enroll(user.id, doomed.id)
            await membership.enroll(user.id, survivor.id)
        doomed_id = doomed.id

        await membership.cascade_delete_class(doomed_id)

        assert not await _class_exists(db, doomed_id)
        for user in users:
            assert await relations.enrolled_class_ids(db, user.id) == [survivor.id]
        await assert_consistent()

    async def test_filter_treats_other_classes_as_missing(self, db, membership, make_class):
        class_ = await make_class()

        with pytest.raises(ClassNotFoundError):
            await membership.cascade_delete_class(class_.id, class_filter=lambda c: False)

        assert await _class_exists(db, class_.id)

    async def test_partial_failure_keeps_class(
        self, db, membership, make_user, make_class, monkeypatch, assert_consistent
    ):
        stuck = await make_user()
        freed = await make_user()
        class_ = await make_class()
        await membership.enroll(stuck.id, class_.id)
        await membership.enroll(freed.id, class_.id)
        stuck_id, freed_id, class_id = stuck.id, freed.id, class_.id

        original = relations.remove_enrolled_class

        async def flaky_remove(session, *, user_id: str, class_id: str) -> None:
            if user_id == stuck_id:
                raise _db_failure()
            await original(session, user_id=user_id, class_id=class_id)

        monkeypatch.setattr(relations, "remove_enrolled_class", flaky_remove)

        with pytest.raises(ConsistencyGapError) as exc_info:
            await membership.cascade_delete_class(class_id)

        assert exc_info.value.failed_ids == [stuck_id]
        assert await _class_exists(db, class_id)
        assert await relations.roster_user_ids(db, class_id) == [stuck_id]
        assert await relations.enrolled_class_ids(db, freed_id) == []
        await assert_consistent()
