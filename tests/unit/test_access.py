# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the access gate."""

from uuid import uuid4

import pytest

from academy.domains.access import (
    AccessGate,
    ForbiddenError,
    InvalidTargetError,
    NotProvisionedError,
    Principal,
    TargetNotFoundError,
)
from academy.infrastructure.database.models import (
    PRIVILEGE_ADMIN,
    PRIVILEGE_INSTRUCTOR,
    PRIVILEGE_STUDENT,
)


@pytest.fixture
def gate(db) -> AccessGate:
    return AccessGate(db=db)


class TestResolveRole:
    """Tests for identity to principal resolution."""

    async def test_resolves_linked_user(self, gate, make_user):
        user = await make_user(identity_id="idp_abc", privilege=PRIVILEGE_INSTRUCTOR)

        principal = await gate.resolve_role("idp_abc")

        assert principal == Principal(
            identity_id="idp_abc", user_id=user.id, role=PRIVILEGE_INSTRUCTOR
        )
        assert principal.is_privileged

    async def test_unlinked_identity(self, gate):
        assert await gate.resolve_role("idp_nobody") is None

    async def test_require_principal_unlinked(self, gate):
        with pytest.raises(NotProvisionedError):
            await gate.require_principal("idp_nobody")


class TestRequirePrivileged:
    """Tests for the staff-only check."""

    @pytest.mark.parametrize("role", [PRIVILEGE_ADMIN, PRIVILEGE_INSTRUCTOR])
    def test_staff_allowed(self, role):
        AccessGate.require_privileged(role)

    @pytest.mark.parametrize("role", [PRIVILEGE_STUDENT, "", "root"])
    def test_others_forbidden(self, role):
        with pytest.raises(ForbiddenError):
            AccessGate.require_privileged(role)


class TestRequireSelfOrPrivileged:
    """Tests for the self-or-staff check."""

    async def test_self_allowed(self, gate, make_user):
        user = await make_user()

        await gate.require_self_or_privileged(PRIVILEGE_STUDENT, user.id, user.id)

    async def test_other_user_forbidden(self, gate, make_user):
        me = await make_user()
        other = await make_user()

        with pytest.raises(ForbiddenError):
            await gate.require_self_or_privileged(PRIVILEGE_STUDENT, other.id, me.id)

    async def test_staff_may_act_on_anyone(self, gate, make_user):
        me = await make_user(privilege=PRIVILEGE_ADMIN)
        other = await make_user()

        await gate.require_self_or_privileged(PRIVILEGE_ADMIN, other.id, me.id)

    async def test_malformed_target(self, gate, make_user):
        me = await make_user()

        with pytest.raises(InvalidTargetError):
            await gate.require_self_or_privileged(PRIVILEGE_STUDENT, "nope", me.id)

    async def test_missing_target(self, gate, make_user):
        me = await make_user()

        with pytest.raises(TargetNotFoundError):
            await gate.require_self_or_privileged(PRIVILEGE_STUDENT, str(uuid4()), me.id)
