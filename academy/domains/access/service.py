# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Access gate: identity to role resolution and authorization checks.

The gate keeps no state between requests. A verified identity-provider
subject is resolved to a local user and role once per request, and the
check helpers decide from that result alone (plus a target lookup for
self-or-privileged checks).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.infrastructure.database.models import PRIVILEGED_ROLES, User
from academy.utils.identifiers import is_valid_id

logger = logging.getLogger(__name__)


class AccessError(Exception):
    """Base exception for access decisions."""

    pass


class NotProvisionedError(AccessError):
    """Raised when a verified identity has no local user."""

    pass


class ForbiddenError(AccessError):
    """Raised when the requester's role does not allow the action."""

    pass


class InvalidTargetError(AccessError):
    """Raised when the target user id is malformed."""

    pass


class TargetNotFoundError(AccessError):
    """Raised when the target user does not exist."""

    pass


@dataclass(frozen=True)
class Principal:
    """The local user behind a verified identity.

    Attributes:
        identity_id: Identity-provider subject.
        user_id: Local user id.
        role: The user's privilege.
    """

    identity_id: str
    user_id: str
    role: str

    @property
    def is_privileged(self) -> bool:
        return self.role in PRIVILEGED_ROLES


class AccessGate:
    """Resolves principals and checks permissions.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def resolve_role(self, identity_id: str) -> Principal | None:
        """Look up the local user for an identity-provider subject.

        Args:
            identity_id: Verified subject id.

        Returns:
            The principal, or None if no local user is linked.
        """
        result = await self.db.execute(
            select(User.id, User.privilege).where(User.identity_id == identity_id)
        )
        row = result.one_or_none()
        if row is None:
            logger.debug("No local user for identity %s", identity_id)
            return None
        return Principal(identity_id=identity_id, user_id=row.id, role=row.privilege)

    async def require_principal(self, identity_id: str) -> Principal:
        """Resolve the principal or fail.

        Raises:
            NotProvisionedError: If no local user is linked to the identity.
        """
        principal = await self.resolve_role(identity_id)
        if principal is None:
            raise NotProvisionedError("User not found")
        return principal

    @staticmethod
    def require_privileged(role: str) -> None:
        """Allow admins and instructors only.

        Raises:
            ForbiddenError: For any other role.
        """
        if role not in PRIVILEGED_ROLES:
            raise ForbiddenError("Forbidden")

    async def require_self_or_privileged(
        self,
        role: str,
        target_user_id: str,
        requester_user_id: str,
    ) -> None:
        """Allow privileged roles, or a user acting on their own record.

        Args:
            role: Requester's role.
            target_user_id: User the request acts on.
            requester_user_id: Requester's local user id.

        Raises:
            InvalidTargetError: If the target id is malformed.
            TargetNotFoundError: If the target user does not exist.
            ForbiddenError: If the target is someone else.
        """
        if role in PRIVILEGED_ROLES:
            return
        if not is_valid_id(target_user_id):
            raise InvalidTargetError("Invalid ID")

        found = await self.db.scalar(select(exists().where(User.id == target_user_id)))
        if not found:
            raise TargetNotFoundError("User not found")
        if target_user_id != requester_user_id:
            raise ForbiddenError("Forbidden")
