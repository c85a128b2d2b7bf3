# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User service for account and profile management.

This module provides the UserService class for:
- Public sign-up after identity-provider registration
- Profile lookup (own profile, or any profile for staff)
- Profile updates, keeping the identity provider's primary email in sync
- Account deletion through the membership cascade
"""

from __future__ import annotations

import logging

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.domains.access import Principal
from academy.domains.membership import MembershipService
from academy.domains.membership import UserNotFoundError as MembershipUserNotFoundError
from academy.infrastructure.database import relations
from academy.infrastructure.database.models import PRIVILEGE_STUDENT, User
from academy.infrastructure.identity import IdentityClient
from academy.models.user import SignUpRequest, UserResponse, UserUpdateRequest
from academy.utils.identifiers import is_valid_id

logger = logging.getLogger(__name__)


class UserServiceError(Exception):
    """Base exception for user service errors."""

    pass


class InvalidUserIdError(UserServiceError):
    """Raised when a user id is malformed."""

    pass


class UserNotFoundError(UserServiceError):
    """Raised when a user is not found."""

    pass


class EmailAlreadyExistsError(UserServiceError):
    """Raised when the email belongs to another account."""

    pass


class IdentityAlreadyLinkedError(UserServiceError):
    """Raised when the identity already has a local account."""

    pass


class UserService:
    """Service for user accounts.

    Attributes:
        db: Async database session.
        identity: Identity provider client, used for email sync and deletion.
    """

    def __init__(self, db: AsyncSession, identity: IdentityClient | None = None) -> None:
        """Initialize user service.

        Args:
            db: Async database session.
            identity: Identity provider client. Required for email changes
                and deletion.
        """
        self.db = db
        self.identity = identity

    async def sign_up(self, request: SignUpRequest) -> UserResponse:
        """Create a student account linked to an identity.

        Args:
            request: Sign-up form.

        Returns:
            The created user.

        Raises:
            EmailAlreadyExistsError: If the email is taken.
            IdentityAlreadyLinkedError: If the identity already has an account.
        """
        email = str(request.email)
        if await self._email_taken(email):
            raise EmailAlreadyExistsError("Email already exists")
        if await self.db.scalar(select(exists().where(User.identity_id == request.identity_id))):
            raise IdentityAlreadyLinkedError("Account already exists")

        user = User(
            identity_id=request.identity_id,
            first_name=request.first_name,
            last_name=request.last_name,
            email=email,
            whatsapp=request.whatsapp,
            privilege=PRIVILEGE_STUDENT,
        )
        self.db.add(user)
        await self.db.commit()

        logger.info("Signed up user %s", user.id)
        return UserResponse.from_model(user)

    async def get_user(
        self,
        principal: Principal,
        user_id: str | None = None,
        email: str | None = None,
        whatsapp: str | None = None,
    ) -> UserResponse:
        """Look up one profile.

        Staff may look up anyone by id, email or WhatsApp number (all given
        filters must match). Everyone else, and staff without filters, get
        their own profile.

        Args:
            principal: The requester.
            user_id: Filter by id.
            email: Filter by email.
            whatsapp: Filter by WhatsApp number.

        Returns:
            The matching profile.

        Raises:
            InvalidUserIdError: If the id filter is malformed.
            UserNotFoundError: If nothing matches.
        """
        filters = []
        if principal.is_privileged:
            if user_id is not None:
                if not is_valid_id(user_id):
                    raise InvalidUserIdError("Invalid ID")
                filters.append(User.id == user_id)
            if email is not None:
                filters.append(User.email == email)
            if whatsapp is not None:
                filters.append(User.whatsapp == whatsapp)

        if not filters:
            filters.append(User.id == principal.user_id)

        result = await self.db.execute(select(User).where(*filters).order_by(User.id).limit(1))
        user = result.scalar_one_or_none()
        if user is None:
            raise UserNotFoundError("User not found")

        return UserResponse.from_model(user, await relations.enrolled_class_ids(self.db, user.id))

    async def update_user(self, user_id: str, request: UserUpdateRequest) -> UserResponse:
        """Update profile fields.

        An email change is pushed to the identity provider first (new
        address verified and primary, old address removed); the local
        record changes only if that succeeds.

        Args:
            user_id: User identifier.
            request: Fields to change.

        Returns:
            The updated profile.

        Raises:
            InvalidUserIdError: If the id is malformed.
            UserNotFoundError: If the user is not found.
            EmailAlreadyExistsError: If the new email belongs to another user.
            IdentityProviderError: If the email sync fails.
        """
        user = await self._get_user(user_id)
        updates = request.model_dump(exclude_unset=True, exclude_none=True)

        new_email = updates.get("email")
        if new_email is not None:
            new_email = str(new_email)
            updates["email"] = new_email
        if new_email is not None and new_email != user.email:
            if await self._email_taken(new_email, exclude_id=user.id):
                raise EmailAlreadyExistsError("Email already exists")
            await self._require_identity().replace_primary_email(
                user.identity_id, old_email=user.email, new_email=new_email
            )

        for field, value in updates.items():
            setattr(user, field, value)
        await self.db.commit()

        logger.info("Updated user %s (%s)", user.id, ", ".join(sorted(updates)) or "no changes")
        return UserResponse.from_model(user, await relations.enrolled_class_ids(self.db, user.id))

    async def delete_user(self, user_id: str) -> None:
        """Delete an account.

        The user is removed from every class roster first, then from the
        identity provider, then locally.

        Args:
            user_id: User identifier.

        Raises:
            InvalidUserIdError: If the id is malformed.
            UserNotFoundError: If the user is not found.
            ConsistencyGapError: If some rosters could not be updated.
            IdentityProviderError: If the identity record could not be deleted.
        """
        if not is_valid_id(user_id):
            raise InvalidUserIdError("Invalid ID")
        identity = self._require_identity()

        async def delete_identity(user: User) -> None:
            await identity.delete_user(user.identity_id)

        try:
            await MembershipService(self.db).cascade_delete_user(user_id, before_delete=delete_identity)
        except MembershipUserNotFoundError as e:
            raise UserNotFoundError("User not found") from e

    def _require_identity(self) -> IdentityClient:
        if self.identity is None:
            raise RuntimeError("UserService was created without an identity client")
        return self.identity

    async def _email_taken(self, email: str, exclude_id: str | None = None) -> bool:
        condition = User.email == email
        if exclude_id is not None:
            condition = condition & (User.id != exclude_id)
        return bool(await self.db.scalar(select(exists().where(condition))))

    async def _get_user(self, user_id: str) -> User:
        if not is_valid_id(user_id):
            raise InvalidUserIdError("Invalid ID")
        user = await self.db.get(User, user_id)
        if user is None:
            raise UserNotFoundError("User not found")
        return user
