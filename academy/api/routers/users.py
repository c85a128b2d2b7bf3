# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User and enrollment API endpoints.

This module provides endpoints for accounts:
- POST /sign-up - Create a student account for a new identity
- GET /users - List users (privileged)
- GET /user - Get own profile, or look up a user (privileged)
- PUT /user/{user_id} - Update a profile (self or privileged)
- DELETE /user/{user_id} - Delete an account and its enrollments (privileged)

Enrollment endpoints:
- POST /users/{user_id}/enroll - Enroll in a class (self or privileged)
- POST /users/{user_id}/unenroll - Leave a class (self or privileged)
- GET /students-classes/{user_id} - Classes a user is enrolled in
- GET /students-with-classes - Paginated students with their classes (privileged)
"""

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.api.dependencies import (
    DB,
    AuthenticatedUser,
    Identity,
    PrivilegedUser,
    SelfOrPrivilegedUser,
)
from academy.api.middleware.rate_limit import BURST_LIMIT, limiter
from academy.domains.class_ import ClassService, InvalidClassIdError, StudentNotFoundError
from academy.domains.membership import (
    AlreadyEnrolledError,
    ClassNotFoundError,
    EnrollmentClosedError,
    InvalidIdentifierError,
    MembershipService,
    NotEnrolledError,
    UserNotFoundError as MembershipUserNotFoundError,
)
from academy.domains.roster import (
    InvalidPrivilegeFilterError,
    RosterQueryService,
)
from academy.domains.user import (
    EmailAlreadyExistsError,
    IdentityAlreadyLinkedError,
    InvalidUserIdError,
    UserNotFoundError,
    UserService,
)
from academy.infrastructure.identity import (
    IdentityClient,
    IdentityProviderError,
    IdentityProviderNotConfiguredError,
)
from academy.models.class_ import ClassResponse
from academy.models.common import MessageResponse
from academy.models.user import (
    EnrollmentRequest,
    SignUpRequest,
    StudentPage,
    UserListItem,
    UserPage,
    UserResponse,
    UserUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service(db: AsyncSession, identity: IdentityClient | None = None) -> UserService:
    """Get user service instance.

    Args:
        db: Database session.
        identity: Identity provider client, needed for email changes and deletes.

    Returns:
        Configured UserService instance.
    """
    return UserService(db=db, identity=identity)


def _identity_failure(e: IdentityProviderError) -> HTTPException:
    if isinstance(e, IdentityProviderNotConfiguredError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"Identity provider request failed: {e}",
    )


@router.post(
    "/sign-up",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up",
    description="Create a student account linked to an identity-provider user.",
)
@limiter.limit(BURST_LIMIT)
async def sign_up(request: Request, data: SignUpRequest, db: DB) -> UserResponse:
    """Create a student account."""
    service = _get_service(db)

    try:
        return await service.sign_up(data)
    except (EmailAlreadyExistsError, IdentityAlreadyLinkedError) as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get(
    "/users",
    response_model=UserPage | list[UserListItem],
    summary="List users",
    description=(
        "List users, optionally by role and name/email search. "
        "Paginated when both page and limit are given."
    ),
)
async def list_users(
    db: DB,
    principal: PrivilegedUser,
    privilege: Annotated[str | None, Query(description="Filter by role")] = None,
    q: Annotated[str | None, Query(description="Search name or email")] = None,
    page: Annotated[str | None, Query(description="Page number")] = None,
    limit: Annotated[str | None, Query(description="Page size")] = None,
) -> UserPage | list[UserListItem]:
    """List users for administration."""
    service = RosterQueryService(db)

    try:
        return await service.list_users(privilege=privilege, q=q, page=page, limit=limit)
    except InvalidPrivilegeFilterError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get(
    "/user",
    response_model=UserResponse,
    summary="Get user",
    description=(
        "Get the requester's profile. Admins and instructors may look up "
        "another user by _id, email or whatsapp."
    ),
)
async def get_user(
    db: DB,
    principal: AuthenticatedUser,
    user_id: Annotated[str | None, Query(alias="_id", description="User id")] = None,
    email: Annotated[str | None, Query(description="Email address")] = None,
    whatsapp: Annotated[str | None, Query(description="WhatsApp number")] = None,
) -> UserResponse:
    """Get one profile."""
    service = _get_service(db)

    try:
        return await service.get_user(principal, user_id=user_id, email=email, whatsapp=whatsapp)
    except InvalidUserIdError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.put(
    "/user/{user_id}",
    response_model=UserResponse,
    summary="Update user",
    description="Update profile fields. An email change is synced to the identity provider first.",
)
async def update_user(
    user_id: str,
    data: UserUpdateRequest,
    db: DB,
    principal: SelfOrPrivilegedUser,
    identity: Identity,
) -> UserResponse:
    """Update a profile."""
    service = _get_service(db, identity)

    try:
        return await service.update_user(user_id, data)
    except InvalidUserIdError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except EmailAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except IdentityProviderError as e:
        logger.error("Email sync failed for user %s: %s", user_id, e)
        raise _identity_failure(e)


@router.delete(
    "/user/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete user",
    description=(
        "Remove the user from every class roster, delete the identity-provider "
        "record, then delete the user."
    ),
)
async def delete_user(
    user_id: str,
    db: DB,
    principal: PrivilegedUser,
    identity: Identity,
) -> Response:
    """Delete an account."""
    logger.info("Deleting user %s by %s", user_id, principal.user_id)
    service = _get_service(db, identity)

    try:
        await service.delete_user(user_id)
    except InvalidUserIdError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except IdentityProviderError as e:
        logger.error("Identity record deletion failed for user %s: %s", user_id, e)
        raise _identity_failure(e)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.api_route(
    "/users/{user_id}/enroll",
    methods=["POST", "PUT"],
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll in class",
    description="Add the user to a class roster and the class to the user's enrollments.",
)
async def enroll(
    user_id: str,
    data: EnrollmentRequest,
    db: DB,
    principal: SelfOrPrivilegedUser,
) -> MessageResponse:
    """Enroll a user in a class."""
    service = MembershipService(db)

    try:
        await service.enroll(user_id, data.class_id)
    except (InvalidIdentifierError, AlreadyEnrolledError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (MembershipUserNotFoundError, ClassNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except EnrollmentClosedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))

    return MessageResponse(message="Enrolled successfully!")


@router.api_route(
    "/users/{user_id}/unenroll",
    methods=["POST", "PUT"],
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Unenroll from class",
    description="Remove the user from a class roster, even if enrollment is closed.",
)
async def unenroll(
    user_id: str,
    data: EnrollmentRequest,
    db: DB,
    principal: SelfOrPrivilegedUser,
) -> MessageResponse:
    """Remove a user from a class."""
    service = MembershipService(db)

    try:
        await service.unenroll(user_id, data.class_id)
    except (InvalidIdentifierError, NotEnrolledError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except MembershipUserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return MessageResponse(message="Successfully unenrolled")


@router.get(
    "/students-classes/{user_id}",
    response_model=list[ClassResponse],
    summary="List a user's classes",
)
async def list_student_classes(
    user_id: str,
    db: DB,
    principal: SelfOrPrivilegedUser,
) -> list[ClassResponse]:
    """Classes the user is enrolled in."""
    try:
        return await ClassService(db).list_enrolled_classes(user_id)
    except InvalidClassIdError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StudentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get(
    "/students-with-classes",
    response_model=StudentPage,
    summary="List students with classes",
    description=(
        "Students ordered by last name, first name and id, each with their "
        "enrolled classes. Filter by level or search name, email, instructor "
        "or age group."
    ),
)
async def list_students_with_classes(
    db: DB,
    principal: PrivilegedUser,
    page: Annotated[str | None, Query(description="Page number, from 1")] = None,
    limit: Annotated[str | None, Query(description="Page size, 1 to 200")] = None,
    level: Annotated[str | None, Query(description="Level of an enrolled class")] = None,
    q: Annotated[str | None, Query(description="Search text")] = None,
) -> StudentPage:
    """Paginated students with their classes."""
    return await RosterQueryService(db).list_students(page=page, limit=limit, level=level, q=q)
