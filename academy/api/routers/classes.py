# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class catalog API endpoints.

This module provides endpoints for numbered-level classes:
- GET /classes - List numbered-level classes with filtering
- POST /classes - Create a class (privileged)
- GET /classes/{class_id} - Get class details
- PUT /classes/{class_id} - Update class (privileged)
- DELETE /classes/{class_id} - Delete class and its enrollments (privileged)
- GET /classes/class-students/{class_id} - Users on the roster (privileged)
- GET /all-classes - List classes of every track with filtering

Conversation and IELTS classes have the same list/create/get/update/delete
endpoints under /classes/conversations and /classes/ielts; their level is
fixed by the route.

Reads are public. Changes require an admin or instructor.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Response, status
from fastapi.responses import JSONResponse

from academy.api.dependencies import DB, PrivilegedUser
from academy.core.class_level import LevelTrack
from academy.domains.class_ import (
    ClassNotFoundError,
    ClassService,
    DuplicateClassError,
    InvalidClassFilterError,
    InvalidClassIdError,
)
from academy.models.class_ import (
    ClassCreateRequest,
    ClassMutationResponse,
    ClassResponse,
    ClassUpdateRequest,
    TrackClassCreateRequest,
)
from academy.models.user import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _duplicate_response(e: DuplicateClassError) -> JSONResponse:
    """409 carrying the existing class, so clients can link to it."""
    body = ClassMutationResponse(message=str(e), class_=e.existing)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=body.model_dump(by_alias=True, mode="json"),
    )


def _lookup_failure(e: Exception) -> HTTPException:
    if isinstance(e, InvalidClassIdError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get(
    "/classes",
    response_model=list[ClassResponse],
    summary="List classes",
    description="List numbered-level classes, optionally by level, instructor or age group.",
)
async def list_classes(
    db: DB,
    level: Annotated[str | None, Query(description="Level number")] = None,
    instructor: Annotated[str | None, Query(description="Instructor name")] = None,
    age_group: Annotated[str | None, Query(alias="ageGroup", description="Age group")] = None,
) -> list[ClassResponse]:
    """List numbered-level classes."""
    try:
        return await ClassService(db).list_classes(
            level=level, instructor=instructor, age_group=age_group
        )
    except InvalidClassFilterError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get(
    "/all-classes",
    response_model=list[ClassResponse],
    summary="List all classes",
    description="List classes of every track, including conversation and IELTS.",
)
async def list_all_classes(
    db: DB,
    level: Annotated[str | None, Query(description="Level number, conversation or ielts")] = None,
    instructor: Annotated[str | None, Query(description="Instructor name")] = None,
    age_group: Annotated[str | None, Query(alias="ageGroup", description="Age group")] = None,
) -> list[ClassResponse]:
    """List classes of every track."""
    try:
        return await ClassService(db).list_classes(
            level=level, instructor=instructor, age_group=age_group, numeric_only=False
        )
    except InvalidClassFilterError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post(
    "/classes",
    response_model=ClassMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create class",
    description=(
        "Create a class. A class with the same level, age group, instructor "
        "and schedule already existing is a 409 carrying that class."
    ),
    responses={409: {"model": ClassMutationResponse}},
)
async def create_class(
    data: ClassCreateRequest,
    db: DB,
    principal: PrivilegedUser,
) -> ClassMutationResponse | JSONResponse:
    """Create a class."""
    logger.info("Creating level %s class for %s by %s", data.level, data.age_group, principal.user_id)

    try:
        created = await ClassService(db).create_class(data)
    except DuplicateClassError as e:
        return _duplicate_response(e)
    return ClassMutationResponse(message="Class created successfully", class_=created)


def _add_track_routes(track: LevelTrack, path: str, label: str) -> None:
    """Register list/create/get/update/delete for one named track."""

    @router.get(
        path,
        response_model=list[ClassResponse],
        summary=f"List {label} classes",
        name=f"list_{track.value}_classes",
    )
    async def list_track(db: DB) -> list[ClassResponse]:
        return await ClassService(db).list_track(track)

    @router.post(
        path,
        response_model=ClassMutationResponse,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create {label} class",
        name=f"create_{track.value}_class",
        responses={409: {"model": ClassMutationResponse}},
    )
    async def create_track(
        data: TrackClassCreateRequest,
        db: DB,
        principal: PrivilegedUser,
    ) -> ClassMutationResponse | JSONResponse:
        try:
            created = await ClassService(db).create_track_class(track, data)
        except DuplicateClassError as e:
            return _duplicate_response(e)
        return ClassMutationResponse(message=f"{label} created successfully", class_=created)

    @router.get(
        path + "/{class_id}",
        response_model=ClassResponse,
        summary=f"Get {label} class",
        name=f"get_{track.value}_class",
    )
    async def get_track(class_id: str, db: DB) -> ClassResponse:
        try:
            return await ClassService(db).get_class(class_id, track=track)
        except (InvalidClassIdError, ClassNotFoundError) as e:
            raise _lookup_failure(e)

    @router.put(
        path + "/{class_id}",
        response_model=ClassResponse,
        summary=f"Update {label} class",
        name=f"update_{track.value}_class",
        responses={409: {"model": ClassMutationResponse}},
    )
    async def update_track(
        class_id: str,
        data: ClassUpdateRequest,
        db: DB,
        principal: PrivilegedUser,
    ) -> ClassResponse | JSONResponse:
        try:
            return await ClassService(db).update_class(class_id, data, track=track)
        except (InvalidClassIdError, ClassNotFoundError) as e:
            raise _lookup_failure(e)
        except DuplicateClassError as e:
            return _duplicate_response(e)

    @router.delete(
        path + "/{class_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary=f"Delete {label} class",
        name=f"delete_{track.value}_class",
    )
    async def delete_track(class_id: str, db: DB, principal: PrivilegedUser) -> Response:
        try:
            await ClassService(db).delete_class(class_id, track=track)
        except (InvalidClassIdError, ClassNotFoundError) as e:
            raise _lookup_failure(e)
        return Response(status_code=status.HTTP_204_NO_CONTENT)


# Registered before /classes/{class_id} so the track paths are not read as ids.
_add_track_routes(LevelTrack.CONVERSATION, "/classes/conversations", "Conversation")
_add_track_routes(LevelTrack.IELTS, "/classes/ielts", "IELTS class")


@router.get(
    "/classes/class-students/{class_id}",
    response_model=list[UserResponse],
    summary="List class students",
    description="Full user records of everyone on the class roster.",
)
async def list_class_students(
    class_id: str,
    db: DB,
    principal: PrivilegedUser,
) -> list[UserResponse]:
    """Users enrolled in a class."""
    try:
        return await ClassService(db).get_class_students(class_id)
    except (InvalidClassIdError, ClassNotFoundError) as e:
        raise _lookup_failure(e)


@router.get(
    "/classes/{class_id}",
    response_model=ClassResponse,
    summary="Get class",
)
async def get_class(class_id: str, db: DB) -> ClassResponse:
    """Get a class with its roster."""
    try:
        return await ClassService(db).get_class(class_id)
    except (InvalidClassIdError, ClassNotFoundError) as e:
        raise _lookup_failure(e)


@router.put(
    "/classes/{class_id}",
    response_model=ClassResponse,
    summary="Update class",
    description="Partial update. Changing level, age group, instructor or schedule is checked for duplicates.",
    responses={409: {"model": ClassMutationResponse}},
)
async def update_class(
    class_id: str,
    data: ClassUpdateRequest,
    db: DB,
    principal: PrivilegedUser,
) -> ClassResponse | JSONResponse:
    """Update a class."""
    try:
        return await ClassService(db).update_class(class_id, data)
    except (InvalidClassIdError, ClassNotFoundError) as e:
        raise _lookup_failure(e)
    except DuplicateClassError as e:
        return _duplicate_response(e)


@router.delete(
    "/classes/{class_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete class",
    description="Remove the class from every enrolled user, then delete it.",
)
async def delete_class(class_id: str, db: DB, principal: PrivilegedUser) -> Response:
    """Delete a class."""
    logger.info("Deleting class %s by %s", class_id, principal.user_id)

    try:
        await ClassService(db).delete_class(class_id)
    except (InvalidClassIdError, ClassNotFoundError) as e:
        raise _lookup_failure(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
