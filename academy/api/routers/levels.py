# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Level catalog API endpoints.

- GET /levels - List levels, optionally one level number
- POST /levels - Create a level (privileged)
- PUT /levels/{level_id} - Update a level (privileged)
- DELETE /levels/{level_id} - Delete a level (privileged)

Creating or updating a level pushes its name, description and skills to
the translation service as base strings.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from academy.api.dependencies import DB, PrivilegedUser, Translations
from academy.core.class_level import MAX_LEVEL_NUMBER
from academy.core.config import get_settings
from academy.domains.level import (
    DuplicateLevelError,
    InvalidLevelIdError,
    LevelNotFoundError,
    LevelService,
    TranslationSyncError,
    TranslationSyncUnavailableError,
)
from academy.infrastructure.translations import TranslationServiceClient
from academy.models.level import (
    LevelCreateRequest,
    LevelMutationResponse,
    LevelResponse,
    LevelUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service(db: AsyncSession, translations: TranslationServiceClient) -> LevelService:
    """Get level service instance.

    Args:
        db: Database session.
        translations: Translation service client.

    Returns:
        Configured LevelService instance.
    """
    return LevelService(
        db=db,
        translations=translations,
        namespace=get_settings().translations.namespace,
    )


def _duplicate_response(e: DuplicateLevelError) -> JSONResponse:
    body = LevelMutationResponse(message=str(e), level=e.existing)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=body.model_dump(by_alias=True, mode="json"),
    )


def _sync_failure(e: TranslationSyncUnavailableError | TranslationSyncError) -> HTTPException:
    if isinstance(e, TranslationSyncUnavailableError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.get(
    "/levels",
    response_model=list[LevelResponse],
    summary="List levels",
)
async def list_levels(
    db: DB,
    translations: Translations,
    level: Annotated[
        int | None, Query(ge=1, le=MAX_LEVEL_NUMBER, description="Level number")
    ] = None,
) -> list[LevelResponse]:
    """List levels sorted by number."""
    return await _get_service(db, translations).list_levels(level)


@router.post(
    "/levels",
    response_model=LevelMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create level",
    responses={409: {"model": LevelMutationResponse}},
)
async def create_level(
    data: LevelCreateRequest,
    db: DB,
    translations: Translations,
    principal: PrivilegedUser,
) -> LevelMutationResponse | JSONResponse:
    """Create a level."""
    logger.info("Creating level %d by %s", data.level, principal.user_id)
    service = _get_service(db, translations)

    try:
        created = await service.create_level(data)
    except DuplicateLevelError as e:
        return _duplicate_response(e)
    except (TranslationSyncUnavailableError, TranslationSyncError) as e:
        raise _sync_failure(e)
    return LevelMutationResponse(message="Level created successfully", level=created)


@router.put(
    "/levels/{level_id}",
    response_model=LevelResponse,
    summary="Update level",
    responses={409: {"model": LevelMutationResponse}},
)
async def update_level(
    level_id: str,
    data: LevelUpdateRequest,
    db: DB,
    translations: Translations,
    principal: PrivilegedUser,
) -> LevelResponse | JSONResponse:
    """Update a level."""
    service = _get_service(db, translations)

    try:
        return await service.update_level(level_id, data)
    except InvalidLevelIdError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except LevelNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DuplicateLevelError as e:
        return _duplicate_response(e)
    except (TranslationSyncUnavailableError, TranslationSyncError) as e:
        raise _sync_failure(e)


@router.delete(
    "/levels/{level_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete level",
)
async def delete_level(
    level_id: str,
    db: DB,
    translations: Translations,
    principal: PrivilegedUser,
) -> Response:
    """Delete a level."""
    service = _get_service(db, translations)

    try:
        await service.delete_level(level_id)
    except InvalidLevelIdError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except LevelNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
