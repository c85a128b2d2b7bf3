# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Translation string API endpoints.

- GET /locales/{lng}/{ns} - One namespace as a flat key/value map
- PUT /locales/{lng}/{ns}/{key} - Set one string (privileged)
- POST /locales/create - Create one string (privileged)
- POST /locales/transfer - Import every string from the translation service (privileged)
"""

import logging

from fastapi import APIRouter, HTTPException, status

from academy.api.dependencies import DB, PrivilegedUser, Translations
from academy.domains.translation import (
    TranslationExistsError,
    TranslationImportUnavailableError,
    TranslationService,
)
from academy.infrastructure.translations import TranslationServiceError
from academy.models.translation import (
    TranslationCreateRequest,
    TranslationMutationResponse,
    TranslationTransferResponse,
    TranslationUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/locales/create",
    response_model=TranslationMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create translation",
)
async def create_translation(
    data: TranslationCreateRequest,
    db: DB,
    principal: PrivilegedUser,
) -> TranslationMutationResponse:
    """Create one string."""
    try:
        created = await TranslationService(db).create(data)
    except TranslationExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return TranslationMutationResponse(message="Translation created successfully", translation=created)


@router.post(
    "/locales/transfer",
    response_model=TranslationTransferResponse,
    summary="Import translations",
    description=(
        "Store every string exported by the translation service locally, "
        "then delete the imported base strings remotely."
    ),
)
async def transfer_translations(
    db: DB,
    remote: Translations,
    principal: PrivilegedUser,
) -> TranslationTransferResponse:
    """Import all remote strings."""
    logger.info("Translation import started by %s", principal.user_id)

    try:
        count = await TranslationService(db, remote).transfer()
    except TranslationImportUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except TranslationServiceError as e:
        logger.error("Translation import failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Translation service request failed: {e}",
        )
    return TranslationTransferResponse(message="Successfully inserted translations", transferred=count)


@router.get(
    "/locales/{lng}/{ns}",
    response_model=dict[str, str],
    summary="Get namespace",
    description="All strings of one namespace in one language, as a key/value map.",
)
async def get_namespace(lng: str, ns: str, db: DB) -> dict[str, str]:
    """One namespace of one language."""
    return await TranslationService(db).get_namespace(lng, ns)


@router.put(
    "/locales/{lng}/{ns}/{key}",
    response_model=TranslationMutationResponse,
    summary="Update translation",
    description="Set one string, creating it if it does not exist.",
)
async def update_translation(
    lng: str,
    ns: str,
    key: str,
    data: TranslationUpdateRequest,
    db: DB,
    principal: PrivilegedUser,
) -> TranslationMutationResponse:
    """Set one string."""
    translation = await TranslationService(db).upsert(lng, ns, key, data.new_translation)
    return TranslationMutationResponse(message="Successfully updated translation", translation=translation)
