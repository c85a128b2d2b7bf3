# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Volunteer application API endpoints.

- POST /volunteer/apply - Submit an application (public, rate limited)
- GET /volunteer/all - List applications (privileged)
- PATCH /volunteer/{volunteer_id}/status - Review an application (privileged)

Responses carry a ``success`` flag; validation failures are 422 with a
``fieldErrors`` map keyed by form field.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Query, Request, status
from fastapi.responses import JSONResponse

from academy.api.dependencies import DB, Email, PrivilegedUser
from academy.api.middleware.rate_limit import BURST_LIMIT, limiter
from academy.domains.volunteer import (
    InvalidVolunteerIdError,
    VolunteerNotFoundError,
    VolunteerService,
    VolunteerValidationError,
)
from academy.models.volunteer import (
    SuccessResponse,
    VolunteerApplicationForm,
    VolunteerPage,
    VolunteerStatusResponse,
    VolunteerStatusUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _failure(
    status_code: int,
    message: str,
    field_errors: dict[str, str] | None = None,
) -> JSONResponse:
    content: dict[str, object] = {"success": False, "message": message}
    if field_errors is not None:
        content["fieldErrors"] = field_errors
    return JSONResponse(status_code=status_code, content=content)


@router.post(
    "/volunteer/apply",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Apply to volunteer",
    description="Store an application and email staff and the applicant in the background.",
)
@limiter.limit(BURST_LIMIT)
async def apply(
    request: Request,
    data: VolunteerApplicationForm,
    background_tasks: BackgroundTasks,
    db: DB,
    email: Email,
) -> SuccessResponse | JSONResponse:
    """Submit a volunteer application."""
    service = VolunteerService(db, email)

    try:
        volunteer = await service.apply(data)
    except VolunteerValidationError as e:
        return _failure(status.HTTP_422_UNPROCESSABLE_ENTITY, str(e), e.field_errors)

    if volunteer is not None:
        background_tasks.add_task(service.notify_submission, volunteer)
    return SuccessResponse()


@router.get(
    "/volunteer/all",
    response_model=VolunteerPage,
    summary="List applications",
    description="Applications newest first, optionally by status or name/email/subjects search.",
)
async def list_volunteers(
    db: DB,
    principal: PrivilegedUser,
    page: Annotated[str | None, Query(description="Page number, from 1")] = None,
    limit: Annotated[str | None, Query(description="Page size, 1 to 200, default 50")] = None,
    status_filter: Annotated[str | None, Query(alias="status", description="Review status")] = None,
    q: Annotated[str | None, Query(description="Search text")] = None,
) -> VolunteerPage:
    """List volunteer applications."""
    return await VolunteerService(db).list_volunteers(
        page=page, limit=limit, status=status_filter, q=q
    )


@router.patch(
    "/volunteer/{volunteer_id}/status",
    response_model=VolunteerStatusResponse,
    summary="Review application",
    description="Set an application's status to pending, approved or rejected.",
)
async def update_volunteer_status(
    volunteer_id: str,
    data: VolunteerStatusUpdate,
    db: DB,
    principal: PrivilegedUser,
) -> VolunteerStatusResponse | JSONResponse:
    """Set an application's review status."""
    try:
        new_status = await VolunteerService(db).update_status(volunteer_id, data.status)
    except InvalidVolunteerIdError as e:
        return _failure(status.HTTP_400_BAD_REQUEST, str(e))
    except VolunteerValidationError as e:
        return _failure(status.HTTP_422_UNPROCESSABLE_ENTITY, str(e), e.field_errors)
    except VolunteerNotFoundError as e:
        return _failure(status.HTTP_404_NOT_FOUND, str(e))

    logger.info("Volunteer %s set to %s by %s", volunteer_id, new_status, principal.user_id)
    return VolunteerStatusResponse(status=new_status)
