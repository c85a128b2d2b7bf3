# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Volunteer application models.

The application form is accepted loosely (every field optional, any type)
so that the service can report all problems at once as field errors.
"""

from datetime import date, datetime
from typing import Any

from pydantic import field_serializer

from academy.models.common import APIModel, Page
from academy.utils.datetime import ensure_utc


class VolunteerApplicationForm(APIModel):
    name: Any = None
    email: Any = None
    phone: Any = None
    role_interest: Any = None
    weekly_hours: Any = None
    uyghur_proficiency: Any = None
    start_date: Any = None
    subjects: Any = None
    availability: Any = None
    motivation: Any = None
    notes: Any = None
    website: Any = None


class VolunteerStatusUpdate(APIModel):
    status: Any = None


class VolunteerResponse(APIModel):
    id: str
    name: str
    email: str
    phone: str | None = None
    role_interest: str
    weekly_hours: str
    uyghur_proficiency: str
    start_date: date
    subjects: str
    availability: str
    motivation: str
    notes: str | None = None
    status: str
    created_at: datetime

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return ensure_utc(value).isoformat()


class VolunteerStatusResponse(APIModel):
    success: bool = True
    status: str


class SuccessResponse(APIModel):
    success: bool = True


VolunteerPage = Page[VolunteerResponse]
