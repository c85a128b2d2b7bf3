# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User request/response models."""

from __future__ import annotations

from datetime import datetime

from pydantic import EmailStr, Field, field_serializer

from academy.infrastructure.database.models import User
from academy.models.class_ import ClassSummary
from academy.models.common import APIModel, Page
from academy.utils.datetime import ensure_utc


class SignUpRequest(APIModel):
    """Public account creation, after the identity provider sign-up."""

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    whatsapp: str | None = Field(default=None, max_length=50)
    identity_id: str = Field(min_length=1, max_length=255)


class UserUpdateRequest(APIModel):
    """Profile fields a user (or staff) may change.

    Role, identity link and enrollment are not editable through this model.
    """

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    whatsapp: str | None = Field(default=None, max_length=50)
    gender: str | None = Field(default=None, max_length=50)
    age: int | None = Field(default=None, ge=0, le=150)


class UserListItem(APIModel):
    """User fields exposed in staff listings."""

    id: str
    first_name: str
    last_name: str
    email: str
    privilege: str
    creation_date: datetime

    @field_serializer("creation_date")
    def serialize_creation_date(self, value: datetime) -> str:
        return ensure_utc(value).isoformat()


class UserResponse(UserListItem):
    """Full user profile."""

    identity_id: str
    whatsapp: str | None = None
    gender: str | None = None
    age: int | None = None
    enrolled_classes: list[str] = Field(default_factory=list)

    @classmethod
    def from_model(cls, user: User, enrolled_classes: list[str] | None = None) -> UserResponse:
        return cls(
            id=user.id,
            identity_id=user.identity_id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            whatsapp=user.whatsapp,
            gender=user.gender,
            age=user.age,
            privilege=user.privilege,
            creation_date=user.creation_date,
            enrolled_classes=enrolled_classes or [],
        )


class EnrollmentRequest(APIModel):
    """Body of enroll/unenroll calls."""

    class_id: str


class StudentWithClasses(UserListItem):
    """A student joined with summaries of the classes they are enrolled in."""

    enrolled_classes: list[ClassSummary] = Field(default_factory=list)


StudentPage = Page[StudentWithClasses]
UserPage = Page[UserListItem]
