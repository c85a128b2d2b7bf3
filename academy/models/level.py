# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Level catalog request/response models."""

from pydantic import Field

from academy.core.class_level import MAX_LEVEL_NUMBER
from academy.models.common import APIModel


class LevelCreateRequest(APIModel):
    level: int = Field(ge=1, le=MAX_LEVEL_NUMBER)
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    image: str | None = None
    skills: list[str] = Field(default_factory=list)


class LevelUpdateRequest(APIModel):
    level: int | None = Field(default=None, ge=1, le=MAX_LEVEL_NUMBER)
    name: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    image: str | None = None
    skills: list[str] | None = None


class LevelResponse(APIModel):
    id: str
    level: int
    name: str
    description: str
    image: str
    skills: list[str]


class LevelMutationResponse(APIModel):
    """Result of a create, or of a rejected duplicate, carrying the level."""

    message: str
    level: LevelResponse
