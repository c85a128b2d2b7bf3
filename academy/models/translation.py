# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Translation string models."""

from pydantic import Field

from academy.models.common import APIModel


class TranslationUpdateRequest(APIModel):
    new_translation: str


class TranslationCreateRequest(APIModel):
    lng: str = Field(min_length=1, max_length=20)
    ns: str = Field(min_length=1, max_length=100)
    key: str = Field(min_length=1, max_length=255)
    value: str = ""


class TranslationResponse(APIModel):
    id: str
    lng: str
    ns: str
    key: str
    value: str


class TranslationMutationResponse(APIModel):
    message: str
    translation: TranslationResponse


class TranslationTransferResponse(APIModel):
    message: str
    transferred: int
