# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared request/response model building blocks."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class APIModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(APIModel):
    """Plain acknowledgement."""

    message: str


class Page(APIModel, Generic[T]):
    """One page of a listing plus the total count under the same filters."""

    items: list[T]
    total: int
    page: int
    limit: int
