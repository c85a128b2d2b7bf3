# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic request/response models, camelCase on the wire."""

from academy.models.common import APIModel, MessageResponse, Page

__all__ = [
    "APIModel",
    "MessageResponse",
    "Page",
]
