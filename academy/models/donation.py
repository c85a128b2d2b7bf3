# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Donation checkout models."""

from typing import Any

from academy.models.common import APIModel


class DonationSessionRequest(APIModel):
    """Amount may arrive as a number or a numeric string."""

    amount: Any = None
    provider: str | None = "stripe"


class DonationSessionResponse(APIModel):
    url: str
