# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API routes package.

Each module provides a FastAPI router for a specific domain; all of them
are mounted under /api.

Modules:
    users: Sign-up, profiles, enrollment and student listings.
    classes: Class catalog, including conversation and IELTS tracks.
    levels: Level catalog.
    translations: Stored UI strings.
    volunteers: Volunteer applications.
    donations: Donation checkout.
    contact: Contact form.
"""

from fastapi import APIRouter

from academy.api.routers import (
    classes,
    contact,
    donations,
    levels,
    translations,
    users,
    volunteers,
)

# Create the main API router
router = APIRouter(prefix="/api")

# Include domain routers
router.include_router(users.router, tags=["Users"])
router.include_router(classes.router, tags=["Classes"])
router.include_router(levels.router, tags=["Levels"])
router.include_router(translations.router, tags=["Translations"])
router.include_router(volunteers.router, tags=["Volunteers"])
router.include_router(donations.router, tags=["Donations"])
router.include_router(contact.router, tags=["Contact"])

__all__ = ["router"]
