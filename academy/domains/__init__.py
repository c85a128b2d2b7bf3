# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer.

Each domain module provides a service class that takes an AsyncSession
(plus any external clients it needs) and raises its own exception
hierarchy; routers translate those exceptions into HTTP responses.

Domains:
- membership: Enroll, unenroll and cascading deletes
- roster: Paginated student listing joined with class summaries
- access: Identity to role resolution and authorization decisions
- class_: Class catalog with duplicate-schedule detection
- user: Accounts and profiles
- level: Level catalog with translation resync
- translation: Translation namespaces
- volunteer: Volunteer applications
- donation: Donation checkout
- contact: Contact form email
"""
