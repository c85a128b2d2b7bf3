# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Infrastructure layer.

Adapters for everything outside the process:
- database: Entity store models, connection and relationship set primitives
- identity: Session token verification and the identity provider API
- translations: Remote translation-string service
- notifications: Outgoing email
- payments: Hosted donation checkout
"""
