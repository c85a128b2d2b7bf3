"""Dillar Academy Backend.

Enrollment, roster and catalog API for a language school: user accounts,
class rosters, levels, translations, volunteer applications and donations.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
