# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core package for the academy backend.

This package contains configuration and the value types shared by
every layer:
- config: Application configuration and settings
- class_level: The tagged level variant carried by every class
"""
