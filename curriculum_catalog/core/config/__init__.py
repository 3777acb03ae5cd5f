# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for the curriculum catalog engine.

Example:
    >>> from curriculum_catalog.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from curriculum_catalog.core.config.settings import (
    CatalogAPISettings,
    CatalogSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "CatalogAPISettings",
    "CatalogSettings",
]
