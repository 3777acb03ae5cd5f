# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum backend API.

This package provides:
- CatalogClient: Async HTTP client for curricula, schools and departments
- CurriculumPage: One parsed page of raw curriculum records
- Catalog exceptions: Transport and response errors

Usage:
    from curriculum_catalog.services.catalog_api import CatalogClient

    async with CatalogClient(settings.catalog_api) as client:
        schools = await client.get_schools()
"""

from curriculum_catalog.services.catalog_api.client import (
    CatalogClient,
    CurriculumPage,
    parse_curriculum_page,
)
from curriculum_catalog.services.catalog_api.exceptions import (
    CatalogAPIError,
    CatalogError,
    CatalogResponseError,
)

__all__ = [
    "CatalogClient",
    "CurriculumPage",
    "parse_curriculum_page",
    "CatalogError",
    "CatalogAPIError",
    "CatalogResponseError",
]
