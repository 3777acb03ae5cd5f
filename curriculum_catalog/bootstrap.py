# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Wiring for the catalog engine.

Builds a ready-to-use CatalogStore from settings: logging is configured,
the backend client is created and handed to the store.

Example:
    >>> store = create_catalog_store()
    >>> await store.refresh()
    >>> await store.client.close()
"""

import httpx

from curriculum_catalog.core.config import Settings, get_settings
from curriculum_catalog.domains.catalog.store import CatalogStore
from curriculum_catalog.services.catalog_api import CatalogClient
from curriculum_catalog.utils.logging import get_logger, setup_logging


def create_catalog_store(
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> CatalogStore:
    """Create a CatalogStore bound to the configured backend.

    Args:
        settings: Application settings; the cached settings when omitted.
        http_client: Optional pre-built HTTP client, mainly for tests.

    Returns:
        An empty store; call refresh() to populate it.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    client = CatalogClient(settings.catalog_api, http_client=http_client)
    store = CatalogStore(client, settings.catalog)

    logger = get_logger(__name__)
    logger.info(
        "Catalog engine initialized",
        environment=settings.environment,
        base_url=settings.catalog_api.base_url,
        page_size=settings.catalog.page_size,
    )
    return store
