# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Bulk retrieval of the curriculum collection.

The backend only serves the collection page by page. Page 0 tells us how
many pages exist; the remaining pages are requested concurrently and
reassembled by page index.

A failed page is logged and contributes nothing. A failed page 0 yields an
empty result. Neither raises: consumers always get a valid FetchResult.

Example:
    >>> result = await fetch_all_curricula(client, page_size=100)
    >>> print(result.total, result.failed_pages)
"""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from curriculum_catalog.domains.catalog.models import Curriculum
from curriculum_catalog.domains.catalog.normalizer import normalize_curriculum
from curriculum_catalog.services.catalog_api.client import CatalogClient
from curriculum_catalog.services.catalog_api.exceptions import CatalogError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """Result of a bulk curriculum fetch.

    Attributes:
        curricula: Canonical curricula grouped by page, pages ascending.
        total_pages: Page count reported by page 0.
        reported_total: Element count reported by page 0, if any.
        failed_pages: Indexes of pages that could not be fetched.
    """

    curricula: tuple[Curriculum, ...] = ()
    total_pages: int = 0
    reported_total: int | None = None
    failed_pages: tuple[int, ...] = ()

    @property
    def total(self) -> int:
        """Number of curricula actually retrieved."""
        return len(self.curricula)

    @property
    def complete(self) -> bool:
        """True when every page was retrieved."""
        return not self.failed_pages


def normalize_records(records: Sequence[Any]) -> list[Curriculum]:
    """Normalize raw records, skipping entries that are not objects."""
    curricula: list[Curriculum] = []
    for record in records:
        if not isinstance(record, Mapping):
            logger.warning("Skipping non-object curriculum record: %r", record)
            continue
        curricula.append(normalize_curriculum(record))
    return curricula


async def _fetch_page(client: CatalogClient, page: int, page_size: int) -> list[Any] | None:
    """Fetch one page; None marks a failed page."""
    try:
        result = await client.get_curriculum_page(page=page, size=page_size)
    except CatalogError as e:
        logger.warning("Curriculum page %d unavailable, skipping: %s", page, e)
        return None
    return result.records


async def fetch_all_curricula(client: CatalogClient, page_size: int = 100) -> FetchResult:
    """Fetch the whole curriculum collection.

    Args:
        client: Catalog backend client.
        page_size: Page size used for every request.

    Returns:
        FetchResult with the curricula of every page that could be fetched.
    """
    try:
        first = await client.get_curriculum_page(page=0, size=page_size)
    except CatalogError as e:
        logger.error("Curriculum bulk fetch failed on page 0: %s", e)
        return FetchResult(failed_pages=(0,))

    pages: list[list[Any] | None] = [first.records]
    if first.total_pages > 1:
        remaining = await asyncio.gather(
            *(_fetch_page(client, page, page_size) for page in range(1, first.total_pages))
        )
        pages.extend(remaining)

    failed_pages = tuple(index for index, records in enumerate(pages) if records is None)
    curricula: list[Curriculum] = []
    for records in pages:
        if records:
            curricula.extend(normalize_records(records))

    logger.info(
        "Fetched %d curricula across %d pages (%d failed)",
        len(curricula),
        first.total_pages,
        len(failed_pages),
    )

    return FetchResult(
        curricula=tuple(curricula),
        total_pages=first.total_pages,
        reported_total=first.total_elements,
        failed_pages=failed_pages,
    )


async def search_by_name(
    client: CatalogClient,
    term: str,
    page_size: int = 20,
    is_active: bool = True,
) -> tuple[Curriculum, ...]:
    """Run a backend name search.

    Args:
        client: Catalog backend client.
        term: Name fragment.
        page_size: Number of results to request.
        is_active: Restrict to active curricula.

    Returns:
        Canonical curricula; empty when the backend is unavailable.
    """
    try:
        page = await client.search_curriculums(term, is_active=is_active, page=0, size=page_size)
    except CatalogError as e:
        logger.warning("Curriculum search for %r failed: %s", term, e)
        return ()
    return tuple(normalize_records(page.records))
