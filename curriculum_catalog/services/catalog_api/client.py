# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum backend API client.

This module provides an async HTTP client for the university curriculum
backend. It returns raw JSON records; turning them into canonical
entities is the job of the catalog domain.

The client handles:
- Paginated curriculum listing and name search
- School registry retrieval
- Per-school department retrieval

Example:
    async with CatalogClient(settings.catalog_api) as client:
        page = await client.get_curriculum_page(page=0, size=100)
        print(page.total_pages, len(page.records))
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from curriculum_catalog.core.config.settings import CatalogAPISettings
from curriculum_catalog.services.catalog_api.exceptions import (
    CatalogAPIError,
    CatalogResponseError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurriculumPage:
    """One page of raw curriculum records.

    Attributes:
        records: Raw curriculum records as returned by the backend.
        total_pages: Page count reported by the envelope (at least 1).
        total_elements: Element count reported by the envelope, if any.
    """

    records: list[Any] = field(default_factory=list)
    total_pages: int = 1
    total_elements: int | None = None


def _as_int(value: Any, default: int | None) -> int | None:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return default


def parse_curriculum_page(payload: Any, endpoint: str | None = None) -> CurriculumPage:
    """Parse a curriculum listing envelope.

    Accepted shapes, in order:
    - {"data": {"curriculums": [...], "totalPages": n, "totalElements": m}}
    - {"data": {"content": [...], ...}} (Spring page)
    - {"data": [...]}
    - [...]
    - {"curriculums": [...]}

    Args:
        payload: Decoded JSON body.
        endpoint: Request path, used for error reporting.

    Returns:
        Parsed CurriculumPage.

    Raises:
        CatalogResponseError: If the body matches none of the shapes.
    """
    if isinstance(payload, list):
        return CurriculumPage(records=payload, total_elements=len(payload))

    if not isinstance(payload, dict):
        raise CatalogResponseError(
            "Unexpected curriculum response body",
            endpoint=endpoint,
            details={"type": type(payload).__name__},
        )

    data = payload.get("data")
    if isinstance(data, dict):
        records = data.get("curriculums")
        if records is None:
            records = data.get("content")
        if not isinstance(records, list):
            raise CatalogResponseError(
                "Curriculum envelope has no record list",
                endpoint=endpoint,
                details={"keys": sorted(data.keys())},
            )
        total_pages = _as_int(data.get("totalPages"), 1) or 1
        return CurriculumPage(
            records=records,
            total_pages=max(total_pages, 1),
            total_elements=_as_int(data.get("totalElements"), None),
        )

    if isinstance(data, list):
        return CurriculumPage(records=data, total_elements=len(data))

    if isinstance(payload.get("curriculums"), list):
        records = payload["curriculums"]
        return CurriculumPage(records=records, total_elements=len(records))

    raise CatalogResponseError(
        "Curriculum envelope has no record list",
        endpoint=endpoint,
        details={"keys": sorted(payload.keys())},
    )


def _unwrap_list(payload: Any, endpoint: str) -> list[Any]:
    """Return the record list of a plain listing endpoint."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, list):
            return data
        if isinstance(data, dict) and isinstance(data.get("content"), list):
            return data["content"]
    raise CatalogResponseError(
        "Unexpected listing response body",
        endpoint=endpoint,
        details={"type": type(payload).__name__},
    )


class CatalogClient:
    """Async HTTP client for the curriculum backend.

    Attributes:
        settings: Backend API configuration.
    """

    def __init__(
        self,
        settings: CatalogAPISettings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the catalog client.

        Args:
            settings: Backend API configuration.
            http_client: Optional pre-built client (its base URL and
                headers are used as-is).
        """
        self.settings = settings
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=settings.base_url,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                **settings.auth_headers,
            },
            timeout=settings.timeout,
        )

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and decode its JSON body.

        Raises:
            CatalogAPIError: On transport failure or non-2xx status.
            CatalogResponseError: If the body is not JSON.
        """
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.error("Catalog backend connection error on %s %s: %s", method, path, e)
            raise CatalogAPIError(
                message=f"Failed to connect to catalog backend: {e}",
                details={"error_type": type(e).__name__, "path": path},
            ) from e

        if not response.is_success:
            logger.warning(
                "Catalog backend returned %d for %s %s",
                response.status_code,
                method,
                path,
            )
            raise CatalogAPIError(
                message=f"{method} {path} failed",
                status_code=response.status_code,
                response_body=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise CatalogResponseError(
                "Response body is not valid JSON",
                endpoint=path,
            ) from e

    async def get_curriculum_page(self, page: int, size: int) -> CurriculumPage:
        """Fetch one page of the curriculum collection.

        Args:
            page: Zero-based page index.
            size: Page size.

        Returns:
            Parsed page of raw curriculum records.
        """
        path = self.settings.curriculums_path
        logger.debug("Fetching curriculum page %d (size %d)", page, size)
        payload = await self._request("GET", path, params={"page": page, "size": size})
        return parse_curriculum_page(payload, endpoint=path)

    async def search_curriculums(
        self,
        name: str,
        is_active: bool = True,
        page: int = 0,
        size: int = 20,
    ) -> CurriculumPage:
        """Search curricula by name on the backend.

        Args:
            name: Name fragment to search for.
            is_active: Restrict to active curricula.
            page: Zero-based page index.
            size: Page size.

        Returns:
            Parsed page of raw curriculum records.
        """
        path = self.settings.search_path
        logger.debug("Searching curricula: name=%r, is_active=%s", name, is_active)
        payload = await self._request(
            "POST",
            path,
            params={"page": page, "size": size},
            json={"name": name, "isActive": is_active},
        )
        return parse_curriculum_page(payload, endpoint=path)

    async def get_schools(self) -> list[Any]:
        """Fetch the school registry.

        Returns:
            Raw school records ({id, name, code, deanId}).
        """
        path = self.settings.schools_path
        payload = await self._request("GET", path)
        return _unwrap_list(payload, path)

    async def get_departments(
        self,
        school_id: str,
        page: int = 0,
        size: int = 100,
    ) -> list[Any]:
        """Fetch the departments of one school.

        Args:
            school_id: Registry school id.
            page: Zero-based page index.
            size: Page size.

        Returns:
            Raw department records ({id, name, schoolId}).
        """
        path = self.settings.departments_path
        payload = await self._request(
            "GET",
            path,
            params={"schoolId": school_id, "page": page, "size": size},
        )
        return _unwrap_list(payload, path)
