# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the bulk curriculum fetcher."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from curriculum_catalog.domains.catalog.bulk_fetcher import (
    fetch_all_curricula,
    normalize_records,
    search_by_name,
)
from curriculum_catalog.services.catalog_api import (
    CatalogAPIError,
    CatalogResponseError,
    CurriculumPage,
)


def page_records(page: int, count: int) -> list[dict[str, Any]]:
    """Raw records whose ids encode their page."""
    return [{"id": f"{page}-{i}", "name": f"Curriculum {page}.{i}"} for i in range(count)]


def paged_backend(
    sizes: list[int],
    failing: set[int] | None = None,
    status_code: int = 500,
    malformed: set[int] | None = None,
) -> AsyncMock:
    """get_curriculum_page mock serving len(sizes) pages."""
    failing = failing or set()
    malformed = malformed or set()

    async def get_page(page: int, size: int) -> CurriculumPage:
        if page in failing:
            raise CatalogAPIError("page failed", status_code=status_code)
        if page in malformed:
            raise CatalogResponseError("Unrecognized curriculum envelope", endpoint="/curriculums")
        return CurriculumPage(
            records=page_records(page, sizes[page]),
            total_pages=len(sizes),
            total_elements=sum(sizes),
        )

    return AsyncMock(side_effect=get_page)


class TestFetchAllCurricula:
    """Tests for fetch_all_curricula."""

    @pytest.mark.asyncio
    async def test_single_page(self, mock_client: MagicMock) -> None:
        """Test that a single page needs a single request."""
        mock_client.get_curriculum_page = paged_backend([3])

        result = await fetch_all_curricula(mock_client, page_size=100)

        assert result.total == 3
        assert result.total_pages == 1
        assert result.complete is True
        mock_client.get_curriculum_page.assert_awaited_once_with(page=0, size=100)

    @pytest.mark.asyncio
    async def test_covers_every_page_in_order(self, mock_client: MagicMock) -> None:
        """Test total coverage with records grouped by ascending page."""
        mock_client.get_curriculum_page = paged_backend([100, 100, 37])

        result = await fetch_all_curricula(mock_client, page_size=100)

        assert result.total == 237
        assert result.reported_total == 237
        assert [c.id for c in result.curricula[:1]] == ["0-0"]
        assert result.curricula[100].id == "1-0"
        assert result.curricula[-1].id == "2-36"
        requested = sorted(call.kwargs["page"] for call in mock_client.get_curriculum_page.await_args_list)
        assert requested == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_page_two_of_five_fails(self, mock_client: MagicMock) -> None:
        """Test partial-failure tolerance when page 2 of 5 fails."""
        mock_client.get_curriculum_page = paged_backend([10, 10, 10, 10, 4], failing={2})

        result = await fetch_all_curricula(mock_client, page_size=10)

        assert result.total == 34
        assert result.failed_pages == (2,)
        assert result.complete is False
        assert not any(c.id.startswith("2-") for c in result.curricula)
        pages = [c.id.split("-")[0] for c in result.curricula]
        assert pages == sorted(pages)

    @pytest.mark.asyncio
    async def test_three_pages_page_one_rejected(self, mock_client: MagicMock) -> None:
        """Test that a rejected page 1 leaves page 0 and page 2 items."""
        mock_client.get_curriculum_page = paged_backend([100, 100, 55], failing={1})

        result = await fetch_all_curricula(mock_client, page_size=100)

        assert result.total == 100 + 55
        assert result.failed_pages == (1,)

    @pytest.mark.asyncio
    async def test_malformed_page_is_a_failed_page(self, mock_client: MagicMock) -> None:
        """Test that an unreadable envelope on page 1 does not drop pages 0 and 2."""
        mock_client.get_curriculum_page = paged_backend([100, 100, 55], malformed={1})

        result = await fetch_all_curricula(mock_client, page_size=100)

        assert result.total == 100 + 55
        assert result.failed_pages == (1,)
        assert result.curricula[100].id == "2-0"

    @pytest.mark.asyncio
    async def test_malformed_first_page_yields_empty_result(self, mock_client: MagicMock) -> None:
        """Test that an unreadable first page is reported like a failed one."""
        mock_client.get_curriculum_page = paged_backend([10, 10], malformed={0})

        result = await fetch_all_curricula(mock_client, page_size=10)

        assert result.total == 0
        assert result.failed_pages == (0,)

    @pytest.mark.asyncio
    async def test_page_zero_failure_yields_empty_result(self, mock_client: MagicMock) -> None:
        """Test that a failed first page returns an empty result."""
        mock_client.get_curriculum_page = paged_backend([10, 10], failing={0})

        result = await fetch_all_curricula(mock_client, page_size=10)

        assert result.total == 0
        assert result.failed_pages == (0,)
        mock_client.get_curriculum_page.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_skips_non_object_records(self, mock_client: MagicMock) -> None:
        """Test that non-object records are skipped."""
        mock_client.get_curriculum_page = AsyncMock(
            return_value=CurriculumPage(records=[{"id": 1}, "oops", None, {"id": 2}])
        )

        result = await fetch_all_curricula(mock_client)

        assert [c.id for c in result.curricula] == ["1", "2"]


class TestNormalizeRecords:
    """Tests for normalize_records."""

    def test_normalizes_mappings_only(self) -> None:
        """Test that only mapping records are normalized."""
        curricula = normalize_records([{"id": 1, "status": "APPROVED"}, 3])

        assert len(curricula) == 1
        assert curricula[0].status.value == "approved"


class TestSearchByName:
    """Tests for backend name search."""

    @pytest.mark.asyncio
    async def test_returns_normalized_results(self, mock_client: MagicMock) -> None:
        """Test that search results are normalized."""
        mock_client.search_curriculums.return_value = CurriculumPage(
            records=[{"id": 9, "name": "Applied Physics", "status": "ACTIVE"}]
        )

        results = await search_by_name(mock_client, "Physics", page_size=5)

        assert [c.title for c in results] == ["Applied Physics"]
        mock_client.search_curriculums.assert_awaited_once_with(
            "Physics", is_active=True, page=0, size=5
        )

    @pytest.mark.asyncio
    async def test_backend_failure_yields_empty(self, mock_client: MagicMock) -> None:
        """Test that a failed search returns no results instead of raising."""
        mock_client.search_curriculums.side_effect = CatalogAPIError("down", status_code=503)

        results = await search_by_name(mock_client, "Physics")

        assert results == ()

    @pytest.mark.asyncio
    async def test_unreadable_response_yields_empty(self, mock_client: MagicMock) -> None:
        """Test that an unrecognized search envelope returns no results."""
        mock_client.search_curriculums.side_effect = CatalogResponseError("bad envelope")

        assert await search_by_name(mock_client, "Physics") == ()
