# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across the unit tests:
- Settings isolated from the process environment
- Raw backend records as served by the curriculum backend
- A factory for canonical curricula
- A catalog client mock
"""

from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from curriculum_catalog.core.config import CatalogSettings, clear_settings_cache
from curriculum_catalog.domains.catalog.models import Curriculum
from curriculum_catalog.services.catalog_api import CatalogClient


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires a backend)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _isolated_settings() -> Generator[None, None, None]:
    """Drop the cached settings around every test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def catalog_settings() -> CatalogSettings:
    """Engine settings with small page sizes."""
    return CatalogSettings(
        page_size=100,
        department_page_size=100,
        program_page_size=2,
        view_page_size=3,
        search_page_size=20,
        search_min_length=2,
        fuzzy_match_threshold=0.5,
    )


# =============================================================================
# Raw Record Fixtures
# =============================================================================


@pytest.fixture
def raw_curriculum() -> dict[str, Any]:
    """A complete curriculum record as returned by the listing endpoint."""
    return {
        "id": 42,
        "name": "BSc Computer Science",
        "code": "BCS",
        "status": "APPROVED",
        "departmentName": "Computer Science",
        "departmentId": 7,
        "schoolId": 3,
        "schoolName": "School of Computing and Informatics",
        "academicLevelName": "Bachelor of Science",
        "createdAt": "2024-03-15T10:30:00Z",
        "updatedAt": "2024-04-01T08:00:00Z",
        "effectiveDate": "2024-09-01",
        "durationSemesters": 8,
        "isActive": True,
        "createdBy": "registrar",
        "curriculumDescription": "Four-year undergraduate programme.",
    }


@pytest.fixture
def raw_draft_proposal() -> dict[str, Any]:
    """A draft proposal record using the proposal field names."""
    return {
        "id": "p-1",
        "proposedCurriculumName": "MSc Data Science",
        "proposedCurriculumCode": "MDS",
        "status": "IN_PROGRESS",
        "departmentName": "Statistics",
        "schoolId": "99",
        "schoolName": "Computing",
        "academicLevelName": "Master of Science",
        "createdAt": 1718000000000,
        "active": False,
    }


@pytest.fixture
def raw_schools() -> list[dict[str, Any]]:
    """School registry records."""
    return [
        {"id": 1, "name": "School of Engineering", "code": "ENG", "deanId": 11},
        {"id": "S1", "name": "Computing"},
    ]


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def make_curriculum() -> Callable[..., Curriculum]:
    """Factory for canonical curricula with sensible defaults."""
    counter = iter(range(1, 10_000))

    def _make(**overrides: Any) -> Curriculum:
        data: dict[str, Any] = {
            "id": str(next(counter)),
            "title": "Curriculum",
            "status": "approved",
            "department": "Computer Science",
            "school_id": "99",
            "school_name": "Computing",
            "program_id": "bachelor",
        }
        data.update(overrides)
        return Curriculum(**data)

    return _make


# =============================================================================
# Client Fixtures
# =============================================================================


@pytest.fixture
def mock_client() -> MagicMock:
    """Catalog client with every backend call mocked."""
    client = MagicMock(spec=CatalogClient)
    client.get_curriculum_page = AsyncMock()
    client.search_curriculums = AsyncMock()
    client.get_schools = AsyncMock(return_value=[])
    client.get_departments = AsyncMock(return_value=[])
    client.close = AsyncMock()
    return client
