# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for engine wiring and logging setup."""

import logging
from unittest.mock import patch

import httpx
import pytest

from curriculum_catalog.bootstrap import create_catalog_store
from curriculum_catalog.core.config import CatalogSettings, Settings
from curriculum_catalog.domains.catalog.store import CatalogStore
from curriculum_catalog.utils.logging import get_logger, setup_logging


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_sets_package_level(self) -> None:
        """Test that the package logger follows the configured level."""
        setup_logging(Settings(log_level="DEBUG"))

        assert logging.getLogger("curriculum_catalog").level == logging.DEBUG

    def test_quiets_transport_loggers(self) -> None:
        """Test that httpx request logging is raised to WARNING."""
        setup_logging(Settings(environment="production", debug=False))

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_get_logger_returns_bound_logger(self) -> None:
        """Test that get_logger returns a usable structlog logger."""
        logger = get_logger("curriculum_catalog.test")

        logger.info("Logger works", answer=42)


class TestCreateCatalogStore:
    """Tests for create_catalog_store."""

    @pytest.mark.asyncio
    async def test_wires_store_from_settings(self) -> None:
        """Test that the store receives the engine settings."""
        settings = Settings(catalog=CatalogSettings(page_size=25))

        store = create_catalog_store(settings)
        try:
            assert isinstance(store, CatalogStore)
            assert store.settings.page_size == 25
            assert store.client.settings is settings.catalog_api
        finally:
            await store.client.close()

    @pytest.mark.asyncio
    async def test_uses_cached_settings_by_default(self) -> None:
        """Test that omitted settings fall back to get_settings()."""
        with patch("curriculum_catalog.bootstrap.get_settings", return_value=Settings()) as mock:
            store = create_catalog_store()

        try:
            mock.assert_called_once()
        finally:
            await store.client.close()

    @pytest.mark.asyncio
    async def test_refresh_through_injected_http_client(self) -> None:
        """Test a full refresh over a mocked backend."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/schools"):
                return httpx.Response(200, json={"data": [{"id": "S1", "name": "Computing"}]})
            return httpx.Response(
                200,
                json={
                    "data": {
                        "curriculums": [
                            {"id": 1, "name": "BSc Computing", "schoolId": "99", "schoolName": "Computing"}
                        ],
                        "totalPages": 1,
                    }
                },
            )

        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            base_url="http://catalog.test",
        )
        store = create_catalog_store(Settings(), http_client=http_client)

        await store.refresh()
        await http_client.aclose()

        assert store.total == 1
        assert dict(store.school_mapping) == {"S1": "99"}
