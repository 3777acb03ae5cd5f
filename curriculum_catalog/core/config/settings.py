# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the
curriculum catalog engine. Settings are loaded from environment variables
with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from curriculum_catalog.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.catalog.page_size)
    100
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class CatalogAPISettings(BaseSettings):
    """Curriculum backend API configuration.

    The backend exposes the curriculum collection, the school registry and
    per-school department lists. Paths are relative to base_url.

    Attributes:
        base_url: Base URL of the curriculum backend.
        timeout: Request timeout in seconds.
        auth_token: Optional bearer token issued by the session subsystem.
        curriculums_path: Paginated curriculum listing endpoint.
        search_path: Curriculum search endpoint (POST).
        schools_path: School registry endpoint.
        departments_path: Department listing endpoint (filtered by school).
    """

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_API_",
        extra="ignore",
    )

    base_url: str = "http://localhost:8080/api/v1"
    timeout: float = 30.0
    auth_token: SecretStr | None = None
    curriculums_path: str = "/users/curriculums/get-all"
    search_path: str = "/users/curriculums/search"
    schools_path: str = "/schools"
    departments_path: str = "/admin/departments"

    @property
    def auth_headers(self) -> dict[str, str]:
        """Build authentication headers for API requests."""
        if self.auth_token is None or not self.auth_token.get_secret_value():
            return {}
        return {"Authorization": f"Bearer {self.auth_token.get_secret_value()}"}


class CatalogSettings(BaseSettings):
    """Aggregation engine tuning.

    Attributes:
        page_size: Page size used by the bulk curriculum fetch.
        department_page_size: Page size for per-school department loads.
        program_page_size: Page size of the per-program curriculum view.
        view_page_size: Page size of the flat curriculum view.
        search_page_size: Page size for backend name searches.
        search_min_length: Shortest term sent to the backend search.
        fuzzy_match_threshold: Share of the smaller token set that must
            overlap for two school names to be considered the same school.
    """

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_",
        extra="ignore",
    )

    page_size: int = Field(default=100, gt=0)
    department_page_size: int = Field(default=100, gt=0)
    program_page_size: int = Field(default=20, gt=0)
    view_page_size: int = Field(default=20, gt=0)
    search_page_size: int = Field(default=20, gt=0)
    search_min_length: int = Field(default=2, ge=1)
    # TODO: confirm the 50% overlap rule with the catalog product owner
    fuzzy_match_threshold: float = Field(default=0.5, gt=0.0, le=1.0)


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        catalog_api: Curriculum backend API settings.
        catalog: Aggregation engine settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    catalog_api: CatalogAPISettings = Field(default_factory=CatalogAPISettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    """
    get_settings.cache_clear()
