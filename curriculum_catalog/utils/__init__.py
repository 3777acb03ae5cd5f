# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for the curriculum catalog engine.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Tolerant timestamp parsing and ISO date formatting
"""

from curriculum_catalog.utils.datetime import (
    EPOCH_DATE,
    date_sort_key,
    ensure_utc,
    format_iso_date,
    parse_iso,
    utc_now,
)
from curriculum_catalog.utils.logging import get_logger, setup_logging

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    # Datetime
    "EPOCH_DATE",
    "utc_now",
    "ensure_utc",
    "parse_iso",
    "format_iso_date",
    "date_sort_key",
]
