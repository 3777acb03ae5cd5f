# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Catalog domain: curriculum aggregation and reconciliation.

This domain provides:
- Normalization of raw backend records into canonical curricula
- Concurrent bulk retrieval of the paginated curriculum collection
- Reconciliation of the school registry with curriculum-embedded schools
- Department extraction and the lazy per-school department cache
- The school → program → department hierarchy
- Filter, sort and pagination of curriculum lists
- CatalogStore, the aggregate state observed by the UI

Usage:
    from curriculum_catalog.domains.catalog import CatalogStore

    store = CatalogStore(client, settings.catalog)
    await store.refresh()
    hierarchy = store.get_hierarchy()
"""

from curriculum_catalog.domains.catalog.models import (
    ALL,
    Curriculum,
    CurriculumStatus,
    Department,
    DepartmentGroup,
    DepartmentSource,
    ProgramBucket,
    ProgramLevel,
    QueryCriteria,
    QueryResult,
    School,
    SchoolNode,
    SortOrder,
    StatusOverview,
    StatusStats,
)
from curriculum_catalog.domains.catalog.normalizer import normalize_curriculum
from curriculum_catalog.domains.catalog.bulk_fetcher import (
    FetchResult,
    fetch_all_curricula,
    search_by_name,
)
from curriculum_catalog.domains.catalog.reconciler import (
    MATCH_STRATEGIES,
    Reconciliation,
    reconcile_schools,
)
from curriculum_catalog.domains.catalog.departments import (
    DepartmentCache,
    Errored,
    Loaded,
    Loading,
    NotRequested,
    extract_departments,
)
from curriculum_catalog.domains.catalog.hierarchy import (
    build_hierarchy,
    compute_status_stats,
    summarize_statuses,
)
from curriculum_catalog.domains.catalog.query import run_query
from curriculum_catalog.domains.catalog.store import CatalogSnapshot, CatalogStore

__all__ = [
    # Enums
    "CurriculumStatus",
    "ProgramLevel",
    "SortOrder",
    "DepartmentSource",
    "ALL",
    # Models
    "Curriculum",
    "School",
    "Department",
    "DepartmentGroup",
    "ProgramBucket",
    "SchoolNode",
    "StatusStats",
    "StatusOverview",
    "QueryCriteria",
    "QueryResult",
    # Pipeline
    "normalize_curriculum",
    "FetchResult",
    "fetch_all_curricula",
    "search_by_name",
    "MATCH_STRATEGIES",
    "Reconciliation",
    "reconcile_schools",
    "extract_departments",
    "build_hierarchy",
    "compute_status_stats",
    "summarize_statuses",
    "run_query",
    # Department cache states
    "DepartmentCache",
    "NotRequested",
    "Loading",
    "Loaded",
    "Errored",
    # Store
    "CatalogSnapshot",
    "CatalogStore",
]
