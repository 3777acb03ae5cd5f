# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Aggregate state store for the curriculum catalog.

CatalogStore owns everything the UI observes: the fetched collections,
the derived school mapping, the lazy department cache and the UI filter
state. refresh() is the single update entry point. Derived data is
published as one immutable CatalogSnapshot, swapped in only after every
derivation step succeeded, so a failed refresh never corrupts what was
previously loaded.

Example:
    >>> store = CatalogStore(client, settings.catalog)
    >>> await store.refresh()
    >>> for node in store.get_hierarchy():
    ...     print(node.school.name, node.total)
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any

from curriculum_catalog.core.config import CatalogSettings
from curriculum_catalog.domains.catalog import bulk_fetcher
from curriculum_catalog.domains.catalog.departments import (
    DepartmentCache,
    DepartmentState,
    departments_from_records,
    enrich_program_departments,
    extract_departments,
)
from curriculum_catalog.domains.catalog.hierarchy import (
    build_hierarchy,
    build_school_node,
    summarize_statuses,
)
from curriculum_catalog.domains.catalog.models import (
    Curriculum,
    Department,
    ProgramBucket,
    ProgramLevel,
    QueryCriteria,
    QueryResult,
    School,
    SchoolNode,
    StatusOverview,
)
from curriculum_catalog.domains.catalog.query import filter_curricula, run_query
from curriculum_catalog.domains.catalog.reconciler import (
    curricula_for_school,
    reconcile_schools,
    schools_from_registry,
)
from curriculum_catalog.services.catalog_api.client import CatalogClient
from curriculum_catalog.services.catalog_api.exceptions import CatalogError
from curriculum_catalog.utils.datetime import utc_now

logger = logging.getLogger(__name__)

CURRICULA_ERROR = "Failed to load curricula"
SCHOOLS_ERROR = "Failed to load schools"

# Changing any of these resets the view to its first page
_PAGE_RESET_FIELDS = frozenset(
    {"search_term", "school_id", "program_id", "department", "status", "sort_by", "page_size"}
)


@dataclass(frozen=True)
class CatalogSnapshot:
    """Immutable view of the last successful refresh.

    Attributes:
        curricula: Canonical curricula, page order.
        schools: Registry schools followed by synthesized schools.
        departments: Departments referenced by curricula.
        school_mapping: Registry id → curriculum-side school id.
        failed_pages: Curriculum pages that could not be fetched.
        refreshed_at: When the snapshot was built.
    """

    curricula: tuple[Curriculum, ...] = ()
    schools: tuple[School, ...] = ()
    departments: tuple[Department, ...] = ()
    school_mapping: Mapping[str, str | None] = field(
        default_factory=lambda: MappingProxyType({})
    )
    failed_pages: tuple[int, ...] = ()
    refreshed_at: datetime | None = None

    @property
    def registry(self) -> tuple[School, ...]:
        """Schools that came from the registry endpoint."""
        return tuple(s for s in self.schools if not s.from_curricula)


class CatalogStore:
    """Owned aggregate state of the catalog engine.

    Attributes:
        client: Catalog backend client.
        settings: Engine settings (page sizes, fuzzy threshold).
    """

    def __init__(
        self,
        client: CatalogClient,
        settings: CatalogSettings | None = None,
    ) -> None:
        self.client = client
        self.settings = settings or CatalogSettings()
        self._snapshot = CatalogSnapshot()
        self._departments = DepartmentCache(self._load_departments)
        self._filters = self._default_filters()
        self._is_loading = False
        self._error: str | None = None

    # =========================================================================
    # Read-only state
    # =========================================================================

    @property
    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    @property
    def curricula(self) -> tuple[Curriculum, ...]:
        return self._snapshot.curricula

    @property
    def schools(self) -> tuple[School, ...]:
        return self._snapshot.schools

    @property
    def departments(self) -> tuple[Department, ...]:
        return self._snapshot.departments

    @property
    def school_mapping(self) -> Mapping[str, str | None]:
        return self._snapshot.school_mapping

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def total(self) -> int:
        return len(self._snapshot.curricula)

    # =========================================================================
    # Refresh
    # =========================================================================

    async def refresh(self) -> CatalogSnapshot:
        """Re-fetch curricula and schools and re-derive everything.

        Expected backend failures are reported through `error`; the
        previous data is kept for any collection that could not be
        fetched. Unexpected exceptions propagate after setting `error`,
        leaving the previous snapshot in place.

        Returns:
            The snapshot in effect after the refresh.
        """
        self._is_loading = True
        self._error = None
        errors: list[str] = []
        try:
            result = await bulk_fetcher.fetch_all_curricula(
                self.client, page_size=self.settings.page_size
            )
            if 0 in result.failed_pages:
                errors.append(CURRICULA_ERROR)
                curricula = self._snapshot.curricula
            else:
                curricula = result.curricula

            try:
                registry = schools_from_registry(await self.client.get_schools())
            except CatalogError as e:
                logger.warning("School registry unavailable, keeping previous registry: %s", e)
                errors.append(SCHOOLS_ERROR)
                registry = list(self._snapshot.registry)

            reconciliation = reconcile_schools(
                registry, curricula, threshold=self.settings.fuzzy_match_threshold
            )
            snapshot = CatalogSnapshot(
                curricula=tuple(curricula),
                schools=reconciliation.schools,
                departments=tuple(extract_departments(curricula)),
                school_mapping=reconciliation.mapping,
                failed_pages=result.failed_pages,
                refreshed_at=utc_now(),
            )
        except Exception as e:
            logger.exception("Catalog refresh failed")
            self._error = str(e) or type(e).__name__
            raise
        finally:
            self._is_loading = False

        self._snapshot = snapshot
        self._departments.clear()
        self._error = "; ".join(errors) or None
        logger.info(
            "Catalog refreshed: %d curricula, %d schools, %d departments",
            len(snapshot.curricula),
            len(snapshot.schools),
            len(snapshot.departments),
        )
        return snapshot

    # =========================================================================
    # Derived views
    # =========================================================================

    def get_hierarchy(self) -> tuple[SchoolNode, ...]:
        """School → program → department tree of the current snapshot."""
        return build_hierarchy(
            self._snapshot.schools,
            self._snapshot.school_mapping,
            self._snapshot.curricula,
            threshold=self.settings.fuzzy_match_threshold,
            departments_for=self._departments.departments_for,
        )

    def get_filtered_curricula(
        self,
        status_filter: str | None = None,
        search_term: str = "",
    ) -> tuple[Curriculum, ...]:
        """Curricula matching a status and a free-text term, snapshot order."""
        criteria = QueryCriteria(status=status_filter, search_term=search_term or "")
        return tuple(filter_curricula(self._snapshot.curricula, criteria))

    def status_overview(self) -> StatusOverview:
        return summarize_statuses(self._snapshot.curricula)

    def get_school_node(self, school_id: str) -> SchoolNode | None:
        """Hierarchy node of one school, or None for an unknown id."""
        school = self._find_school(school_id)
        if school is None:
            return None
        return build_school_node(
            school,
            self._snapshot.curricula,
            mapped_id=self._snapshot.school_mapping.get(school.id),
            threshold=self.settings.fuzzy_match_threshold,
            backend_departments=self._departments.departments_for(school.id),
        )

    def get_program_view(
        self,
        school_id: str,
        program_id: ProgramLevel | str,
        page: int = 0,
        criteria: QueryCriteria | None = None,
    ) -> QueryResult:
        """One page of a school's program curricula.

        The department, status and search filters and the sort order of
        ``criteria`` (the active filters by default) apply to the bucket
        before paging. Its school, program, page and page size are ignored.
        """
        bucket = self._find_bucket(school_id, program_id)
        items = bucket.curricula if bucket else ()
        scoped = (criteria or self._filters).model_copy(
            update={
                "school_id": None,
                "program_id": None,
                "page": page,
                "page_size": self.settings.program_page_size,
            }
        )
        return run_query(items, scoped)

    def get_program_departments(
        self,
        school_id: str,
        program_id: ProgramLevel | str,
    ) -> list[Department]:
        """Departments of a school's program with their curriculum counts."""
        bucket = self._find_bucket(school_id, program_id)
        if bucket is None:
            return []
        return enrich_program_departments(bucket, self._departments.departments_for(school_id))

    async def search_by_name(self, term: str) -> tuple[Curriculum, ...]:
        """Backend name search; short terms return nothing without a request."""
        term = term.strip()
        if len(term) < self.settings.search_min_length:
            return ()
        return await bulk_fetcher.search_by_name(
            self.client, term, page_size=self.settings.search_page_size
        )

    # =========================================================================
    # Filter state
    # =========================================================================

    @property
    def filters(self) -> QueryCriteria:
        return self._filters

    def update_filters(self, **changes: Any) -> QueryCriteria:
        """Apply filter changes and return the new filter state.

        Changing any filter, the sort order or the page size resets the
        page to 0 unless a page is given explicitly.

        Raises:
            ValueError: If a change names an unknown field.
        """
        unknown = set(changes) - set(QueryCriteria.model_fields)
        if unknown:
            raise ValueError(f"Unknown filter fields: {sorted(unknown)}")

        data = self._filters.model_dump()
        data.update(changes)
        if "page" not in changes and _PAGE_RESET_FIELDS & set(changes):
            data["page"] = 0
        self._filters = QueryCriteria.model_validate(data)
        return self._filters

    def reset_filters(self) -> QueryCriteria:
        self._filters = self._default_filters()
        return self._filters

    def current_view(self) -> QueryResult:
        """Current page of the flat curriculum list under the active filters.

        A school filter selects the school's curricula the way the
        hierarchy does, through the reconciled mapping and its fallbacks.
        """
        curricula, criteria = self._scope_to_school(self._snapshot.curricula, self._filters)
        return run_query(curricula, criteria)

    # =========================================================================
    # Departments
    # =========================================================================

    async def load_school_departments(self, school_id: str) -> tuple[Department, ...]:
        await self._departments.load(school_id)
        return self._departments.departments_for(school_id)

    async def retry_load_departments(self, school_id: str) -> tuple[Department, ...]:
        await self._departments.retry(school_id)
        return self._departments.departments_for(school_id)

    def department_state(self, school_id: str) -> DepartmentState:
        return self._departments.state(school_id)

    def departments_for_school(self, school_id: str) -> tuple[Department, ...]:
        return self._departments.departments_for(school_id)

    # =========================================================================
    # Internals
    # =========================================================================

    def _default_filters(self) -> QueryCriteria:
        return QueryCriteria(page_size=self.settings.view_page_size)

    async def _load_departments(self, school_id: str) -> list[Department]:
        records = await self.client.get_departments(
            school_id, page=0, size=self.settings.department_page_size
        )
        return departments_from_records(records, school_id)

    def _find_school(self, school_id: str) -> School | None:
        for school in self._snapshot.schools:
            if school.id == school_id:
                return school
        return None

    def _scope_to_school(
        self,
        curricula: Sequence[Curriculum],
        criteria: QueryCriteria,
    ) -> tuple[Sequence[Curriculum], QueryCriteria]:
        """Resolve a known school filter into that school's curricula.

        Unknown ids stay in the criteria and compare against the raw
        curriculum school id.
        """
        if criteria.school_id in (None, "all"):
            return curricula, criteria
        school = self._find_school(criteria.school_id)
        if school is None:
            return curricula, criteria
        selected = curricula_for_school(
            school,
            curricula,
            mapped_id=self._snapshot.school_mapping.get(school.id),
            threshold=self.settings.fuzzy_match_threshold,
        )
        return selected, criteria.model_copy(update={"school_id": None})

    def _find_bucket(
        self,
        school_id: str,
        program_id: ProgramLevel | str,
    ) -> ProgramBucket | None:
        node = self.get_school_node(school_id)
        if node is None:
            return None
        for bucket in node.programs:
            if bucket.id == program_id:
                return bucket
        return None
