# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Department extraction and the lazy per-school department cache.

Two independent facilities:
- extract_departments derives a deduplicated department list from the
  curriculum collection in a single scan.
- DepartmentCache loads the backend-authoritative department list of a
  school on demand and tracks its state as a tagged variant:
  NotRequested | Loading | Loaded | Errored.

Concurrent loads for the same school share one in-flight request. Loads
for different schools are independent.
"""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Union

from curriculum_catalog.domains.catalog.models import (
    Curriculum,
    Department,
    DepartmentSource,
    ProgramBucket,
)
from curriculum_catalog.services.catalog_api.exceptions import CatalogAPIError, CatalogError

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Failed to load departments"

ERROR_MESSAGES: dict[int, str] = {
    401: "Authentication required",
    403: "Permission denied",
    404: "Departments not found",
    500: "Server error",
}

DepartmentLoader = Callable[[str], Awaitable[Sequence[Department]]]


def department_key(name: str) -> str:
    """Synthesized id for a department known only by name."""
    return "curriculum_" + re.sub(r"\s+", "_", name)


def extract_departments(curricula: Iterable[Curriculum]) -> list[Department]:
    """Deduplicated departments referenced by curricula.

    The dedup key is department_id when present, else the display name.
    Curricula without a department name are ignored.
    """
    departments: dict[str, Department] = {}
    for curriculum in curricula:
        if not curriculum.department:
            continue
        key = curriculum.department_id or curriculum.department
        if key in departments:
            continue
        departments[key] = Department(
            id=curriculum.department_id or department_key(curriculum.department),
            name=curriculum.department,
            school_id=curriculum.school_id,
            school_name=curriculum.school_name,
            source=(
                DepartmentSource.BACKEND if curriculum.department_id else DepartmentSource.CURRICULUM
            ),
        )
    return list(departments.values())


def departments_from_records(records: Iterable[Any], school_id: str) -> list[Department]:
    """Build Department entries from raw {id, name, schoolId} records."""
    departments: list[Department] = []
    for record in records:
        if not isinstance(record, Mapping) or not record.get("name"):
            logger.warning("Skipping malformed department record: %r", record)
            continue
        name = str(record["name"])
        departments.append(
            Department(
                id=record.get("id") if record.get("id") is not None else department_key(name),
                name=name,
                school_id=record.get("schoolId") if record.get("schoolId") is not None else school_id,
                school_name=record.get("schoolName"),
            )
        )
    return departments


def classify_error(error: BaseException) -> str:
    """User-facing message for a failed department load."""
    if isinstance(error, CatalogAPIError) and error.status_code in ERROR_MESSAGES:
        return ERROR_MESSAGES[error.status_code]
    return DEFAULT_ERROR_MESSAGE


def enrich_program_departments(
    bucket: ProgramBucket,
    backend_departments: Sequence[Department],
) -> list[Department]:
    """Departments of a program bucket with their curriculum counts.

    Backend departments whose name matches (case-insensitively) one of the
    bucket's curriculum departments come first; departments known only
    from curricula follow with synthesized ids.
    """
    counts = {group.name: group.count for group in bucket.departments}
    lowered = {name.lower(): name for name in counts}

    enriched: list[Department] = []
    seen: set[str] = set()
    for department in backend_departments:
        key = department.name.lower()
        if key not in lowered or key in seen:
            continue
        seen.add(key)
        enriched.append(
            department.model_copy(
                update={
                    "curriculum_count": counts[lowered[key]],
                    "source": DepartmentSource.BACKEND,
                }
            )
        )

    for name, count in counts.items():
        if name.lower() in seen:
            continue
        seen.add(name.lower())
        enriched.append(
            Department(
                id=department_key(name),
                name=name,
                curriculum_count=count,
                source=DepartmentSource.CURRICULUM,
            )
        )
    return enriched


@dataclass(frozen=True)
class NotRequested:
    """No load has been requested for the school."""


@dataclass(frozen=True, eq=False)
class Loading:
    """A load is in flight."""

    task: "asyncio.Task[Loaded | Errored]"


@dataclass(frozen=True)
class Loaded:
    """Departments were loaded."""

    departments: tuple[Department, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Errored:
    """The load failed; the school reports no departments."""

    message: str


DepartmentState = Union[NotRequested, Loading, Loaded, Errored]

NOT_REQUESTED = NotRequested()


class DepartmentCache:
    """Lazy per-school department cache.

    Attributes:
        _loader: Coroutine function fetching the departments of a school.
        _states: school id → current DepartmentState.

    Example:
        >>> cache = DepartmentCache(loader)
        >>> await cache.load("S1")
        >>> cache.departments_for("S1")
    """

    def __init__(self, loader: DepartmentLoader) -> None:
        self._loader = loader
        self._states: dict[str, DepartmentState] = {}

    def state(self, school_id: str) -> DepartmentState:
        return self._states.get(school_id, NOT_REQUESTED)

    def departments_for(self, school_id: str) -> tuple[Department, ...]:
        """Loaded departments of a school; empty unless loaded."""
        state = self.state(school_id)
        if isinstance(state, Loaded):
            return state.departments
        return ()

    def error_for(self, school_id: str) -> str | None:
        state = self.state(school_id)
        if isinstance(state, Errored):
            return state.message
        return None

    def is_loading(self, school_id: str) -> bool:
        return isinstance(self.state(school_id), Loading)

    def snapshot(self) -> Mapping[str, DepartmentState]:
        """Copy of every tracked school state."""
        return dict(self._states)

    async def load(self, school_id: str) -> None:
        """Load a school's departments unless already loaded or failed.

        A call made while a load is in flight waits for that load instead
        of issuing another request. Expected backend failures are stored
        as Errored; unexpected exceptions reset the school to NotRequested
        and propagate to the caller that started the load.
        """
        state = self.state(school_id)
        if isinstance(state, (Loaded, Errored)):
            return
        if isinstance(state, Loading):
            await asyncio.wait({state.task})
            return

        task = asyncio.create_task(self._fetch(school_id))
        loading = Loading(task)
        self._states[school_id] = loading
        task.add_done_callback(partial(self._settle, school_id, loading))
        logger.debug("Loading departments for school %s", school_id)

        await asyncio.wait({task})
        if not task.cancelled() and task.exception() is not None:
            raise task.exception()

    async def retry(self, school_id: str) -> None:
        """Forget a school's cached result and load it again.

        An in-flight request is not cancelled; its result is discarded.
        """
        self._states.pop(school_id, None)
        await self.load(school_id)

    def clear(self) -> None:
        """Forget every school."""
        self._states.clear()

    async def _fetch(self, school_id: str) -> Loaded | Errored:
        try:
            departments = await self._loader(school_id)
        except CatalogError as e:
            logger.warning("Department load for school %s failed: %s", school_id, e)
            return Errored(classify_error(e))
        logger.debug("Loaded %d departments for school %s", len(departments), school_id)
        return Loaded(tuple(departments))

    def _settle(self, school_id: str, loading: Loading, task: "asyncio.Task[Any]") -> None:
        # Only the request that owns the current Loading entry may write
        if self._states.get(school_id) is not loading:
            logger.debug("Discarding superseded department result for school %s", school_id)
            return
        if task.cancelled() or task.exception() is not None:
            del self._states[school_id]
            return
        self._states[school_id] = task.result()
