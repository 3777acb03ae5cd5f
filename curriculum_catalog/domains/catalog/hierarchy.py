# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School → program → department hierarchy.

The hierarchy is derived, never stored: it is rebuilt from the merged
school set, the school mapping and the curriculum collection whenever it
is requested.
"""

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence

from curriculum_catalog.domains.catalog.models import (
    PROGRAM_NAMES,
    Curriculum,
    CurriculumStatus,
    Department,
    DepartmentGroup,
    ProgramBucket,
    ProgramLevel,
    School,
    SchoolNode,
    StatusOverview,
    StatusStats,
)
from curriculum_catalog.domains.catalog.reconciler import (
    DEFAULT_MATCH_THRESHOLD,
    curricula_for_school,
)

logger = logging.getLogger(__name__)

GENERAL_DEPARTMENT = "General"

PROGRAM_ORDER: tuple[ProgramLevel, ...] = (
    ProgramLevel.PHD,
    ProgramLevel.MASTERS,
    ProgramLevel.BACHELOR,
)


def compute_status_stats(curricula: Iterable[Curriculum]) -> StatusStats:
    """Tally curricula per canonical status."""
    counts = {status: 0 for status in CurriculumStatus}
    for curriculum in curricula:
        counts[curriculum.status] += 1
    return StatusStats(
        approved=counts[CurriculumStatus.APPROVED],
        pending=counts[CurriculumStatus.PENDING],
        draft=counts[CurriculumStatus.DRAFT],
        rejected=counts[CurriculumStatus.REJECTED],
    )


def summarize_statuses(curricula: Sequence[Curriculum]) -> StatusOverview:
    """Catalog-wide status breakdown with the approval rate in percent."""
    stats = compute_status_stats(curricula)
    total = len(curricula)
    approval_rate = round(stats.approved / total * 100) if total else 0
    return StatusOverview(total=total, stats=stats, approval_rate=approval_rate)


def group_by_department(curricula: Iterable[Curriculum]) -> tuple[DepartmentGroup, ...]:
    """Group curricula by department name in first-appearance order."""
    groups: dict[str, list[Curriculum]] = {}
    for curriculum in curricula:
        groups.setdefault(curriculum.department or GENERAL_DEPARTMENT, []).append(curriculum)
    return tuple(
        DepartmentGroup(name=name, curricula=tuple(members)) for name, members in groups.items()
    )


def build_program_buckets(curricula: Sequence[Curriculum]) -> tuple[ProgramBucket, ...]:
    """Split a school's curricula into non-empty program buckets."""
    buckets: list[ProgramBucket] = []
    for level in PROGRAM_ORDER:
        subset = [c for c in curricula if c.program_id == level]
        if not subset:
            continue
        buckets.append(
            ProgramBucket(
                id=level,
                name=PROGRAM_NAMES[level],
                count=len(subset),
                status_stats=compute_status_stats(subset),
                departments=group_by_department(subset),
            )
        )
    return tuple(buckets)


def build_school_node(
    school: School,
    curricula: Sequence[Curriculum],
    mapped_id: str | None = None,
    threshold: float = DEFAULT_MATCH_THRESHOLD,
    backend_departments: Sequence[Department] = (),
) -> SchoolNode:
    """Build the hierarchy node of one school."""
    matched = curricula_for_school(school, curricula, mapped_id, threshold)
    curriculum_departments = {c.department for c in matched if c.department}
    return SchoolNode(
        school=school,
        mapped_id=mapped_id,
        total=len(matched),
        status_stats=compute_status_stats(matched),
        department_count=max(len(backend_departments), len(curriculum_departments)),
        programs=build_program_buckets(matched),
    )


def build_hierarchy(
    schools: Sequence[School],
    mapping: Mapping[str, str | None],
    curricula: Sequence[Curriculum],
    threshold: float = DEFAULT_MATCH_THRESHOLD,
    departments_for: Callable[[str], Sequence[Department]] | None = None,
) -> tuple[SchoolNode, ...]:
    """Fold curricula into the school → program → department tree.

    Args:
        schools: Merged school set.
        mapping: Registry id → curriculum-side school id.
        curricula: Canonical curriculum collection.
        threshold: Token-overlap threshold for name matching.
        departments_for: Optional lookup of loaded backend departments,
            used for the department count of each school.

    Returns:
        One node per school, in school order.
    """
    nodes = tuple(
        build_school_node(
            school,
            curricula,
            mapped_id=mapping.get(school.id),
            threshold=threshold,
            backend_departments=departments_for(school.id) if departments_for else (),
        )
        for school in schools
    )
    logger.debug("Built hierarchy for %d schools", len(nodes))
    return nodes
