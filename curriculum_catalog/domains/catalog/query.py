# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Filter, sort and paginate curriculum lists.

Every function here is pure: the same input sequence and criteria always
produce the same ordered output, and inputs are never modified.
"""

import math
from collections.abc import Iterable, Sequence

from curriculum_catalog.domains.catalog.models import (
    ALL,
    Curriculum,
    QueryCriteria,
    QueryResult,
    SortOrder,
)
from curriculum_catalog.utils.datetime import date_sort_key


def _enabled(value: str | None) -> bool:
    return value is not None and value != ALL


def matches_search(curriculum: Curriculum, term: str) -> bool:
    """Case-insensitive substring match over title, code, school and department."""
    needle = term.lower()
    haystack = (
        curriculum.title,
        curriculum.code,
        curriculum.school_name,
        curriculum.department,
    )
    return any(field and needle in field.lower() for field in haystack)


def filter_curricula(
    curricula: Iterable[Curriculum],
    criteria: QueryCriteria,
) -> list[Curriculum]:
    """Apply the search term and exact-match filters of criteria."""
    term = criteria.search_term.strip()
    result: list[Curriculum] = []
    for curriculum in curricula:
        if term and not matches_search(curriculum, term):
            continue
        if _enabled(criteria.school_id) and curriculum.school_id != criteria.school_id:
            continue
        if _enabled(criteria.program_id) and curriculum.program_id.value != criteria.program_id:
            continue
        if _enabled(criteria.department) and curriculum.department != criteria.department:
            continue
        if _enabled(criteria.status) and curriculum.status.value != criteria.status:
            continue
        result.append(curriculum)
    return result


def _created(curriculum: Curriculum):
    return date_sort_key(curriculum.created_date or curriculum.last_modified)


def sort_curricula(
    curricula: Iterable[Curriculum],
    sort_by: SortOrder | None,
) -> list[Curriculum]:
    """Stable sort; None keeps the input order.

    Dates fall back from created_date to last_modified; missing dates sort
    as the epoch.
    """
    items = list(curricula)
    if sort_by == SortOrder.NEWEST:
        return sorted(items, key=_created, reverse=True)
    if sort_by == SortOrder.OLDEST:
        return sorted(items, key=_created)
    if sort_by == SortOrder.TITLE:
        return sorted(items, key=lambda c: c.title or "")
    if sort_by == SortOrder.DEPARTMENT:
        return sorted(items, key=lambda c: c.department or "")
    return items


def paginate(items: Sequence[Curriculum], page: int, page_size: int) -> QueryResult:
    """Slice one page out of items.

    Args:
        items: Filtered and sorted curricula.
        page: Zero-based page index.
        page_size: Items per page, positive.

    Returns:
        QueryResult for the requested page; a page past the end is empty.
    """
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    if page < 0:
        raise ValueError(f"page must be non-negative, got {page}")

    total = len(items)
    start = page * page_size
    end = start + page_size
    return QueryResult(
        items=tuple(items[start:end]),
        page=page,
        page_size=page_size,
        total_elements=total,
        total_pages=math.ceil(total / page_size),
        has_next=end < total,
        has_previous=page > 0,
    )


def run_query(curricula: Sequence[Curriculum], criteria: QueryCriteria) -> QueryResult:
    """Filter, sort and paginate in one pass.

    Example:
        >>> result = run_query(curricula, QueryCriteria(status="approved", page_size=10))
        >>> result.total_elements
    """
    filtered = filter_curricula(curricula, criteria)
    ordered = sort_curricula(filtered, criteria.sort_by)
    return paginate(ordered, criteria.page, criteria.page_size)
