# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Data models for the catalog domain.

This module defines Pydantic models and enums for:
- Canonical curricula, schools and departments
- The school → program → department hierarchy
- Query criteria and paginated results

All models are frozen. A refresh replaces them wholesale; nothing in the
engine mutates an entity after it has been built.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

ALL = "all"


class CurriculumStatus(str, Enum):
    """Canonical curriculum status."""

    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected"
    DRAFT = "draft"


class ProgramLevel(str, Enum):
    """Program buckets, in hierarchy order."""

    PHD = "phd"
    MASTERS = "masters"
    BACHELOR = "bachelor"


PROGRAM_NAMES: dict[ProgramLevel, str] = {
    ProgramLevel.PHD: "PhD Program",
    ProgramLevel.MASTERS: "Master's Degree",
    ProgramLevel.BACHELOR: "Bachelor's Degree",
}


class SortOrder(str, Enum):
    """Sort keys supported by the query pipeline."""

    NEWEST = "newest"
    OLDEST = "oldest"
    TITLE = "title"
    DEPARTMENT = "department"


class DepartmentSource(str, Enum):
    """Where a department entry came from."""

    BACKEND = "backend"
    CURRICULUM = "curriculum"


class Curriculum(BaseModel):
    """Canonical, backend-agnostic curriculum record.

    Attributes:
        id: Backend id, stringified.
        title: Display title.
        code: Curriculum code.
        status: Canonical status.
        department: Department display name.
        department_id: Backend department id, if any.
        school_id: School identifier as embedded by the backend.
        school_name: School name as embedded by the backend.
        program_id: Program bucket derived from the academic level.
        program_name: Raw academic level label.
        created_date: ISO date of creation.
        last_modified: ISO date of last update.
        effective_date: ISO date from which the curriculum applies.
        duration_label: Human-readable duration ("8 semesters").
        active: Whether the backend marks the curriculum active.
        created_by: Author reference.
        description: Free-text description.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str | None = None
    code: str | None = None
    status: CurriculumStatus = CurriculumStatus.DRAFT
    department: str | None = None
    department_id: str | None = None
    school_id: str | None = None
    school_name: str | None = None
    program_id: ProgramLevel = ProgramLevel.BACHELOR
    program_name: str | None = None
    created_date: str | None = None
    last_modified: str | None = None
    effective_date: str | None = None
    duration_label: str | None = None
    active: bool = False
    created_by: str | None = None
    description: str = ""


class School(BaseModel):
    """School entry of the merged registry.

    Attributes:
        id: Registry id (or the curriculum-embedded id when synthesized).
        code: Optional registry code.
        name: Display name.
        dean_id: Optional dean reference.
        icon: Icon key derived from the name.
        from_curricula: True when synthesized from curriculum records.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    code: str | None = None
    name: str
    dean_id: str | None = None
    icon: str = "university"
    from_curricula: bool = False

    @field_validator("id", "code", "dean_id", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class Department(BaseModel):
    """Department entry.

    Attributes:
        id: Backend id, or "curriculum_<Name>" when derived from curricula.
        name: Display name.
        school_id: Owning school identifier.
        school_name: Owning school name.
        curriculum_count: Curricula in the department, when attached to
            a program bucket.
        source: Backend registry or curriculum records.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    school_id: str | None = None
    school_name: str | None = None
    curriculum_count: int | None = None
    source: DepartmentSource = DepartmentSource.BACKEND

    @field_validator("id", "school_id", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class StatusStats(BaseModel):
    """Per-status curriculum tally."""

    model_config = ConfigDict(frozen=True)

    approved: int = 0
    pending: int = 0
    draft: int = 0
    rejected: int = 0

    @property
    def total(self) -> int:
        """Sum of all status counts."""
        return self.approved + self.pending + self.draft + self.rejected


class DepartmentGroup(BaseModel):
    """Curricula of one department inside a program bucket."""

    model_config = ConfigDict(frozen=True)

    name: str
    curricula: tuple[Curriculum, ...] = ()

    @property
    def count(self) -> int:
        return len(self.curricula)


class ProgramBucket(BaseModel):
    """One program level of a school.

    Invariant: status_stats.total == count.
    """

    model_config = ConfigDict(frozen=True)

    id: ProgramLevel
    name: str
    count: int
    status_stats: StatusStats
    departments: tuple[DepartmentGroup, ...] = ()

    @property
    def curricula(self) -> tuple[Curriculum, ...]:
        """All curricula of the bucket, department by department."""
        return tuple(c for group in self.departments for c in group.curricula)


class SchoolNode(BaseModel):
    """Top level of the catalog hierarchy."""

    model_config = ConfigDict(frozen=True)

    school: School
    mapped_id: str | None = None
    total: int = 0
    status_stats: StatusStats = Field(default_factory=StatusStats)
    department_count: int = 0
    programs: tuple[ProgramBucket, ...] = ()


class StatusOverview(BaseModel):
    """Catalog-wide status breakdown."""

    model_config = ConfigDict(frozen=True)

    total: int = 0
    stats: StatusStats = Field(default_factory=StatusStats)
    approval_rate: int = 0


class QueryCriteria(BaseModel):
    """Filter, sort and page selection for the query pipeline.

    A filter set to None or "all" is disabled.
    """

    model_config = ConfigDict(frozen=True)

    search_term: str = ""
    school_id: str | None = None
    program_id: str | None = None
    department: str | None = None
    status: str | None = None
    sort_by: SortOrder | None = SortOrder.NEWEST
    page: int = Field(default=0, ge=0)
    page_size: int = Field(default=20, gt=0)


class QueryResult(BaseModel):
    """One page of a filtered and sorted curriculum list."""

    model_config = ConfigDict(frozen=True)

    items: tuple[Curriculum, ...] = ()
    page: int = 0
    page_size: int = 20
    total_elements: int = 0
    total_pages: int = 0
    has_next: bool = False
    has_previous: bool = False
