# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Raw backend record → canonical Curriculum.

The backend has shipped several record shapes over time (draft proposals
carry `proposedCurriculumName` instead of `name`, older builds send
`active` instead of `isActive`, ...). Every fallback lives here so that
callers only ever see a canonical Curriculum.

normalize_curriculum is pure and total: it never raises for missing or
malformed optional fields.
"""

from collections.abc import Mapping
from typing import Any

from curriculum_catalog.domains.catalog.models import (
    Curriculum,
    CurriculumStatus,
    ProgramLevel,
)
from curriculum_catalog.utils.datetime import format_iso_date

# Keys are matched case-sensitively
STATUS_MAP: dict[str, CurriculumStatus] = {
    "APPROVED": CurriculumStatus.APPROVED,
    "ACTIVE": CurriculumStatus.APPROVED,
    "IN_PROGRESS": CurriculumStatus.PENDING,
    "UNDER_REVIEW": CurriculumStatus.PENDING,
    "PENDING": CurriculumStatus.PENDING,
    "REJECTED": CurriculumStatus.REJECTED,
}

# First matching keyword wins
SCHOOL_ICONS: list[tuple[str, str]] = [
    ("engineering", "cogs"),
    ("technology", "laptop-code"),
    ("business", "chart-line"),
    ("economics", "chart-line"),
    ("science", "atom"),
    ("medicine", "heartbeat"),
    ("education", "chalkboard-teacher"),
    ("arts", "palette"),
    ("agriculture", "seedling"),
]
DEFAULT_SCHOOL_ICON = "university"


def map_status(raw_status: Any) -> CurriculumStatus:
    """Map a backend status to its canonical value (unknown → draft)."""
    if not isinstance(raw_status, str):
        return CurriculumStatus.DRAFT
    return STATUS_MAP.get(raw_status, CurriculumStatus.DRAFT)


def map_program_level(academic_level: Any) -> ProgramLevel:
    """Derive the program bucket from an academic level label.

    Example:
        >>> map_program_level("Doctor of Philosophy")
        <ProgramLevel.PHD: 'phd'>
        >>> map_program_level("Master of Science")
        <ProgramLevel.MASTERS: 'masters'>
        >>> map_program_level(None)
        <ProgramLevel.BACHELOR: 'bachelor'>
    """
    if not isinstance(academic_level, str):
        return ProgramLevel.BACHELOR

    label = academic_level.lower()
    if "phd" in label or "doctor" in label:
        return ProgramLevel.PHD
    if "master" in label:
        return ProgramLevel.MASTERS
    return ProgramLevel.BACHELOR


def school_icon(school_name: str | None) -> str:
    """Pick an icon key for a school from keywords in its name."""
    if not school_name:
        return DEFAULT_SCHOOL_ICON

    lowered = school_name.lower()
    for keyword, icon in SCHOOL_ICONS:
        if keyword in lowered:
            return icon
    return DEFAULT_SCHOOL_ICON


def _text(value: Any) -> str | None:
    """Stringify scalar ids and labels; drop empty and structured values."""
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value)
    return text if text else None


def _first(raw: Mapping[str, Any], *keys: str) -> str | None:
    """First non-empty text value among keys."""
    for key in keys:
        value = _text(raw.get(key))
        if value is not None:
            return value
    return None


def _duration_label(semesters: Any) -> str | None:
    if isinstance(semesters, bool) or not isinstance(semesters, (int, float, str)):
        return None
    text = str(semesters).strip()
    if not text:
        return None
    return f"{text} semesters"


def _active_flag(raw: Mapping[str, Any]) -> bool:
    value = raw.get("isActive")
    if value is None:
        value = raw.get("active")
    return value is True


def normalize_curriculum(raw: Mapping[str, Any]) -> Curriculum:
    """Convert one raw backend record into a canonical Curriculum.

    Field fallbacks:
    - title: name, then proposedCurriculumName
    - code: code, then proposedCurriculumCode
    - active: isActive, then active, else False
    - duration_label: "<durationSemesters> semesters" when present
    - description: curriculumDescription, else ""

    Args:
        raw: Raw record from the curriculum listing or search endpoint.

    Returns:
        Canonical curriculum.
    """
    return Curriculum(
        id=_text(raw.get("id")) or "",
        title=_first(raw, "name", "proposedCurriculumName"),
        code=_first(raw, "code", "proposedCurriculumCode"),
        status=map_status(raw.get("status")),
        department=_text(raw.get("departmentName")),
        department_id=_text(raw.get("departmentId")),
        school_id=_text(raw.get("schoolId")),
        school_name=_text(raw.get("schoolName")),
        program_id=map_program_level(raw.get("academicLevelName")),
        program_name=_text(raw.get("academicLevelName")),
        created_date=format_iso_date(raw.get("createdAt")),
        last_modified=format_iso_date(raw.get("updatedAt")),
        effective_date=format_iso_date(raw.get("effectiveDate")),
        duration_label=_duration_label(raw.get("durationSemesters")),
        active=_active_flag(raw),
        created_by=_text(raw.get("createdBy")),
        description=_text(raw.get("curriculumDescription")) or "",
    )
