# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School registry ↔ curriculum reconciliation.

The school registry and the curriculum collection are maintained
independently and do not share a foreign key: curricula embed their own
school id and name, which may be the registry id, the registry code, or
something unrelated. This module establishes the correspondence.

Matching cascades through MATCH_STRATEGIES in fixed priority order, first
success wins:
1. match_by_id: curriculum school_id == registry id
2. match_by_code: curriculum school_id == registry code
3. match_by_name: curriculum school_name == registry name (case-sensitive)
4. match_by_tokens: significant-token overlap between the names

Curricula whose school corresponds to no registry entry produce
synthesized schools (from_curricula=True). Everything is recomputed in
full on every call.

Example:
    >>> result = reconcile_schools(registry, curricula)
    >>> result.mapping["S1"]
    '99'
"""

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from functools import partial
from types import MappingProxyType
from typing import Any

from curriculum_catalog.domains.catalog.models import Curriculum, School
from curriculum_catalog.domains.catalog.normalizer import school_icon

logger = logging.getLogger(__name__)

STOP_WORDS = frozenset({"school", "of", "and", "the", "for", "in"})
MIN_TOKEN_LENGTH = 3
DEFAULT_MATCH_THRESHOLD = 0.5

MatchStrategy = Callable[[School, Sequence[Curriculum]], str | None]


@dataclass(frozen=True)
class Reconciliation:
    """Merged school set and registry → curriculum id mapping.

    Attributes:
        schools: Registry schools followed by synthesized schools.
        mapping: Registry school id → school id used by its curricula,
            or None when no correspondence was found.
    """

    schools: tuple[School, ...]
    mapping: Mapping[str, str | None]

    @property
    def synthesized(self) -> tuple[School, ...]:
        return tuple(s for s in self.schools if s.from_curricula)


def name_tokens(name: str | None) -> frozenset[str]:
    """Significant lower-cased tokens of a school name.

    Example:
        >>> sorted(name_tokens("School of Computing and Informatics"))
        ['computing', 'informatics']
    """
    if not name:
        return frozenset()
    return frozenset(
        token
        for token in name.lower().split()
        if len(token) >= MIN_TOKEN_LENGTH and token not in STOP_WORDS
    )


def names_overlap(
    left: str | None,
    right: str | None,
    threshold: float = DEFAULT_MATCH_THRESHOLD,
) -> bool:
    """Whether two school names share enough significant tokens.

    The shared-token count must reach threshold × the size of the smaller
    token set. Names without significant tokens never match.
    """
    left_tokens = name_tokens(left)
    right_tokens = name_tokens(right)
    if not left_tokens or not right_tokens:
        return False
    shared = len(left_tokens & right_tokens)
    return shared >= threshold * min(len(left_tokens), len(right_tokens))


def match_by_id(school: School, curricula: Sequence[Curriculum]) -> str | None:
    """Curricula reference the school by its registry id."""
    if any(c.school_id == school.id for c in curricula):
        return school.id
    return None


def match_by_code(school: School, curricula: Sequence[Curriculum]) -> str | None:
    """Curricula reference the school by its registry code."""
    if school.code and any(c.school_id == school.code for c in curricula):
        return school.code
    return None


def match_by_name(school: School, curricula: Sequence[Curriculum]) -> str | None:
    """Curricula carry exactly the registry name."""
    for curriculum in curricula:
        if curriculum.school_id and curriculum.school_name == school.name:
            return curriculum.school_id
    return None


def match_by_tokens(
    school: School,
    curricula: Sequence[Curriculum],
    threshold: float = DEFAULT_MATCH_THRESHOLD,
) -> str | None:
    """Curricula carry a name with enough significant tokens in common."""
    for school_id, school_name in _curriculum_schools(curricula).items():
        if names_overlap(school_name, school.name, threshold):
            return school_id
    return None


MATCH_STRATEGIES: tuple[MatchStrategy, ...] = (
    match_by_id,
    match_by_code,
    match_by_name,
    match_by_tokens,
)


def _strategies(threshold: float) -> tuple[MatchStrategy, ...]:
    if threshold == DEFAULT_MATCH_THRESHOLD:
        return MATCH_STRATEGIES
    return (
        match_by_id,
        match_by_code,
        match_by_name,
        partial(match_by_tokens, threshold=threshold),
    )


def _curriculum_schools(curricula: Iterable[Curriculum]) -> dict[str, str]:
    """school_id → school_name for curricula carrying both.

    Ids keep first-seen order; the last name seen for an id wins.
    """
    schools: dict[str, str] = {}
    for curriculum in curricula:
        if curriculum.school_id and curriculum.school_name:
            schools[curriculum.school_id] = curriculum.school_name
    return schools


def resolve_school(
    school: School,
    curricula: Sequence[Curriculum],
    strategies: Sequence[MatchStrategy] = MATCH_STRATEGIES,
) -> str | None:
    """Run the strategy cascade for one registry school."""
    for strategy in strategies:
        mapped = strategy(school, curricula)
        if mapped is not None:
            return mapped
    return None


def build_school_mapping(
    registry: Sequence[School],
    curricula: Sequence[Curriculum],
    threshold: float = DEFAULT_MATCH_THRESHOLD,
) -> Mapping[str, str | None]:
    """Map every registry school to the id its curricula use."""
    strategies = _strategies(threshold)
    mapping = {school.id: resolve_school(school, curricula, strategies) for school in registry}
    return MappingProxyType(mapping)


def synthesize_schools(
    registry: Sequence[School],
    curricula: Sequence[Curriculum],
    mapping: Mapping[str, str | None] | None = None,
) -> list[School]:
    """Create schools for curricula that reference no registry school.

    A curriculum school is covered when its id is a registry id or a
    resolved mapping target, or its name equals a registry name. New
    entries never reuse a name already present (case-insensitive) and are
    created once per embedded id.
    """
    registry_ids = {school.id for school in registry}
    registry_names = {school.name for school in registry}
    mapped_ids = {value for value in (mapping or {}).values() if value is not None}
    taken_names = {school.name.lower() for school in registry}

    synthesized: list[School] = []
    seen_ids: set[str] = set()
    for school_id, school_name in _curriculum_schools(curricula).items():
        if school_id in registry_ids or school_id in mapped_ids or school_name in registry_names:
            continue
        if school_id in seen_ids or school_name.lower() in taken_names:
            continue
        seen_ids.add(school_id)
        taken_names.add(school_name.lower())
        synthesized.append(
            School(
                id=school_id,
                name=school_name,
                icon=school_icon(school_name),
                from_curricula=True,
            )
        )
    return synthesized


def reconcile_schools(
    registry: Sequence[School],
    curricula: Sequence[Curriculum],
    threshold: float = DEFAULT_MATCH_THRESHOLD,
) -> Reconciliation:
    """Merge the registry with schools implied by curricula.

    Args:
        registry: Schools from the registry endpoint.
        curricula: The full canonical curriculum collection.
        threshold: Token-overlap threshold for the fuzzy strategy.

    Returns:
        Reconciliation with merged schools and the registry mapping.
    """
    mapping = build_school_mapping(registry, curricula, threshold)
    synthesized = synthesize_schools(registry, curricula, mapping)

    unmatched = [school_id for school_id, mapped in mapping.items() if mapped is None]
    if unmatched:
        logger.debug("Registry schools without curricula: %s", unmatched)
    logger.info(
        "Reconciled %d registry schools (%d unmatched), synthesized %d",
        len(registry),
        len(unmatched),
        len(synthesized),
    )

    return Reconciliation(schools=(*registry, *synthesized), mapping=mapping)


def curricula_for_school(
    school: School,
    curricula: Sequence[Curriculum],
    mapped_id: str | None = None,
    threshold: float = DEFAULT_MATCH_THRESHOLD,
) -> list[Curriculum]:
    """Select the curricula that belong to a school.

    Fallback chain, first non-empty result wins: mapped id, raw registry
    id, registry code, exact name, token-overlap name match.
    """
    selectors: list[Callable[[Curriculum], bool]] = []
    if mapped_id:
        selectors.append(lambda c: c.school_id == mapped_id)
    selectors.append(lambda c: c.school_id == school.id)
    if school.code:
        selectors.append(lambda c: c.school_id == school.code)
    selectors.append(lambda c: c.school_name == school.name)
    selectors.append(lambda c: names_overlap(c.school_name, school.name, threshold))

    for selector in selectors:
        matched = [c for c in curricula if selector(c)]
        if matched:
            return matched
    return []


def schools_from_registry(records: Iterable[Any]) -> list[School]:
    """Build registry School entries from raw {id, name, code, deanId} records.

    Records without an id or name are skipped.
    """
    schools: list[School] = []
    for record in records:
        if not isinstance(record, Mapping):
            logger.warning("Skipping non-object school record: %r", record)
            continue
        school_id = record.get("id")
        name = record.get("name")
        if school_id is None or not name:
            logger.warning("Skipping school record without id or name: %r", record)
            continue
        schools.append(
            School(
                id=school_id,
                code=record.get("code") or None,
                name=str(name),
                dean_id=record.get("deanId"),
                icon=school_icon(str(name)),
            )
        )
    return schools
