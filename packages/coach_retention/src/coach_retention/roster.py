"""Discipline tags, coach exclusion and the shared population filters.

Every engine narrows the roster through these functions so the
primary/secondary/combined rules live in exactly one place.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from coach_retention.exceptions import DisciplineError
from coach_retention.models import Athlete, is_blank_or_sentinel

ExclusionPredicate = Callable[[str], bool]

# Coaches who left the organization or hold administrative roles.
DEFAULT_EXCLUDED_COACHES: tuple[str, ...] = (
    "Caio Lima",
    "Lucia da Silva Magalhães",
)

_DISCIPLINE_ALIASES = {
    "corrida": "primary",
    "forca": "secondary",
    "força": "secondary",
    "geral": "combined",
}


class Discipline(str, Enum):
    """Which coaching relationship is analyzed."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    COMBINED = "combined"

    @classmethod
    def parse(cls, value: Discipline | str) -> Discipline:
        if isinstance(value, Discipline):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            key = _DISCIPLINE_ALIASES.get(key, key)
            for member in cls:
                if member.value == key:
                    return member
        raise DisciplineError(value)


@dataclass(frozen=True)
class ExclusionList:
    """Case-insensitive deny-list usable wherever an ExclusionPredicate is expected."""

    names: tuple[str, ...] = DEFAULT_EXCLUDED_COACHES

    def __post_init__(self) -> None:
        object.__setattr__(self, "_normalized", frozenset(_norm(n) for n in self.names))

    def __call__(self, coach_name: str) -> bool:
        return _norm(coach_name) in self._normalized


def _norm(name: str) -> str:
    return name.strip().lower()


NO_EXCLUSIONS = ExclusionList(names=())
DEFAULT_EXCLUSIONS = ExclusionList()


def is_valid_primary(athlete: Athlete, is_excluded: ExclusionPredicate) -> bool:
    return athlete.primary_coach.strip() != "" and not is_excluded(athlete.primary_coach)


def is_valid_secondary(athlete: Athlete, is_excluded: ExclusionPredicate) -> bool:
    name = athlete.secondary_coach_name
    return name is not None and not is_excluded(name)


def filter_population(
    population: Iterable[Athlete],
    discipline: Discipline | str,
    is_excluded: ExclusionPredicate = NO_EXCLUSIONS,
) -> list[Athlete]:
    """Keep the athletes that belong to *discipline*'s analyzable population."""
    discipline = Discipline.parse(discipline)
    if discipline is Discipline.PRIMARY:
        return [a for a in population if is_valid_primary(a, is_excluded)]
    if discipline is Discipline.SECONDARY:
        return [a for a in population if is_valid_secondary(a, is_excluded)]
    return [
        a
        for a in population
        if is_valid_primary(a, is_excluded) or is_valid_secondary(a, is_excluded)
    ]


def matches_coach(athlete: Athlete, coach_name: str, discipline: Discipline | str) -> bool:
    """True if *coach_name* coaches *athlete* under *discipline*."""
    discipline = Discipline.parse(discipline)
    target = coach_name.lower()
    primary_match = athlete.primary_coach.lower() == target
    secondary = athlete.secondary_coach
    secondary_match = secondary is not None and secondary.lower() == target
    if discipline is Discipline.PRIMARY:
        return primary_match
    if discipline is Discipline.SECONDARY:
        return secondary_match
    return primary_match or secondary_match


def athletes_of_coach(
    population: Iterable[Athlete],
    coach_name: str,
    discipline: Discipline | str,
) -> list[Athlete]:
    discipline = Discipline.parse(discipline)
    return [a for a in population if matches_coach(a, coach_name, discipline)]


def coach_names(
    population: Iterable[Athlete],
    discipline: Discipline | str,
    is_excluded: ExclusionPredicate = NO_EXCLUSIONS,
) -> list[str]:
    """Distinct analyzable coach names in first-seen order."""
    discipline = Discipline.parse(discipline)
    population = list(population)
    candidates: list[str] = []
    if discipline in (Discipline.PRIMARY, Discipline.COMBINED):
        candidates.extend(a.primary_coach for a in population)
    if discipline in (Discipline.SECONDARY, Discipline.COMBINED):
        candidates.extend(
            a.secondary_coach for a in population if not is_blank_or_sentinel(a.secondary_coach)
        )

    names: list[str] = []
    seen: set[str] = set()
    for name in candidates:
        if name.strip() == "" or is_excluded(name) or name in seen:
            continue
        seen.add(name)
        names.append(name)
    return names
