"""Tests for coach_retention.roster."""

from __future__ import annotations

from datetime import date

import pytest
from factories import make_athlete

from coach_retention.exceptions import ContractError, DisciplineError
from coach_retention.roster import (
    NO_EXCLUSIONS,
    Discipline,
    ExclusionList,
    athletes_of_coach,
    coach_names,
    filter_population,
    matches_coach,
)

JAN = date(2024, 1, 10)


@pytest.fixture()
def mixed_population():
    return [
        make_athlete("1", JAN, primary="Ana", secondary="Bruno"),
        make_athlete("2", JAN, primary="Ana", secondary="none"),
        make_athlete("3", JAN, primary="Caio Lima", secondary="Bruno"),
        make_athlete("4", JAN, primary="Marta", secondary="Ana"),
        make_athlete("5", JAN, primary="  ", secondary=None),
        make_athlete("6", JAN, primary="marta", secondary="Lucia da Silva Magalhães"),
    ]


# -- Discipline ----------------------------------------------------------------


class TestDiscipline:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("primary", Discipline.PRIMARY),
            (" Secondary ", Discipline.SECONDARY),
            ("COMBINED", Discipline.COMBINED),
            ("corrida", Discipline.PRIMARY),
            ("força", Discipline.SECONDARY),
            ("forca", Discipline.SECONDARY),
            ("geral", Discipline.COMBINED),
            (Discipline.SECONDARY, Discipline.SECONDARY),
        ],
    )
    def test_parse(self, raw, expected):
        assert Discipline.parse(raw) is expected

    @pytest.mark.parametrize("raw", ["swimming", "", None, 3])
    def test_unknown(self, raw):
        with pytest.raises(DisciplineError) as excinfo:
            Discipline.parse(raw)
        assert "primary, secondary, combined" in str(excinfo.value)

    def test_discipline_error_is_contract_error(self):
        with pytest.raises(ContractError):
            filter_population([], "yoga")


# -- Exclusion -----------------------------------------------------------------


class TestExclusionList:
    def test_defaults(self):
        excluded = ExclusionList()
        assert excluded("Caio Lima")
        assert excluded("lucia da silva magalhães")

    def test_trimmed_case_insensitive(self):
        excluded = ExclusionList(names=("Ana",))
        assert excluded("  ANA ")
        assert not excluded("Anabel")

    def test_no_exclusions(self):
        assert not NO_EXCLUSIONS("Caio Lima")

    def test_any_callable_works(self, mixed_population):
        names = coach_names(mixed_population, "primary", lambda n: n.startswith("M"))
        assert names == ["Ana", "Caio Lima", "marta"]


# -- Population filter ---------------------------------------------------------


class TestFilterPopulation:
    def test_primary_drops_blank_and_excluded(self, mixed_population):
        kept = filter_population(mixed_population, "primary", ExclusionList())
        assert [a.id for a in kept] == ["1", "2", "4", "6"]

    def test_secondary_drops_sentinels_and_excluded(self, mixed_population):
        kept = filter_population(mixed_population, "secondary", ExclusionList())
        assert [a.id for a in kept] == ["1", "3", "4"]

    def test_combined_is_union(self, mixed_population):
        kept = filter_population(mixed_population, "combined", ExclusionList())
        assert [a.id for a in kept] == ["1", "2", "3", "4", "6"]

    def test_without_exclusions(self, mixed_population):
        kept = filter_population(mixed_population, Discipline.PRIMARY)
        assert len(kept) == 5


# -- Coach matching ------------------------------------------------------------


class TestCoachMatching:
    def test_primary_case_insensitive(self, mixed_population):
        ids = [a.id for a in athletes_of_coach(mixed_population, "MARTA", "primary")]
        assert ids == ["4", "6"]

    def test_secondary_only(self, mixed_population):
        ids = [a.id for a in athletes_of_coach(mixed_population, "ana", "secondary")]
        assert ids == ["4"]

    def test_combined_either_role(self, mixed_population):
        ids = [a.id for a in athletes_of_coach(mixed_population, "Ana", "combined")]
        assert ids == ["1", "2", "4"]

    def test_sentinel_secondary_never_matches_real_coach(self):
        a = make_athlete("1", JAN, secondary="nobody")
        assert not matches_coach(a, "Bruno", "secondary")


class TestCoachNames:
    def test_primary_first_seen_order(self, mixed_population):
        assert coach_names(mixed_population, "primary", ExclusionList()) == ["Ana", "Marta", "marta"]

    def test_secondary(self, mixed_population):
        assert coach_names(mixed_population, "secondary", ExclusionList()) == ["Bruno", "Ana"]

    def test_combined_deduplicates(self, mixed_population):
        names = coach_names(mixed_population, "combined", ExclusionList())
        assert names == ["Ana", "Marta", "marta", "Bruno"]
