"""Unit tests for shared scoring tables and rounding"""

import dataclasses
import pytest
from capstack_gateway.domain.tables import (
    DEFAULT_TABLES,
    ScoringTables,
    clamp_score,
    grade_for_score,
    round_half_up,
)


@pytest.mark.parametrize(
    "score,grade",
    [
        (100, "A+"),
        (90, "A+"),
        (89, "A"),
        (80, "A"),
        (79, "B+"),
        (70, "B+"),
        (60, "B"),
        (50, "C+"),
        (40, "C"),
        (30, "D"),
        (29, "F"),
        (0, "F"),
    ],
)
def test_grade_thresholds_are_inclusive(score, grade):
    assert grade_for_score(score) == grade


def test_round_half_up():
    assert round_half_up(70.5) == 71
    assert round_half_up(70.49) == 70
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3


def test_clamp_score():
    assert clamp_score(-5) == 0
    assert clamp_score(150) == 100
    assert clamp_score(42.5) == 42.5


def test_tables_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_TABLES.lowest_grade = "E"

    with pytest.raises(TypeError):
        DEFAULT_TABLES.health_weights["income_stability"] = 0.5


def test_substituted_tables_change_grading():
    """A caller-supplied table moves the grade boundaries"""
    strict = ScoringTables(grade_thresholds=((95, "A+"), (85, "A")), lowest_grade="F")

    assert grade_for_score(90, strict) == "A"
    assert grade_for_score(84, strict) == "F"


def test_unknown_industry_uses_default_rows():
    assert DEFAULT_TABLES.industry_growth("shipping") == 1.0
    assert DEFAULT_TABLES.industry_baseline("shipping") == 50000
