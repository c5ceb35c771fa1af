from __future__ import annotations

from typing import Any

import pendulum
import pytest
from pendulum.parsing.exceptions import ParserError

from talentalloc.core.evaluators import ExperienceEvaluator
from talentalloc.core.evaluators.experience import employment_years, parse_date
from talentalloc.schemas import CandidateSnapshot, EmploymentInterval, RoleRequirement


def build_candidate(**kwargs: Any) -> CandidateSnapshot:
    defaults: dict[str, Any] = {"id": "C-001"}
    defaults.update(kwargs)
    return CandidateSnapshot(**defaults)


def build_role(min_experience: float | None = 2, max_experience: float | None = 10) -> RoleRequirement:
    return RoleRequirement(
        id="R-001",
        project_id="P-001",
        min_experience=min_experience,
        max_experience=max_experience,
    )


@pytest.mark.parametrize(
    ("years", "score", "passes"),
    [
        (4, 100, True),
        (7, 100, True),
        (9, 80, True),
        (1, 0, False),
        (11, 90, False),
        (14, 70, False),
        (20, 40, False),
    ],
)
def test_experience_bands(years: float, score: int, passes: bool):
    result = ExperienceEvaluator().evaluate(build_candidate(total_experience_years=years), build_role())

    assert result.score == score
    assert result.passes is passes


def test_below_minimum_reports_missing_requirement():
    result = ExperienceEvaluator().evaluate(build_candidate(total_experience_years=1), build_role())

    assert result.reasons == ["Insufficient experience: 1 years (required: 2+)"]
    assert result.missing == ["Minimum 2 years experience required"]


def test_overqualified_candidate_fails_gate_with_graded_score():
    result = ExperienceEvaluator().evaluate(build_candidate(total_experience_years=11), build_role())

    assert result.passes is False
    assert result.score == 90
    assert result.reasons == ["Overqualified: 11 years (max: 10)"]
    assert result.metadata["band"] == "soft_overage"


def test_open_bounds_default_to_zero_and_hundred():
    evaluator = ExperienceEvaluator()
    role = build_role(min_experience=None, max_experience=None)

    assert evaluator.evaluate(build_candidate(total_experience_years=3), role).score == 100
    assert evaluator.evaluate(build_candidate(total_experience_years=30), role).score == 80


def test_years_derived_from_employment_intervals():
    candidate = build_candidate(
        employment_intervals=[
            {"start": "2020-01", "end": "2022-01"},
            {"start": "2023-01", "end": None},
        ]
    )

    result = ExperienceEvaluator().evaluate(candidate, build_role(), {"as_of": "2024-01"})

    assert result.metadata["years"] == 2
    assert result.score == 100
    assert result.reasons == ["Perfect experience match: 2 years"]


def test_zero_explicit_years_falls_back_to_history():
    candidate = build_candidate(
        total_experience_years=0,
        employment_intervals=[{"start": "2015-01", "end": "2021-01"}],
    )

    result = ExperienceEvaluator().evaluate(candidate, build_role(), {"as_of": pendulum.datetime(2024, 1, 1)})

    assert result.metadata["years"] == 6


def test_now_provider_is_used_without_as_of():
    evaluator = ExperienceEvaluator(now_provider=lambda: pendulum.datetime(2024, 1, 1))
    candidate = build_candidate(employment_intervals=[{"start": "2020-01"}])

    result = evaluator.evaluate(candidate, build_role())

    assert result.metadata["years"] == 3


def test_employment_years_floors_months_and_years():
    intervals = [EmploymentInterval(start="2023-01-01", end="2023-12-15")]

    assert employment_years(intervals, pendulum.datetime(2024, 1, 1)) == 0


def test_malformed_dates_raise_when_strict():
    intervals = [EmploymentInterval(start="not-a-date", end="2020-01")]

    with pytest.raises((ValueError, ParserError)):
        employment_years(intervals, pendulum.datetime(2024, 1, 1))


def test_malformed_dates_skipped_when_lenient():
    intervals = [
        EmploymentInterval(start="not-a-date", end="2020-01"),
        EmploymentInterval(start="2017-01", end="2020-01"),
    ]

    assert employment_years(intervals, pendulum.datetime(2024, 1, 1), strict=False) == 2


def test_parse_date_accepts_year_month_and_iso():
    assert parse_date("2021-03") == pendulum.datetime(2021, 3, 1)
    assert parse_date("2021-03-15") == pendulum.datetime(2021, 3, 15)
    assert parse_date(None) is None
