"""Years-of-experience evaluation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable

import pendulum
from pendulum.parsing.exceptions import ParserError

from ...schemas import CandidateSnapshot, EmploymentInterval, RoleRequirement
from ..results import FactorResult

DAYS_PER_MONTH = 30.44


@dataclass
class ExperienceConfig:
    """Thresholds for the experience band scoring."""

    default_min_years: float = 0.0
    default_max_years: float = 100.0
    optimal_span_years: float = 5.0
    optimal_score: int = 100
    in_range_score: int = 80
    soft_overage_years: float = 2.0
    soft_overage_score: int = 90
    moderate_overage_years: float = 5.0
    moderate_overage_score: int = 70
    excess_overage_score: int = 40


def parse_date(value: str | None, *, default: pendulum.DateTime | None = None) -> pendulum.DateTime | None:
    """Parse ``YYYY-MM`` or ISO strings, returning ``default`` for blanks."""
    if not value:
        return default
    if len(value) == 7 and value[4] == "-":
        return pendulum.datetime(int(value[:4]), int(value[5:7]), 1)
    parsed = pendulum.parse(value)
    if not isinstance(parsed, pendulum.DateTime):
        if isinstance(parsed, pendulum.Date):
            return pendulum.datetime(parsed.year, parsed.month, parsed.day)
        raise ValueError(f"Unsupported date value: {value!r}")
    return parsed


def interval_months(interval: EmploymentInterval, as_of: pendulum.DateTime) -> int:
    start = parse_date(interval.start)
    if start is None:
        raise ValueError("Employment interval is missing a start date")
    end = parse_date(interval.end, default=as_of)
    days = abs(end.diff(start).in_days())
    return math.floor(days / DAYS_PER_MONTH)


def employment_years(
    intervals: Iterable[EmploymentInterval],
    as_of: pendulum.DateTime,
    *,
    strict: bool = True,
) -> int:
    """Sum whole months over intervals and convert to whole years.

    With ``strict`` disabled, intervals with unparseable dates are skipped.
    """
    total_months = 0
    for interval in intervals:
        try:
            total_months += interval_months(interval, as_of)
        except (ValueError, ParserError):
            if strict:
                raise
    return total_months // 12


def resolve_experience_years(
    candidate: CandidateSnapshot,
    as_of: pendulum.DateTime,
    *,
    strict: bool = True,
) -> float:
    """Explicit years when present and nonzero, otherwise derived from history."""
    if candidate.total_experience_years:
        return candidate.total_experience_years
    if candidate.employment_intervals:
        return employment_years(candidate.employment_intervals, as_of, strict=strict)
    return 0


def resolve_as_of(context: dict[str, Any] | None, now_provider: Any) -> pendulum.DateTime:
    as_of = (context or {}).get("as_of")
    if as_of is None:
        return now_provider()
    if isinstance(as_of, pendulum.DateTime):
        return as_of
    return parse_date(str(as_of)) or now_provider()


def _format_years(value: float) -> str:
    return f"{value:g}"


class ExperienceEvaluator:
    """Score candidate experience against the role's min/max band.

    Falling short of the minimum is a hard gate. Exceeding the maximum also
    fails the gate, but keeps a graded score so overqualified candidates still
    rank below well-fitting ones instead of disappearing.
    """

    factor = "experience"

    def __init__(
        self,
        *,
        config: ExperienceConfig | None = None,
        now_provider: Any | None = None,
    ) -> None:
        self._config = config or ExperienceConfig()
        self._now_provider = now_provider or pendulum.now

    def evaluate(
        self,
        candidate: CandidateSnapshot,
        role: RoleRequirement,
        context: dict[str, Any] | None = None,
    ) -> FactorResult:
        as_of = resolve_as_of(context, self._now_provider)
        years = resolve_experience_years(candidate, as_of)
        min_years = role.min_experience or self._config.default_min_years
        max_years = role.max_experience or self._config.default_max_years
        metadata = {"years": years, "min_years": min_years, "max_years": max_years}

        if years < min_years:
            return FactorResult(
                score=0,
                passes=False,
                reasons=[
                    f"Insufficient experience: {_format_years(years)} years "
                    f"(required: {_format_years(min_years)}+)"
                ],
                missing=[f"Minimum {_format_years(min_years)} years experience required"],
                metadata={**metadata, "band": "below_min"},
            )

        if years > max_years:
            score, band = self._overage_score(years - max_years)
            return FactorResult(
                score=self._clamp(score),
                passes=False,
                reasons=[
                    f"Overqualified: {_format_years(years)} years "
                    f"(max: {_format_years(max_years)})"
                ],
                missing=[f"Maximum {_format_years(max_years)} years experience allowed"],
                metadata={**metadata, "band": band},
            )

        optimal_max = min(max_years, min_years + self._config.optimal_span_years)
        if years <= optimal_max:
            return FactorResult(
                score=self._clamp(self._config.optimal_score),
                reasons=[f"Perfect experience match: {_format_years(years)} years"],
                metadata={**metadata, "band": "optimal"},
            )
        return FactorResult(
            score=self._clamp(self._config.in_range_score),
            reasons=[f"Good experience match: {_format_years(years)} years"],
            metadata={**metadata, "band": "in_range"},
        )

    def _overage_score(self, overage: float) -> tuple[int, str]:
        if overage <= self._config.soft_overage_years:
            return self._config.soft_overage_score, "soft_overage"
        if overage <= self._config.moderate_overage_years:
            return self._config.moderate_overage_score, "moderate_overage"
        return self._config.excess_overage_score, "excess_overage"

    @staticmethod
    def _clamp(score: int) -> int:
        return max(0, min(100, int(score)))
