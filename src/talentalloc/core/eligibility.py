"""Eligibility engine combining the weighted sub-scorers."""

from __future__ import annotations

from typing import Any, Iterable

import pendulum

from ..schemas import CandidateSnapshot, RoleRequirement
from .evaluators import (
    CertificationsEvaluator,
    EducationEvaluator,
    ExperienceEvaluator,
    LocationEvaluator,
    SkillsEvaluator,
)
from .results import FACTORS, EligibilityReport, FactorResult, MatchResult, round_half_up


def default_evaluators() -> list[Any]:
    return [
        EducationEvaluator(),
        ExperienceEvaluator(),
        SkillsEvaluator(),
        CertificationsEvaluator(),
        LocationEvaluator(),
    ]


class EligibilityEngine:
    """Scores one candidate against one role.

    The composite score is the weighted sum of the factor scores. Only the
    gate factors decide ``passes``; the remaining factors shape ranking only.
    """

    DEFAULT_WEIGHTS: dict[str, float] = {
        "education": 0.35,
        "experience": 0.30,
        "skills": 0.20,
        "certifications": 0.10,
        "location": 0.05,
    }

    GATE_FACTORS: tuple[str, ...] = ("education", "experience")

    def __init__(
        self,
        evaluators: Iterable[Any] | None = None,
        *,
        weights: dict[str, float] | None = None,
    ) -> None:
        self._evaluators = list(evaluators) if evaluators is not None else default_evaluators()
        self._weights = self.DEFAULT_WEIGHTS.copy()
        if weights:
            self._weights.update(weights)
        factors = [getattr(evaluator, "factor", None) for evaluator in self._evaluators]
        if None in factors:
            raise ValueError("Every evaluator must declare a 'factor'.")
        if len(set(factors)) != len(factors):
            raise ValueError(f"Duplicate evaluator factors: {factors}")

    @property
    def weights(self) -> dict[str, float]:
        return dict(self._weights)

    def score(
        self,
        candidate: CandidateSnapshot,
        role: RoleRequirement,
        context: dict[str, Any] | None = None,
    ) -> MatchResult:
        result, _ = self._evaluate(candidate, role, context)
        return result

    def report(
        self,
        candidate: CandidateSnapshot,
        role: RoleRequirement,
        context: dict[str, Any] | None = None,
    ) -> EligibilityReport:
        result, factors = self._evaluate(candidate, role, context)
        return EligibilityReport(
            candidate_id=candidate.id,
            role_id=role.id,
            project_id=role.project_id,
            result=result,
            factors=factors,
            generated_at=pendulum.now("UTC").to_iso8601_string(),
        )

    def _evaluate(
        self,
        candidate: CandidateSnapshot,
        role: RoleRequirement,
        context: dict[str, Any] | None,
    ) -> tuple[MatchResult, dict[str, FactorResult]]:
        factors: dict[str, FactorResult] = {}
        for evaluator in self._evaluators:
            factors[evaluator.factor] = evaluator.evaluate(candidate, role, context)

        weighted = sum(
            factors[name].score * weight
            for name, weight in self._weights.items()
            if name in factors
        )
        composite = max(0, min(100, round_half_up(weighted)))

        passes = all(
            factors[name].passes for name in self.GATE_FACTORS if name in factors
        )

        reasons: list[str] = []
        missing: list[str] = []
        for name, factor in factors.items():
            reasons.extend(factor.reasons)
            if name in self.GATE_FACTORS and not factor.passes:
                missing.extend(factor.missing)

        per_factor = {name: factors[name].score if name in factors else 0 for name in FACTORS}
        for name, factor in factors.items():
            per_factor.setdefault(name, factor.score)

        result = MatchResult(
            passes=passes,
            score=composite,
            per_factor_scores=per_factor,
            reasons=reasons,
            missing_requirements=missing,
        )
        return result, factors
