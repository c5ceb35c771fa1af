"""Eligibility scoring engine components."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ..schemas import CandidateSnapshot, RoleRequirement
from .eligibility import EligibilityEngine
from .evaluators import (
    CertificationsEvaluator,
    EducationEvaluator,
    ExperienceEvaluator,
    LocationEvaluator,
    SkillsEvaluator,
)
from .legacy import LegacyScorer
from .results import EligibilityReport, FactorResult, MatchResult


@runtime_checkable
class Evaluator(Protocol):
    """Sub-scorer contract for a single eligibility factor."""

    factor: str

    def evaluate(
        self,
        candidate: CandidateSnapshot,
        role: RoleRequirement,
        context: dict[str, Any] | None = None,
    ) -> FactorResult:
        """Return the factor outcome for a candidate against a role."""


__all__ = [
    "Evaluator",
    "EligibilityEngine",
    "EligibilityReport",
    "FactorResult",
    "MatchResult",
    "LegacyScorer",
    "EducationEvaluator",
    "ExperienceEvaluator",
    "SkillsEvaluator",
    "CertificationsEvaluator",
    "LocationEvaluator",
]
