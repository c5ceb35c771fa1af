"""Neutral pass-through evaluators for factors without criteria yet."""

from __future__ import annotations

from typing import Any

from ...schemas import CandidateSnapshot, RoleRequirement
from ..results import FactorResult


class BaselineEvaluator:
    """Always pass with a neutral score.

    Roles carry no certification or location criteria yet, so these factors
    contribute a fixed midpoint to the composite and never block eligibility.
    """

    factor = "baseline"
    reason = "No criteria configured"

    def __init__(self, *, score: int = 50) -> None:
        self._score = score

    def evaluate(
        self,
        candidate: CandidateSnapshot,
        role: RoleRequirement,
        context: dict[str, Any] | None = None,
    ) -> FactorResult:
        return FactorResult(
            score=self._score,
            passes=True,
            reasons=[self.reason],
            metadata={"status": "neutral_baseline"},
        )


class CertificationsEvaluator(BaselineEvaluator):
    factor = "certifications"
    reason = "No certification criteria configured; neutral score applied"


class LocationEvaluator(BaselineEvaluator):
    factor = "location"
    reason = "No location criteria configured; neutral score applied"
