"""Result types produced by the eligibility engine."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

FACTORS: tuple[str, ...] = ("education", "experience", "skills", "certifications", "location")


@dataclass(slots=True)
class FactorResult:
    """Outcome of a single sub-scorer."""

    score: int
    passes: bool = True
    reasons: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class MatchResult:
    """Composite eligibility outcome for one candidate against one role."""

    passes: bool
    score: int
    per_factor_scores: dict[str, int]
    reasons: list[str] = field(default_factory=list)
    missing_requirements: list[str] = field(default_factory=list)


@dataclass(slots=True)
class EligibilityReport:
    """Debug view pairing a match result with its inputs."""

    candidate_id: str
    role_id: str
    project_id: str
    result: MatchResult
    factors: dict[str, FactorResult]
    generated_at: str


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
