"""Candidate matching pipeline: filter, score and rank candidates for a role."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

import pendulum
import structlog

from .core import EligibilityEngine, LegacyScorer
from .core.evaluators.experience import resolve_experience_years
from .errors import RoleNotFoundError
from .schemas import CandidateSnapshot, RoleRequirement
from .sources import CandidateSource, RoleSource

DEFAULT_OPEN_STATUSES: tuple[str, ...] = ("new", "shortlisted", "active")
DEFAULT_COMMITTED_STATUSES: tuple[str, ...] = ("selected", "processing", "hired")


@dataclass(slots=True)
class MatchedCandidate:
    """Ranked candidate ready for allocation."""

    candidate_id: str
    score: int
    match_reasons: list[str] = field(default_factory=list)
    fallback: bool = False


@dataclass(slots=True)
class MatchingRun:
    """Ranked matches plus per-candidate scoring failures."""

    role: RoleRequirement
    matches: list[MatchedCandidate]
    errors: list[str] = field(default_factory=list)
    evaluated: int = 0


def tier_label(score: int) -> str:
    if score >= 80:
        return "Strong match for role requirements"
    if score >= 60:
        return "Good match for role requirements"
    if score >= 40:
        return "Acceptable match for role requirements"
    return "Basic match for role requirements"


class CandidateMatchingPipeline:
    """Find the candidates eligible for a role, best first."""

    def __init__(
        self,
        *,
        candidates: CandidateSource,
        roles: RoleSource,
        engine: EligibilityEngine | None = None,
        legacy: LegacyScorer | None = None,
        open_statuses: Iterable[str] | None = None,
        committed_statuses: Iterable[str] | None = None,
    ) -> None:
        self._candidates = candidates
        self._roles = roles
        self._engine = engine or EligibilityEngine()
        self._legacy = legacy or LegacyScorer()
        self._open_statuses = frozenset(open_statuses or DEFAULT_OPEN_STATUSES)
        self._committed_statuses = frozenset(committed_statuses or DEFAULT_COMMITTED_STATUSES)
        self._logger = structlog.get_logger(__name__)

    def find_eligible(
        self,
        role_id: str,
        project_id: str,
        candidate_id: str | None = None,
        *,
        context: dict[str, Any] | None = None,
    ) -> list[MatchedCandidate]:
        return self.run(role_id, project_id, candidate_id, context=context).matches

    def run(
        self,
        role_id: str,
        project_id: str,
        candidate_id: str | None = None,
        *,
        context: dict[str, Any] | None = None,
    ) -> MatchingRun:
        role = self.resolve_role(role_id, project_id)
        pool = [
            candidate
            for candidate in self._candidates.list_candidates(candidate_id)
            if self.is_available(candidate, project_id, role_id)
        ]
        self._logger.debug(
            "matching.candidates_loaded",
            role_id=role_id,
            project_id=project_id,
            candidate_count=len(pool),
        )

        matches: list[MatchedCandidate] = []
        errors: list[str] = []
        for candidate in pool:
            try:
                matched = self._score_candidate(candidate, role, context)
            except Exception as exc:  # noqa: BLE001
                errors.append(f"Failed to score candidate {candidate.id}: {exc}")
                self._logger.error(
                    "matching.scoring_failed",
                    candidate_id=candidate.id,
                    role_id=role_id,
                    error=str(exc),
                )
                continue
            if matched.score > 0:
                matches.append(matched)

        # Stable sort: equal scores keep the source order.
        matches.sort(key=lambda item: item.score, reverse=True)

        self._logger.info(
            "matching.completed",
            role_id=role_id,
            project_id=project_id,
            evaluated=len(pool),
            matched=len(matches),
            errors=len(errors),
        )
        return MatchingRun(role=role, matches=matches, errors=errors, evaluated=len(pool))

    def resolve_role(self, role_id: str, project_id: str) -> RoleRequirement:
        role = self._roles.get_role(role_id)
        if role is None:
            raise RoleNotFoundError(role_id)
        if role.project_id != project_id:
            raise RoleNotFoundError(role_id, project_id)
        return role

    def is_available(self, candidate: CandidateSnapshot, project_id: str, role_id: str) -> bool:
        """Not engaged with this (project, role), open, and not committed anywhere."""
        if candidate.is_engaged_with(project_id, role_id):
            return False
        if candidate.status not in self._open_statuses:
            return False
        return not any(
            engagement.status in self._committed_statuses for engagement in candidate.engagements
        )

    def _score_candidate(
        self,
        candidate: CandidateSnapshot,
        role: RoleRequirement,
        context: dict[str, Any] | None,
    ) -> MatchedCandidate:
        try:
            result = self._engine.score(candidate, role, context)
        except Exception as exc:  # noqa: BLE001
            self._logger.warning(
                "matching.fallback",
                candidate_id=candidate.id,
                role_id=role.id,
                error=str(exc),
            )
            score = self._legacy.score(candidate, role, context)
            as_of = self._legacy.as_of(context)
            return MatchedCandidate(
                candidate_id=candidate.id,
                score=score,
                match_reasons=self._legacy_reasons(candidate, role, score, as_of),
                fallback=True,
            )
        return MatchedCandidate(
            candidate_id=candidate.id,
            score=result.score,
            match_reasons=[tier_label(result.score), *result.reasons],
        )

    @staticmethod
    def _legacy_reasons(
        candidate: CandidateSnapshot,
        role: RoleRequirement,
        score: int,
        as_of: pendulum.DateTime,
    ) -> list[str]:
        reasons = [tier_label(score)]
        years = resolve_experience_years(candidate, as_of, strict=False)
        min_years = role.min_experience or 0
        max_years = role.max_experience or 100
        if min_years <= years <= max_years:
            reasons.append(f"Experience matches requirement ({years:g} years)")
        return reasons
