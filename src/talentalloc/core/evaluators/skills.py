"""Liberal skill matching; contributes to ranking but never blocks."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable

from ...schemas import CandidateSnapshot, RoleRequirement
from ..results import FactorResult, round_half_up


def _default_synonym_groups() -> list[tuple[str, ...]]:
    return [
        ("javascript", "js", "ecmascript"),
        ("react", "reactjs", "react.js"),
        ("node", "nodejs", "node.js"),
        ("sql", "mysql", "postgresql", "database"),
        ("aws", "amazon web services", "cloud"),
        ("docker", "containerization", "containers"),
    ]


def _default_categories() -> dict[str, tuple[str, ...]]:
    return {
        "programming": ("coding", "development", "software"),
        "frontend": ("ui", "ux", "web", "html", "css"),
        "backend": ("server", "api", "database"),
        "medical": ("healthcare", "clinical", "patient"),
        "nursing": ("patient care", "healthcare", "medical"),
    }


@dataclass
class SkillsConfig:
    """Match-strength table and the liberal acceptance threshold."""

    match_threshold: int = 60
    no_requirement_score: int = 50
    exact_score: int = 100
    synonym_score: int = 90
    substring_score: int = 80
    token_score: int = 60
    category_score: int = 40
    synonym_groups: list[tuple[str, ...]] = field(default_factory=_default_synonym_groups)
    categories: dict[str, tuple[str, ...]] = field(default_factory=_default_categories)


class SkillsEvaluator:
    """Average best-match strength over every required skill."""

    factor = "skills"

    def __init__(self, *, config: SkillsConfig | None = None) -> None:
        self._config = config or SkillsConfig()
        self._groups = [
            frozenset(term.lower() for term in group) for group in self._config.synonym_groups
        ]
        self._category_patterns = [
            re.compile(
                r"\b(?:" + "|".join(re.escape(term.lower()) for term in (category, *members)) + r")\b"
            )
            for category, members in self._config.categories.items()
        ]

    def evaluate(
        self,
        candidate: CandidateSnapshot,
        role: RoleRequirement,
        context: dict[str, Any] | None = None,
    ) -> FactorResult:
        required_skills = [skill for skill in role.all_skills if skill and skill.strip()]
        if not required_skills:
            return FactorResult(
                score=self._config.no_requirement_score,
                reasons=["No specific skills requirements"],
                metadata={"status": "not_specified"},
            )

        matching: list[str] = []
        missing: list[str] = []
        best_scores: dict[str, int] = {}
        totals: list[int] = []

        for required in required_skills:
            best = self.best_match(required, candidate.skills)
            best_scores[required] = best
            totals.append(best)
            if best >= self._config.match_threshold:
                matching.append(required)
            else:
                missing.append(required)

        score = round_half_up(sum(totals) / len(totals))

        reasons: list[str] = []
        if matching:
            reasons.append(f"Matching skills: {', '.join(matching)}")
        if missing:
            reasons.append(f"Missing skills: {', '.join(missing)}")

        return FactorResult(
            score=max(0, min(100, score)),
            passes=True,
            reasons=reasons,
            missing=[f"Skill: {skill}" for skill in missing],
            metadata={"best_scores": best_scores, "matched": matching},
        )

    def best_match(self, required: str, candidate_skills: Iterable[str]) -> int:
        best = 0
        for skill in candidate_skills:
            if not skill:
                continue
            best = max(best, self.match_strength(skill, required))
            if best >= self._config.exact_score:
                break
        return best

    def match_strength(self, candidate_skill: str, required_skill: str) -> int:
        candidate = candidate_skill.strip().lower()
        required = required_skill.strip().lower()
        if not candidate or not required:
            return 0

        if candidate == required:
            return self._config.exact_score
        if any(candidate in group and required in group for group in self._groups):
            return self._config.synonym_score
        if candidate in required or required in candidate:
            return self._config.substring_score
        if set(candidate.split()) & set(required.split()):
            return self._config.token_score
        if self._share_category(candidate, required):
            return self._config.category_score
        return 0

    def _share_category(self, candidate: str, required: str) -> bool:
        """Both phrases mention a term of one category as a whole word or phrase."""
        return any(
            pattern.search(candidate) and pattern.search(required)
            for pattern in self._category_patterns
        )
