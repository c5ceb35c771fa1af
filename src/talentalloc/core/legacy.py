"""Coarse three-factor scorer used when the full engine fails."""

from __future__ import annotations

from typing import Any

import pendulum

from ..schemas import CandidateSnapshot, RoleRequirement
from .evaluators.education import EducationEvaluator, contains_either
from .evaluators.experience import resolve_as_of, resolve_experience_years
from .results import round_half_up


class LegacyScorer:
    """Education presence, experience range fit and skill overlap."""

    WEIGHTS: dict[str, float] = {"education": 0.40, "experience": 0.35, "skills": 0.25}

    def __init__(
        self,
        *,
        education: EducationEvaluator | None = None,
        now_provider: Any | None = None,
    ) -> None:
        self._education = education or EducationEvaluator()
        self._now_provider = now_provider or pendulum.now

    def score(
        self,
        candidate: CandidateSnapshot,
        role: RoleRequirement,
        context: dict[str, Any] | None = None,
    ) -> int:
        as_of = self.as_of(context)
        factors = {
            "education": self.education_score(candidate, role),
            "experience": self.experience_score(candidate, role, as_of),
            "skills": self.skills_score(candidate, role),
        }
        total = 0.0
        weight_sum = 0.0
        for name, value in factors.items():
            if value > 0:
                total += value * self.WEIGHTS[name]
                weight_sum += self.WEIGHTS[name]
        if weight_sum == 0:
            return 0
        return round_half_up(total / weight_sum)

    def as_of(self, context: dict[str, Any] | None = None) -> pendulum.DateTime:
        return resolve_as_of(context, self._now_provider)

    def education_score(self, candidate: CandidateSnapshot, role: RoleRequirement) -> int:
        text = self._education_text(candidate)
        if not text or not role.required_qualifications:
            return 50

        best = 0
        for requirement in role.required_qualifications:
            qualification = requirement.qualification
            if _within(qualification.name, text) or _within(qualification.short_name, text):
                best = max(best, 100)
                continue
            if any(_within(alias.alias, text) for alias in qualification.aliases):
                best = max(best, 90)
            if any(
                _within(item.to_qualification.name, text)
                or _within(item.to_qualification.short_name, text)
                for item in qualification.equivalencies
            ):
                best = max(best, 85)
            if self._education.heuristic_match(text, qualification):
                best = max(best, 70)
        return best

    @staticmethod
    def experience_score(
        candidate: CandidateSnapshot,
        role: RoleRequirement,
        as_of: pendulum.DateTime,
    ) -> int:
        years = resolve_experience_years(candidate, as_of, strict=False)
        min_years = role.min_experience or 0
        max_years = role.max_experience or 100
        if min_years <= years <= max_years:
            return 100
        if min_years - 1 <= years <= max_years + 1:
            return 80
        if min_years - 2 <= years <= max_years + 2:
            return 60
        return 20

    @staticmethod
    def skills_score(candidate: CandidateSnapshot, role: RoleRequirement) -> int:
        role_skills = [skill for skill in role.all_skills if skill]
        candidate_skills = [skill for skill in candidate.skills if skill]
        if not role_skills:
            return 50
        matching = [
            skill
            for skill in candidate_skills
            if any(contains_either(skill, required) for required in role_skills)
        ]
        return min(100, round_half_up(len(matching) / len(role_skills) * 100))

    @staticmethod
    def _education_text(candidate: CandidateSnapshot) -> str:
        if candidate.highest_education:
            return candidate.highest_education.lower()
        names = [item.qualification.name for item in candidate.qualifications if item.qualification.name]
        return " | ".join(names).lower()


def _within(needle: str | None, haystack: str) -> bool:
    if not needle or not needle.strip():
        return False
    return needle.strip().lower() in haystack
