"""Education requirement matching."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from ...schemas import (
    CandidateSnapshot,
    QualificationCatalogEntry,
    RequiredQualification,
    RoleRequirement,
)
from ..results import FactorResult


def _default_field_synonyms() -> dict[str, tuple[str, ...]]:
    return {
        "nursing": ("nursing",),
        "medicine": ("medical", "medicine"),
        "engineering": ("engineering",),
    }


def _default_level_synonyms() -> dict[str, tuple[str, ...]]:
    return {
        "bachelor": ("bachelor", "bsc"),
        "master": ("master", "msc"),
        "doctorate": ("doctorate", "phd"),
    }


@dataclass
class EducationConfig:
    """Scores awarded by each rung of the qualification matching ladder."""

    direct_score: int = 100
    short_name_score: int = 95
    alias_score: int = 90
    equivalency_score: int = 85
    heuristic_score: int = 70
    no_requirement_score: int = 50
    field_synonyms: dict[str, tuple[str, ...]] = field(default_factory=_default_field_synonyms)
    level_synonyms: dict[str, tuple[str, ...]] = field(default_factory=_default_level_synonyms)


def contains_either(left: str | None, right: str | None) -> bool:
    """Case-insensitive containment in either direction; blanks never match."""
    if not left or not right:
        return False
    a = left.strip().lower()
    b = right.strip().lower()
    if not a or not b:
        return False
    return a in b or b in a


class EducationEvaluator:
    """Match held qualifications against a role's required qualifications.

    Each requirement is resolved with a strict priority ladder: the first rung
    that any held qualification satisfies decides the score for that
    requirement, so a weaker rung can never override a stronger one.
    """

    factor = "education"

    def __init__(self, *, config: EducationConfig | None = None) -> None:
        self._config = config or EducationConfig()
        self._ladder: list[tuple[str, int, Callable[[QualificationCatalogEntry, QualificationCatalogEntry], bool]]] = [
            ("name", self._config.direct_score, self._name_match),
            ("short_name", self._config.short_name_score, self._short_name_match),
            ("alias", self._config.alias_score, self._alias_match),
            ("equivalency", self._config.equivalency_score, self._equivalency_match),
            ("heuristic", self._config.heuristic_score, self._heuristic_match),
        ]

    def evaluate(
        self,
        candidate: CandidateSnapshot,
        role: RoleRequirement,
        context: dict[str, Any] | None = None,
    ) -> FactorResult:
        requirements = role.required_qualifications
        if not requirements:
            return FactorResult(
                score=self._config.no_requirement_score,
                passes=True,
                reasons=["No specific education requirements"],
                metadata={"status": "not_specified"},
            )

        held = [item.qualification for item in candidate.qualifications]
        best_score = 0
        reasons: list[str] = []
        missing: list[str] = []
        matches: dict[str, dict[str, Any]] = {}

        for requirement in requirements:
            hit = self.match_requirement(requirement.qualification, held)
            if hit is None:
                missing.append(self._missing_label(requirement))
                continue
            rule, score, held_name = hit
            best_score = max(best_score, score)
            matches[requirement.qualification.name] = {
                "rule": rule,
                "score": score,
                "held": held_name,
            }
            reasons.append(
                f"Education match: {requirement.qualification.name} via {held_name} ({score}% match)"
            )

        if best_score == 0:
            return FactorResult(
                score=0,
                passes=False,
                reasons=["No matching education qualifications found"],
                missing=missing,
                metadata={"matches": matches},
            )

        return FactorResult(
            score=best_score,
            passes=True,
            reasons=reasons,
            missing=missing,
            metadata={"matches": matches},
        )

    def match_requirement(
        self,
        required: QualificationCatalogEntry,
        held: Sequence[QualificationCatalogEntry],
    ) -> tuple[str, int, str] | None:
        """Return (rule, score, held name) for the strongest rung hit, if any."""
        for rule, score, predicate in self._ladder:
            for qualification in held:
                if predicate(qualification, required):
                    return rule, score, qualification.name
        return None

    @staticmethod
    def _name_match(held: QualificationCatalogEntry, required: QualificationCatalogEntry) -> bool:
        if contains_either(held.name, required.name):
            return True
        # Held qualifications are often recorded under the catalog short form.
        if held.name and required.short_name:
            return held.name.strip().lower() == required.short_name.strip().lower()
        return False

    @staticmethod
    def _short_name_match(held: QualificationCatalogEntry, required: QualificationCatalogEntry) -> bool:
        return contains_either(held.short_name, required.short_name)

    @staticmethod
    def _alias_match(held: QualificationCatalogEntry, required: QualificationCatalogEntry) -> bool:
        return any(contains_either(held.name, alias.alias) for alias in required.aliases)

    @staticmethod
    def _equivalency_match(held: QualificationCatalogEntry, required: QualificationCatalogEntry) -> bool:
        for equivalency in required.equivalencies:
            target = equivalency.to_qualification
            if contains_either(held.name, target.name):
                return True
            if contains_either(held.name, target.short_name):
                return True
        return False

    def _heuristic_match(self, held: QualificationCatalogEntry, required: QualificationCatalogEntry) -> bool:
        return self.heuristic_match(held.name, required)

    def heuristic_match(self, education_text: str, required: QualificationCatalogEntry) -> bool:
        """Field and level keywords must both appear in the education text."""
        text = (education_text or "").lower()
        field_kw = (required.field or "").strip().lower()
        level_kw = (required.level or "").strip().lower()
        if not text or not field_kw or not level_kw:
            return False

        has_field = field_kw in text or any(
            key in field_kw and any(word in text for word in words)
            for key, words in self._config.field_synonyms.items()
        )
        has_level = level_kw in text or any(
            key == level_kw and any(word in text for word in words)
            for key, words in self._config.level_synonyms.items()
        )
        return has_field and has_level

    @staticmethod
    def _missing_label(requirement: RequiredQualification) -> str:
        prefix = "Required" if requirement.mandatory else "Preferred"
        return f"{prefix}: {requirement.qualification.name}"
