from __future__ import annotations

from typing import Any

import pytest

from talentalloc.core import EligibilityEngine, FactorResult
from talentalloc.schemas import CandidateSnapshot, RoleRequirement

AS_OF = {"as_of": "2024-06"}


class StubEvaluator:
    def __init__(self, factor: str, result: FactorResult):
        self.factor = factor
        self._result = result
        self.calls: list[tuple[CandidateSnapshot, RoleRequirement, dict[str, Any] | None]] = []

    def evaluate(self, candidate, role, context=None) -> FactorResult:
        self.calls.append((candidate, role, context))
        return self._result


def build_candidate(**kwargs: Any) -> CandidateSnapshot:
    defaults: dict[str, Any] = {
        "id": "C-001",
        "total_experience_years": 4,
        "skills": ["Patient Care", "IV Therapy"],
        "qualifications": [{"qualification": {"name": "BSc Nursing"}}],
    }
    defaults.update(kwargs)
    return CandidateSnapshot(**defaults)


def build_role(**kwargs: Any) -> RoleRequirement:
    defaults: dict[str, Any] = {
        "id": "R-001",
        "project_id": "P-001",
        "min_experience": 2,
        "max_experience": 10,
        "skills": ["Patient Care"],
        "technical_skills": ["IV Therapy"],
        "required_qualifications": [
            {
                "qualification": {
                    "name": "Bachelor of Science in Nursing",
                    "short_name": "BSc Nursing",
                }
            }
        ],
    }
    defaults.update(kwargs)
    return RoleRequirement(**defaults)


def test_fully_qualified_candidate_passes_with_high_score():
    result = EligibilityEngine().score(build_candidate(), build_role(), AS_OF)

    assert result.passes is True
    assert result.score >= 90
    assert result.per_factor_scores == {
        "education": 100,
        "experience": 100,
        "skills": 100,
        "certifications": 50,
        "location": 50,
    }
    assert result.missing_requirements == []


def test_composite_is_weighted_sum_rounded():
    candidate = build_candidate(
        qualifications=[{"qualification": {"name": "Undergraduate Nursing", "short_name": "BSN"}}]
    )
    role = build_role(
        required_qualifications=[
            {"qualification": {"name": "Bachelor of Science in Nursing", "short_name": "BSN"}}
        ]
    )

    result = EligibilityEngine().score(candidate, role, AS_OF)

    assert result.per_factor_scores["education"] == 95
    # 95*0.35 + 100*0.30 + 100*0.20 + 50*0.10 + 50*0.05 = 90.75
    assert result.score == 91


def test_insufficient_experience_fails_the_gate():
    result = EligibilityEngine().score(build_candidate(total_experience_years=1), build_role(), AS_OF)

    assert result.passes is False
    assert result.per_factor_scores["experience"] == 0
    assert result.missing_requirements == ["Minimum 2 years experience required"]


def test_overqualified_candidate_fails_but_keeps_partial_score():
    result = EligibilityEngine().score(build_candidate(total_experience_years=11), build_role(), AS_OF)

    assert result.passes is False
    assert result.per_factor_scores["experience"] == 90
    assert result.score > 0


def test_only_gate_factors_contribute_missing_requirements():
    education = StubEvaluator(
        "education", FactorResult(score=80, passes=False, missing=["Required: Midwifery Licence"])
    )
    experience = StubEvaluator("experience", FactorResult(score=100))
    skills = StubEvaluator("skills", FactorResult(score=0, missing=["Skill: Triage"]))
    engine = EligibilityEngine([education, experience, skills])

    result = engine.score(build_candidate(), build_role(), AS_OF)

    assert result.passes is False
    assert result.missing_requirements == ["Required: Midwifery Licence"]
    assert result.score == 58
    assert result.per_factor_scores["certifications"] == 0
    assert education.calls[0][2] == AS_OF


def test_failing_skills_never_block_eligibility():
    result = EligibilityEngine().score(build_candidate(skills=[]), build_role(), AS_OF)

    assert result.passes is True
    assert result.per_factor_scores["skills"] == 0


def test_weight_overrides_are_applied():
    engine = EligibilityEngine(
        weights={"education": 1.0, "experience": 0.0, "skills": 0.0, "certifications": 0.0, "location": 0.0}
    )

    result = engine.score(build_candidate(total_experience_years=1), build_role(), AS_OF)

    assert result.score == 100
    assert engine.weights["education"] == 1.0


def test_duplicate_factors_are_rejected():
    with pytest.raises(ValueError):
        EligibilityEngine(
            [
                StubEvaluator("education", FactorResult(score=1)),
                StubEvaluator("education", FactorResult(score=2)),
            ]
        )


def test_report_includes_factor_breakdown():
    report = EligibilityEngine().report(build_candidate(), build_role(), AS_OF)

    assert report.candidate_id == "C-001"
    assert report.project_id == "P-001"
    assert set(report.factors) == {"education", "experience", "skills", "certifications", "location"}
    assert report.factors["education"].metadata["matches"]
    assert report.generated_at
