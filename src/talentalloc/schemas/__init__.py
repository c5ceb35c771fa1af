"""Pydantic schema definitions for candidate, role and recruiter snapshots."""

from __future__ import annotations

from .candidate import (
    CandidateSnapshot,
    EmploymentInterval,
    HeldQualification,
    ProjectEngagement,
    QualificationAlias,
    QualificationCatalogEntry,
    QualificationEquivalency,
)
from .recruiter import Recruiter, RecruiterInfo
from .role import ProjectSummary, RequiredQualification, RoleRequirement

__all__ = [
    "CandidateSnapshot",
    "EmploymentInterval",
    "HeldQualification",
    "ProjectEngagement",
    "QualificationAlias",
    "QualificationCatalogEntry",
    "QualificationEquivalency",
    "ProjectSummary",
    "Recruiter",
    "RecruiterInfo",
    "RequiredQualification",
    "RoleRequirement",
]
