"""Candidate snapshot schema consumed by the eligibility engine."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class QualificationAlias(BaseModel):
    """Alternative spelling registered for a catalog qualification."""

    alias: str

    model_config = ConfigDict(extra="forbid")


class QualificationEquivalency(BaseModel):
    """Declared cross-reference to another catalog qualification."""

    to_qualification: "QualificationCatalogEntry"

    model_config = ConfigDict(extra="forbid")


class QualificationCatalogEntry(BaseModel):
    """Qualification catalog entry with its aliases and equivalencies."""

    id: str | None = None
    name: str
    short_name: str | None = None
    field: str = ""
    level: str = ""
    aliases: list[QualificationAlias] = Field(default_factory=list)
    equivalencies: list[QualificationEquivalency] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class HeldQualification(BaseModel):
    """Qualification held by a candidate."""

    qualification: QualificationCatalogEntry

    model_config = ConfigDict(extra="forbid")


class EmploymentInterval(BaseModel):
    """Employment period; an open end means the job is current."""

    start: str
    end: str | None = None

    model_config = ConfigDict(extra="forbid")


class ProjectEngagement(BaseModel):
    """Existing pipeline row linking a candidate to a project."""

    project_id: str
    role_id: str | None = None
    status: str = "nominated"

    model_config = ConfigDict(extra="forbid")


class CandidateSnapshot(BaseModel):
    """Read-only candidate view used by matching and allocation."""

    id: str
    name: str | None = None
    total_experience_years: float | None = None
    skills: list[str] = Field(default_factory=list)
    qualifications: list[HeldQualification] = Field(default_factory=list)
    employment_intervals: list[EmploymentInterval] = Field(default_factory=list)
    highest_education: str | None = None
    status: str = "new"
    engagements: list[ProjectEngagement] = Field(default_factory=list)
    created_at: str | None = None

    model_config = ConfigDict(extra="allow")

    def is_engaged_with(self, project_id: str, role_id: str) -> bool:
        return any(
            item.project_id == project_id and item.role_id == role_id
            for item in self.engagements
        )


QualificationEquivalency.model_rebuild()
