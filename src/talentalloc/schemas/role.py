"""Role requirement and project schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .candidate import QualificationCatalogEntry


class RequiredQualification(BaseModel):
    """Qualification demanded by a role, either mandatory or preferred."""

    qualification: QualificationCatalogEntry
    mandatory: bool = True

    model_config = ConfigDict(extra="forbid")


class RoleRequirement(BaseModel):
    """Open role of a project with its hiring criteria."""

    id: str
    project_id: str
    designation: str | None = None
    min_experience: float | None = None
    max_experience: float | None = None
    required_qualifications: list[RequiredQualification] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    technical_skills: list[str] = Field(default_factory=list)
    is_open: bool = True

    model_config = ConfigDict(extra="allow")

    @property
    def all_skills(self) -> list[str]:
        return [*self.skills, *self.technical_skills]


class ProjectSummary(BaseModel):
    """Minimal project descriptor."""

    id: str
    title: str | None = None

    model_config = ConfigDict(extra="allow")
