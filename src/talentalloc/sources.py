"""Read-only sources of candidate, role and recruiter snapshots."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Protocol, runtime_checkable

from pydantic import BaseModel, ValidationError

from .errors import SnapshotLoadError
from .schemas import CandidateSnapshot, ProjectSummary, Recruiter, RoleRequirement


@runtime_checkable
class CandidateSource(Protocol):
    """Supplies candidate snapshots owned by the surrounding system."""

    def list_candidates(self, candidate_id: str | None = None) -> list[CandidateSnapshot]:
        """Return every candidate, or only the targeted one when given."""


@runtime_checkable
class RoleSource(Protocol):
    """Supplies role requirements and project membership."""

    def get_role(self, role_id: str) -> RoleRequirement | None:
        """Return the role or None when unknown."""

    def get_project(self, project_id: str) -> ProjectSummary | None:
        """Return the project or None when unknown."""

    def list_roles(self, project_id: str) -> list[RoleRequirement]:
        """Return the roles belonging to a project."""


@runtime_checkable
class RecruiterRoster(Protocol):
    """Supplies the recruiter roster."""

    def list_recruiters(self) -> list[Recruiter]:
        """Return every roster entry, active or not."""


@dataclass
class SnapshotRepository:
    """In-memory snapshot of everything the allocation core reads."""

    candidates: list[CandidateSnapshot] = field(default_factory=list)
    roles: list[RoleRequirement] = field(default_factory=list)
    projects: list[ProjectSummary] = field(default_factory=list)
    recruiters: list[Recruiter] = field(default_factory=list)

    def __post_init__(self) -> None:
        known = {project.id for project in self.projects}
        for role in self.roles:
            if role.project_id not in known:
                self.projects.append(ProjectSummary(id=role.project_id))
                known.add(role.project_id)

    def list_candidates(self, candidate_id: str | None = None) -> list[CandidateSnapshot]:
        if candidate_id is None:
            return list(self.candidates)
        return [candidate for candidate in self.candidates if candidate.id == candidate_id]

    def get_role(self, role_id: str) -> RoleRequirement | None:
        return next((role for role in self.roles if role.id == role_id), None)

    def get_project(self, project_id: str) -> ProjectSummary | None:
        return next((project for project in self.projects if project.id == project_id), None)

    def list_roles(self, project_id: str) -> list[RoleRequirement]:
        return [role for role in self.roles if role.project_id == project_id]

    def list_recruiters(self) -> list[Recruiter]:
        return list(self.recruiters)


class SnapshotLoader:
    """Load a JSON snapshot document into a SnapshotRepository.

    The document holds ``candidates``, ``roles``, ``projects`` and
    ``recruiters`` arrays. Invalid records are reported together; the
    valid ones are kept on the raised error.
    """

    _SECTIONS: dict[str, type[BaseModel]] = {
        "candidates": CandidateSnapshot,
        "roles": RoleRequirement,
        "projects": ProjectSummary,
        "recruiters": Recruiter,
    }

    def load(self, path: Path) -> SnapshotRepository:
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid snapshot JSON: {exc}") from exc
        return self.from_mapping(data)

    def from_mapping(self, data: Any) -> SnapshotRepository:
        if not isinstance(data, dict):
            raise ValueError("Snapshot document must be a JSON object")

        errors: list[str] = []
        parsed: dict[str, list[Any]] = {}
        for section, model in self._SECTIONS.items():
            parsed[section] = self._parse_section(section, data.get(section) or [], model, errors)

        repository = SnapshotRepository(**parsed)
        if errors:
            raise SnapshotLoadError(errors, repository)
        return repository

    @staticmethod
    def _parse_section(
        section: str,
        records: Iterable[Any],
        model: type[BaseModel],
        errors: list[str],
    ) -> list[Any]:
        items: list[Any] = []
        seen: set[str] = set()
        for idx, record in enumerate(records):
            try:
                item = model.model_validate(record)
            except ValidationError as exc:
                errors.append(f"{section}[{idx}]: {exc}")
                continue
            if item.id in seen:
                errors.append(f"{section}[{idx}]: duplicate id {item.id!r}")
                continue
            seen.add(item.id)
            items.append(item)
        return items
