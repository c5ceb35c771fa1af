"""Exception types raised by the allocation core."""

from __future__ import annotations

from typing import Any


class AllocationError(Exception):
    """Base class for allocation core failures."""


class NoRecruitersAvailableError(AllocationError, ValueError):
    """Raised when an allocation is requested against an empty recruiter pool."""

    def __init__(self, message: str = "No recruiters available for allocation") -> None:
        super().__init__(message)


class RoleNotFoundError(AllocationError, LookupError):
    """Raised when a role id is unknown or does not belong to the project."""

    def __init__(self, role_id: str, project_id: str | None = None) -> None:
        self.role_id = role_id
        self.project_id = project_id
        if project_id is None:
            message = f"Role {role_id} not found"
        else:
            message = f"Role {role_id} not found in project {project_id}"
        super().__init__(message)


class ProjectNotFoundError(AllocationError, LookupError):
    """Raised when a project id is unknown."""

    def __init__(self, project_id: str) -> None:
        self.project_id = project_id
        super().__init__(f"Project {project_id} not found")


class RecruiterNotFoundError(AllocationError, LookupError):
    """Raised when a recruiter id is not part of the roster."""

    def __init__(self, recruiter_id: str) -> None:
        self.recruiter_id = recruiter_id
        super().__init__(f"Recruiter {recruiter_id} not found")


class DuplicateAssignmentError(AllocationError):
    """Raised when an assignment already exists for (candidate, project, role).

    This is expected contention between concurrent allocation runs, not a bug.
    """

    def __init__(self, candidate_id: str, project_id: str, role_id: str) -> None:
        self.candidate_id = candidate_id
        self.project_id = project_id
        self.role_id = role_id
        super().__init__(
            f"Candidate {candidate_id} is already assigned for project {project_id}, role {role_id}"
        )


class SnapshotLoadError(AllocationError, ValueError):
    """Raised when snapshot loading encounters invalid records."""

    def __init__(self, errors: list[str], partial: Any):
        super().__init__("Snapshot loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Snapshot loading failed: {self.errors}"
