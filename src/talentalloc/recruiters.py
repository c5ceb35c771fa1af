"""Recruiter pool reader."""

from __future__ import annotations

from typing import Iterable

from .schemas import RecruiterInfo
from .sources import RecruiterRoster
from .storage import AssignmentRepository

DEFAULT_WORKLOAD_STATUSES: tuple[str, ...] = ("nominated",)


class RecruiterPoolReader:
    """Active recruiters ordered by id, with their open workload."""

    def __init__(
        self,
        *,
        roster: RecruiterRoster,
        assignments: AssignmentRepository,
        workload_statuses: Iterable[str] | None = None,
    ) -> None:
        self._roster = roster
        self._assignments = assignments
        self._workload_statuses = tuple(workload_statuses or DEFAULT_WORKLOAD_STATUSES)

    def read(self) -> list[RecruiterInfo]:
        active = [recruiter for recruiter in self._roster.list_recruiters() if recruiter.active]
        if not active:
            return []
        workload = self._assignments.open_workload(self._workload_statuses)
        return [
            RecruiterInfo(
                id=recruiter.id,
                name=recruiter.name,
                current_open_workload=workload.get(recruiter.id, 0),
            )
            for recruiter in sorted(active, key=lambda item: item.id)
        ]

    def get(self, recruiter_id: str) -> RecruiterInfo | None:
        return next((info for info in self.read() if info.id == recruiter_id), None)
