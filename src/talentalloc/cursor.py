"""Fair round-robin recruiter selection backed by a persistent cursor."""

from __future__ import annotations

from typing import Sequence, TypeVar

import structlog

from .errors import NoRecruitersAvailableError
from .storage import CursorRepository

T = TypeVar("T")


class RoundRobinCursor:
    """Cycle through an ordered recruiter list per (project, role).

    Only the index is persisted. The caller supplies the ordering on every
    call, so it must be stable (recruiter id order) for the cycle to be fair.
    """

    def __init__(self, cursors: CursorRepository) -> None:
        self._cursors = cursors
        self._logger = structlog.get_logger(__name__)

    def next_recruiter(self, project_id: str, role_id: str, ordered_recruiters: Sequence[T]) -> T:
        if not ordered_recruiters:
            raise NoRecruitersAvailableError()
        index = self._cursors.advance(project_id, role_id, len(ordered_recruiters))
        recruiter = ordered_recruiters[index]
        self._logger.debug(
            "cursor.advanced",
            project_id=project_id,
            role_id=role_id,
            index=index,
            pool_size=len(ordered_recruiters),
        )
        return recruiter

    def reset(self, project_id: str, role_id: str) -> None:
        self._cursors.reset(project_id, role_id)
        self._logger.info("cursor.reset", project_id=project_id, role_id=role_id)

    def position(self, project_id: str, role_id: str) -> int | None:
        return self._cursors.peek(project_id, role_id)
