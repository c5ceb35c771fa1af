"""
Repositories over the allocation tables.

Responsibilities:
- Atomic cursor advancement and reset.
- Assignment inserts, translating uniqueness violations.
- Outbox appends.

Repositories do not encode allocation decisions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import DuplicateAssignmentError
from .database import AllocationCursor, CandidateAssignment, Database, OutboxEvent, utcnow

UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """Distinguish uniqueness violations from other integrity failures."""
    original = exc.orig
    code = getattr(original, "pgcode", None) or getattr(original, "sqlstate", None)
    if code is not None:
        return code == UNIQUE_VIOLATION_SQLSTATE
    message = str(original).lower()
    return "unique" in message or "duplicate" in message


class CursorRepository:
    """Persistent round-robin cursors keyed by (project, role)."""

    def __init__(self, database: Database) -> None:
        self._database = database

    def advance(self, project_id: str, role_id: str, pool_size: int) -> int:
        """Move the cursor one step modulo ``pool_size`` and return the new index.

        The increment is a single UPDATE ... RETURNING statement, so the
        database serializes concurrent callers on the row.
        """
        if pool_size <= 0:
            raise ValueError("pool_size must be positive")

        with self._database.session_scope() as session:
            index = self._increment(session, project_id, role_id, pool_size)
        if index is not None:
            return index

        self._ensure_row(project_id, role_id)
        with self._database.session_scope() as session:
            index = self._increment(session, project_id, role_id, pool_size)
        if index is None:
            raise RuntimeError(f"Cursor row for {project_id}/{role_id} vanished during advance")
        return index

    def reset(self, project_id: str, role_id: str) -> None:
        """Force the cursor back to index 0, creating it when absent."""
        with self._database.session_scope() as session:
            updated = self._set_index(session, project_id, role_id, 0)
        if updated:
            return
        if self._ensure_row(project_id, role_id):
            return
        with self._database.session_scope() as session:
            self._set_index(session, project_id, role_id, 0)

    def peek(self, project_id: str, role_id: str) -> int | None:
        with self._database.session_scope() as session:
            return session.execute(
                select(AllocationCursor.last_index).where(
                    AllocationCursor.project_id == project_id,
                    AllocationCursor.role_id == role_id,
                )
            ).scalar_one_or_none()

    @staticmethod
    def _increment(session: Session, project_id: str, role_id: str, pool_size: int) -> int | None:
        statement = (
            update(AllocationCursor)
            .where(
                AllocationCursor.project_id == project_id,
                AllocationCursor.role_id == role_id,
            )
            .values(
                last_index=(AllocationCursor.last_index + 1) % pool_size,
                updated_at=utcnow(),
            )
            .returning(AllocationCursor.last_index)
            .execution_options(synchronize_session=False)
        )
        return session.execute(statement).scalar_one_or_none()

    @staticmethod
    def _set_index(session: Session, project_id: str, role_id: str, index: int) -> bool:
        statement = (
            update(AllocationCursor)
            .where(
                AllocationCursor.project_id == project_id,
                AllocationCursor.role_id == role_id,
            )
            .values(last_index=index, updated_at=utcnow())
            .returning(AllocationCursor.last_index)
            .execution_options(synchronize_session=False)
        )
        return session.execute(statement).first() is not None

    def _ensure_row(self, project_id: str, role_id: str) -> bool:
        """Insert the cursor at index 0; False when another caller won the race."""
        try:
            with self._database.session_scope() as session:
                session.add(AllocationCursor(project_id=project_id, role_id=role_id, last_index=0))
        except IntegrityError:
            return False
        return True


class AssignmentRepository:
    """Assignment records, unique per (candidate, project, role)."""

    def __init__(self, database: Database) -> None:
        self._database = database

    def create(
        self,
        *,
        candidate_id: str,
        project_id: str,
        role_id: str,
        recruiter_id: str,
        score: int | None = None,
        assigned_at: datetime | None = None,
        status: str = "nominated",
    ) -> CandidateAssignment:
        record = CandidateAssignment(
            candidate_id=candidate_id,
            project_id=project_id,
            role_id=role_id,
            recruiter_id=recruiter_id,
            score=score,
            status=status,
            assigned_at=assigned_at or utcnow(),
        )
        try:
            with self._database.session_scope() as session:
                session.add(record)
                session.flush()
        except IntegrityError as exc:
            if is_unique_violation(exc):
                raise DuplicateAssignmentError(candidate_id, project_id, role_id) from exc
            raise
        return record

    def get(self, candidate_id: str, project_id: str, role_id: str) -> CandidateAssignment | None:
        with self._database.session_scope() as session:
            return session.execute(
                select(CandidateAssignment).where(
                    CandidateAssignment.candidate_id == candidate_id,
                    CandidateAssignment.project_id == project_id,
                    CandidateAssignment.role_id == role_id,
                )
            ).scalar_one_or_none()

    def list_for_project(self, project_id: str) -> list[CandidateAssignment]:
        with self._database.session_scope() as session:
            return list(
                session.execute(
                    select(CandidateAssignment)
                    .where(CandidateAssignment.project_id == project_id)
                    .order_by(CandidateAssignment.id)
                ).scalars()
            )

    def list_for_recruiter(self, recruiter_id: str, *, limit: int | None = None) -> list[CandidateAssignment]:
        statement = (
            select(CandidateAssignment)
            .where(CandidateAssignment.recruiter_id == recruiter_id)
            .order_by(CandidateAssignment.assigned_at.desc(), CandidateAssignment.id.desc())
        )
        if limit is not None:
            statement = statement.limit(limit)
        with self._database.session_scope() as session:
            return list(session.execute(statement).scalars())

    def status_counts_for_recruiter(self, recruiter_id: str) -> dict[str, int]:
        with self._database.session_scope() as session:
            rows = session.execute(
                select(CandidateAssignment.status, func.count())
                .where(CandidateAssignment.recruiter_id == recruiter_id)
                .group_by(CandidateAssignment.status)
            ).all()
        return {status: int(count) for status, count in rows}

    def open_workload(self, statuses: Iterable[str]) -> dict[str, int]:
        """Count assignments per recruiter whose status is still open."""
        with self._database.session_scope() as session:
            rows = session.execute(
                select(CandidateAssignment.recruiter_id, func.count())
                .where(CandidateAssignment.status.in_(list(statuses)))
                .group_by(CandidateAssignment.recruiter_id)
            ).all()
        return {recruiter_id: int(count) for recruiter_id, count in rows}


class OutboxRepository:
    """Append-only outbox of notification events."""

    def __init__(self, database: Database) -> None:
        self._database = database

    def append(self, event_type: str, payload: dict[str, Any]) -> int:
        with self._database.session_scope() as session:
            event = OutboxEvent(event_type=event_type, payload=payload)
            session.add(event)
            session.flush()
            return event.id

    def list_events(self, event_type: str | None = None) -> list[OutboxEvent]:
        statement = select(OutboxEvent).order_by(OutboxEvent.id)
        if event_type is not None:
            statement = statement.where(OutboxEvent.event_type == event_type)
        with self._database.session_scope() as session:
            return list(session.execute(statement).scalars())
