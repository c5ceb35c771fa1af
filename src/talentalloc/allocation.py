"""Allocation orchestration: ranked candidates to recruiters, one record each."""

from __future__ import annotations

import threading
from dataclasses import asdict, dataclass, field
from typing import Any, Sequence

import structlog

from .cursor import RoundRobinCursor
from .errors import (
    DuplicateAssignmentError,
    NoRecruitersAvailableError,
    ProjectNotFoundError,
    RecruiterNotFoundError,
    RoleNotFoundError,
)
from .matching import CandidateMatchingPipeline, MatchedCandidate
from .notifications import CANDIDATE_ASSIGNED, EventPublisher
from .recruiters import RecruiterPoolReader
from .schemas import RecruiterInfo
from .sources import RoleSource
from .storage import AssignmentRepository

TRACKED_STATUSES: tuple[str, ...] = ("nominated", "selected", "processing", "hired")
RECENT_ALLOCATIONS_LIMIT = 10


@dataclass(slots=True)
class AllocationResult:
    """Aggregate counters describing one allocation run.

    ``evaluated`` counts every available candidate the matcher scored,
    including those that failed scoring. ``considered`` counts the ranked
    candidates that reached assignment.
    """

    evaluated: int = 0
    considered: int = 0
    assigned: int = 0
    skipped_duplicates: int = 0
    errors: list[str] = field(default_factory=list)
    cancelled: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class AllocationOrchestrator:
    """Assign eligible candidates to recruiters in round-robin order.

    Every candidate is an independent unit of work: its failure is recorded
    and the run moves on. Only validation failures (no recruiters, unknown
    role or project) abort a call.
    """

    def __init__(
        self,
        *,
        pipeline: CandidateMatchingPipeline,
        cursor: RoundRobinCursor,
        assignments: AssignmentRepository,
        publisher: EventPublisher,
        roles: RoleSource,
        recruiter_pool: RecruiterPoolReader | None = None,
        default_batch_size: int | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._cursor = cursor
        self._assignments = assignments
        self._publisher = publisher
        self._roles = roles
        self._recruiter_pool = recruiter_pool
        self._default_batch_size = default_batch_size
        self._logger = structlog.get_logger(__name__)

    def allocate_for_role(
        self,
        project_id: str,
        role_id: str,
        recruiters: Sequence[RecruiterInfo],
        target_candidate_id: str | None = None,
        *,
        batch_size: int | None = None,
        cancel_event: threading.Event | None = None,
        context: dict[str, Any] | None = None,
    ) -> AllocationResult:
        if not recruiters:
            raise NoRecruitersAvailableError()

        log = self._logger.bind(project_id=project_id, role_id=role_id)
        log.info(
            "allocation.started",
            recruiter_count=len(recruiters),
            target_candidate_id=target_candidate_id,
        )

        result = AllocationResult()
        try:
            run = self._pipeline.run(role_id, project_id, target_candidate_id, context=context)
        except RoleNotFoundError:
            raise
        except Exception as exc:  # noqa: BLE001
            log.error("allocation.matching_failed", error=str(exc))
            result.errors.append(f"Failed to match candidates for role {role_id}: {exc}")
            return result

        result.evaluated = run.evaluated
        result.errors.extend(run.errors)
        limit = batch_size if batch_size is not None else self._default_batch_size
        candidates = run.matches if target_candidate_id or limit is None else run.matches[:limit]

        if not candidates:
            log.warning("allocation.no_eligible_candidates")

        for matched in candidates:
            if cancel_event is not None and cancel_event.is_set():
                result.cancelled = True
                log.info("allocation.cancelled", processed=result.considered)
                break
            result.considered += 1
            self._allocate_one(project_id, role_id, matched, recruiters, result, log)

        log.info(
            "allocation.completed",
            evaluated=result.evaluated,
            considered=result.considered,
            assigned=result.assigned,
            skipped_duplicates=result.skipped_duplicates,
            errors=len(result.errors),
        )
        return result

    def allocate_for_project(
        self,
        project_id: str,
        recruiters: Sequence[RecruiterInfo],
        *,
        batch_size: int | None = None,
        cancel_event: threading.Event | None = None,
        context: dict[str, Any] | None = None,
    ) -> dict[str, AllocationResult]:
        if not recruiters:
            raise NoRecruitersAvailableError()
        if self._roles.get_project(project_id) is None:
            raise ProjectNotFoundError(project_id)

        results: dict[str, AllocationResult] = {}
        for role in self._roles.list_roles(project_id):
            if not role.is_open:
                continue
            try:
                results[role.id] = self.allocate_for_role(
                    project_id,
                    role.id,
                    recruiters,
                    batch_size=batch_size,
                    cancel_event=cancel_event,
                    context=context,
                )
            except Exception as exc:  # noqa: BLE001
                self._logger.error(
                    "allocation.role_failed",
                    project_id=project_id,
                    role_id=role.id,
                    error=str(exc),
                )
                results[role.id] = AllocationResult(errors=[str(exc)])
        return results

    def allocation_status(self, project_id: str) -> list[dict[str, Any]]:
        """Per-role assignment counts for a project."""
        if self._roles.get_project(project_id) is None:
            raise ProjectNotFoundError(project_id)

        records = self._assignments.list_for_project(project_id)
        summary: list[dict[str, Any]] = []
        for role in self._roles.list_roles(project_id):
            counts: dict[str, int] = {}
            for record in records:
                if record.role_id == role.id:
                    counts[record.status] = counts.get(record.status, 0) + 1
            entry: dict[str, Any] = {
                "role_id": role.id,
                "designation": role.designation,
                "is_open": role.is_open,
                "total_allocated": sum(counts.values()),
            }
            for status in TRACKED_STATUSES:
                entry[status] = counts.get(status, 0)
            entry["status_counts"] = counts
            summary.append(entry)
        return summary

    def recruiter_workload(self, recruiter_id: str) -> dict[str, Any]:
        """Totals and recent allocations for one recruiter."""
        recruiter = self._recruiter_pool.get(recruiter_id) if self._recruiter_pool else None
        if recruiter is None:
            raise RecruiterNotFoundError(recruiter_id)

        status_counts = self._assignments.status_counts_for_recruiter(recruiter_id)
        recent = self._assignments.list_for_recruiter(recruiter_id, limit=RECENT_ALLOCATIONS_LIMIT)
        return {
            "recruiter": recruiter.model_dump(),
            "total_allocations": sum(status_counts.values()),
            "status_counts": status_counts,
            "recent_allocations": [
                {
                    "candidate_id": record.candidate_id,
                    "project_id": record.project_id,
                    "role_id": record.role_id,
                    "status": record.status,
                    "score": record.score,
                    "assigned_at": record.assigned_at.isoformat(),
                }
                for record in recent
            ],
        }

    def _allocate_one(
        self,
        project_id: str,
        role_id: str,
        matched: MatchedCandidate,
        recruiters: Sequence[RecruiterInfo],
        result: AllocationResult,
        log: Any,
    ) -> None:
        candidate_id = matched.candidate_id
        try:
            recruiter = self._cursor.next_recruiter(project_id, role_id, recruiters)
            self._assignments.create(
                candidate_id=candidate_id,
                project_id=project_id,
                role_id=role_id,
                recruiter_id=recruiter.id,
                score=matched.score,
            )
        except DuplicateAssignmentError:
            result.skipped_duplicates += 1
            log.debug("allocation.duplicate_skipped", candidate_id=candidate_id)
            return
        except Exception as exc:  # noqa: BLE001
            result.errors.append(f"Failed to allocate candidate {candidate_id}: {exc}")
            log.error("allocation.candidate_failed", candidate_id=candidate_id, error=str(exc))
            return

        result.assigned += 1
        log.debug(
            "allocation.assigned",
            candidate_id=candidate_id,
            recruiter_id=recruiter.id,
            score=matched.score,
        )
        self._notify(project_id, role_id, matched, recruiter, log)

    def _notify(
        self,
        project_id: str,
        role_id: str,
        matched: MatchedCandidate,
        recruiter: RecruiterInfo,
        log: Any,
    ) -> None:
        payload = {
            "candidate_id": matched.candidate_id,
            "project_id": project_id,
            "role_id": role_id,
            "recruiter_id": recruiter.id,
            "recruiter_name": recruiter.name,
            "match_score": matched.score,
            "match_reasons": list(matched.match_reasons),
        }
        try:
            self._publisher.publish(CANDIDATE_ASSIGNED, payload)
        except Exception as exc:  # noqa: BLE001
            log.warning(
                "allocation.notification_failed",
                candidate_id=matched.candidate_id,
                recruiter_id=recruiter.id,
                error=str(exc),
            )
