"""Persistence for cursors, assignment records and outbox events."""

from .database import (
    AllocationCursor,
    Base,
    CandidateAssignment,
    Database,
    OutboxEvent,
    init_database,
)
from .repositories import AssignmentRepository, CursorRepository, OutboxRepository

__all__ = [
    "AllocationCursor",
    "AssignmentRepository",
    "Base",
    "CandidateAssignment",
    "CursorRepository",
    "Database",
    "OutboxEvent",
    "OutboxRepository",
    "init_database",
]
