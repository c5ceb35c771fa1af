"""Outbound notification publishing."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import structlog

from .storage import OutboxRepository

CANDIDATE_ASSIGNED = "CandidateAssignedToRecruiter"


@runtime_checkable
class EventPublisher(Protocol):
    """Fire-and-forget event sink; delivery guarantees belong to the consumer."""

    def publish(self, event_type: str, payload: dict[str, Any]) -> None:
        """Hand the event over for delivery."""


class OutboxPublisher:
    """Write events to the outbox table for the surrounding system to relay."""

    def __init__(self, outbox: OutboxRepository) -> None:
        self._outbox = outbox
        self._logger = structlog.get_logger(__name__)

    def publish(self, event_type: str, payload: dict[str, Any]) -> None:
        event_id = self._outbox.append(event_type, payload)
        self._logger.debug("outbox.appended", event_type=event_type, event_id=event_id)
