"""Recruiter roster schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Recruiter(BaseModel):
    """Roster entry supplied by the surrounding system."""

    id: str
    name: str
    email: str | None = None
    active: bool = True

    model_config = ConfigDict(extra="allow")


class RecruiterInfo(BaseModel):
    """Recruiter as seen by the allocation cursor."""

    id: str
    name: str
    current_open_workload: int = 0

    model_config = ConfigDict(extra="forbid")
