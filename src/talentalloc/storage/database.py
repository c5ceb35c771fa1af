"""
Database schema and connection management.

Uses SQLAlchemy for the allocation cursor, assignment records and the
notification outbox. Any SQLAlchemy URL works; SQLite is the default.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator

import pendulum
from sqlalchemy import JSON, DateTime, Integer, String, UniqueConstraint, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

DEFAULT_DATABASE_URL = "sqlite:///allocation.db"


def utcnow() -> datetime:
    return pendulum.now("UTC")


class Base(DeclarativeBase):
    pass


class AllocationCursor(Base):
    """Round-robin position per (project, role)."""

    __tablename__ = "allocation_cursors"

    project_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    role_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    last_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        return f"<AllocationCursor {self.project_id}/{self.role_id} last_index={self.last_index}>"


class CandidateAssignment(Base):
    """One candidate handed to one recruiter for a (project, role)."""

    __tablename__ = "candidate_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    candidate_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    project_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    role_id: Mapped[str] = mapped_column(String(64), nullable=False)
    recruiter_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="nominated")
    score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint(
            "candidate_id",
            "project_id",
            "role_id",
            name="uq_assignment_candidate_project_role",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<CandidateAssignment candidate={self.candidate_id} project={self.project_id} "
            f"role={self.role_id} recruiter={self.recruiter_id}>"
        )


class OutboxEvent(Base):
    """Outbound notification awaiting delivery by the surrounding system."""

    __tablename__ = "outbox_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_type: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class Database:
    """Engine and transactional session factory."""

    def __init__(self, url: str = DEFAULT_DATABASE_URL, *, echo: bool = False) -> None:
        connect_args: dict[str, Any] = {}
        parsed = make_url(url)
        if parsed.get_backend_name() == "sqlite":
            connect_args["timeout"] = 30
            connect_args["check_same_thread"] = False
            if parsed.database and parsed.database != ":memory:":
                Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
        self.url = url
        self.engine = create_engine(url, echo=echo, connect_args=connect_args)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    def create_all(self) -> None:
        """Create tables that do not exist yet."""
        Base.metadata.create_all(self.engine)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Yield a session committed on success and rolled back on error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        self.engine.dispose()


def init_database(url: str = DEFAULT_DATABASE_URL, *, echo: bool = False) -> Database:
    """Create the database schema and return a ready handle."""
    database = Database(url, echo=echo)
    database.create_all()
    return database
