"""Typer CLI entrypoint for matching and allocation."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from pydantic import ValidationError

from .container import AllocationContainer, create_container
from .errors import AllocationError, SnapshotLoadError
from .logging import configure_logging
from .schemas.config import load_config
from .sources import SnapshotLoader, SnapshotRepository

app = typer.Typer(help="Candidate eligibility and recruiter allocation CLI.")

SNAPSHOT_OPTION = typer.Option(
    ..., exists=True, readable=True, dir_okay=False, help="Snapshot JSON (candidates, roles, projects, recruiters)."
)
DATABASE_OPTION = typer.Option(None, help="SQLAlchemy URL for cursors, assignments and outbox.")
CONFIG_OPTION = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path.")
LOG_LEVEL_OPTION = typer.Option("INFO", help="Log level for structured logging.")
LOG_FORMAT_OPTION = typer.Option("json", help="Log renderer: json or console.")
AS_OF_OPTION = typer.Option(None, help="Reference date (YYYY-MM or ISO) for experience calculations.")


def _load_settings(config: Optional[Path], database: Optional[str]) -> dict[str, Any]:
    settings: dict[str, Any] = {}
    if config:
        with config.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        try:
            settings = load_config(loaded).to_settings()
        except ValidationError as exc:
            raise typer.BadParameter(f"Invalid config: {exc}", param_name="config") from exc
    if database:
        settings.setdefault("database", {})["url"] = database
    return settings


def _load_snapshot(path: Optional[Path]) -> SnapshotRepository:
    if path is None:
        return SnapshotRepository()
    try:
        return SnapshotLoader().load(path)
    except SnapshotLoadError as exc:
        for error in exc.errors:
            typer.echo(error, err=True)
        raise typer.Exit(code=2) from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_name="snapshot") from exc


def _build(
    snapshot: Optional[Path],
    config: Optional[Path],
    database: Optional[str],
    log_level: str,
    log_format: str = "json",
) -> AllocationContainer:
    try:
        configure_logging(log_level, renderer=log_format)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_name="log_format") from exc
    settings = _load_settings(config, database)
    return create_container(settings=settings, snapshot=_load_snapshot(snapshot))


def _context(as_of: Optional[str]) -> dict[str, Any] | None:
    return {"as_of": as_of} if as_of else None


def _emit(payload: Any) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


def _fail(exc: Exception) -> None:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1) from exc


@app.command()
def score(
    snapshot: Path = SNAPSHOT_OPTION,
    candidate_id: str = typer.Option(..., help="Candidate to score."),
    role_id: str = typer.Option(..., help="Role to score against."),
    as_of: Optional[str] = AS_OF_OPTION,
    report: bool = typer.Option(False, help="Include the per-factor breakdown."),
    config: Optional[Path] = CONFIG_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
    log_format: str = LOG_FORMAT_OPTION,
) -> None:
    """Score one candidate against one role."""
    container = _build(snapshot, config, None, log_level, log_format)
    repository = container.snapshot()
    candidates = repository.list_candidates(candidate_id)
    role = repository.get_role(role_id)
    if not candidates:
        _fail(LookupError(f"Candidate {candidate_id} not found"))
    if role is None:
        _fail(LookupError(f"Role {role_id} not found"))

    engine = container.engine()
    if report:
        _emit(asdict(engine.report(candidates[0], role, _context(as_of))))
    else:
        _emit(asdict(engine.score(candidates[0], role, _context(as_of))))


@app.command()
def match(
    snapshot: Path = SNAPSHOT_OPTION,
    project_id: str = typer.Option(..., help="Project owning the role."),
    role_id: str = typer.Option(..., help="Role to match candidates for."),
    candidate_id: Optional[str] = typer.Option(None, help="Restrict matching to one candidate."),
    as_of: Optional[str] = AS_OF_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
    log_format: str = LOG_FORMAT_OPTION,
) -> None:
    """List eligible candidates for a role, best first."""
    container = _build(snapshot, config, None, log_level, log_format)
    try:
        run = container.pipeline().run(role_id, project_id, candidate_id, context=_context(as_of))
    except AllocationError as exc:
        _fail(exc)
    _emit(
        {
            "role_id": run.role.id,
            "evaluated": run.evaluated,
            "matches": [asdict(item) for item in run.matches],
            "errors": run.errors,
        }
    )


@app.command()
def allocate(
    snapshot: Path = SNAPSHOT_OPTION,
    project_id: str = typer.Option(..., help="Project to allocate for."),
    role_id: Optional[str] = typer.Option(None, help="Single role; every open role when omitted."),
    candidate_id: Optional[str] = typer.Option(None, help="Allocate only this candidate."),
    batch_size: Optional[int] = typer.Option(None, min=1, help="Cap on candidates per role."),
    as_of: Optional[str] = AS_OF_OPTION,
    database: Optional[str] = DATABASE_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
    log_format: str = LOG_FORMAT_OPTION,
) -> None:
    """Assign eligible candidates to active recruiters in round-robin order."""
    container = _build(snapshot, config, database, log_level, log_format)
    orchestrator = container.orchestrator()
    recruiters = container.recruiter_pool().read()
    try:
        if role_id:
            result = orchestrator.allocate_for_role(
                project_id,
                role_id,
                recruiters,
                candidate_id,
                batch_size=batch_size,
                context=_context(as_of),
            )
            _emit({role_id: result.to_dict()})
        else:
            results = orchestrator.allocate_for_project(
                project_id,
                recruiters,
                batch_size=batch_size,
                context=_context(as_of),
            )
            _emit({key: value.to_dict() for key, value in results.items()})
    except AllocationError as exc:
        _fail(exc)


@app.command("reset-cursor")
def reset_cursor(
    project_id: str = typer.Option(..., help="Project of the cursor."),
    role_id: str = typer.Option(..., help="Role of the cursor."),
    database: Optional[str] = DATABASE_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
    log_format: str = LOG_FORMAT_OPTION,
) -> None:
    """Restart the round-robin cycle of a role at the first recruiter."""
    container = _build(None, config, database, log_level, log_format)
    cursor = container.cursor()
    cursor.reset(project_id, role_id)
    _emit({"project_id": project_id, "role_id": role_id, "last_index": cursor.position(project_id, role_id)})


@app.command()
def status(
    snapshot: Path = SNAPSHOT_OPTION,
    project_id: str = typer.Option(..., help="Project to summarize."),
    database: Optional[str] = DATABASE_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
    log_format: str = LOG_FORMAT_OPTION,
) -> None:
    """Per-role allocation counts for a project."""
    container = _build(snapshot, config, database, log_level, log_format)
    try:
        _emit(container.orchestrator().allocation_status(project_id))
    except AllocationError as exc:
        _fail(exc)


@app.command()
def workload(
    snapshot: Path = SNAPSHOT_OPTION,
    recruiter_id: str = typer.Option(..., help="Recruiter to summarize."),
    database: Optional[str] = DATABASE_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
    log_format: str = LOG_FORMAT_OPTION,
) -> None:
    """Allocation totals and recent assignments for a recruiter."""
    container = _build(snapshot, config, database, log_level, log_format)
    try:
        _emit(container.orchestrator().recruiter_workload(recruiter_id))
    except AllocationError as exc:
        _fail(exc)


@app.command()
def recruiters(
    snapshot: Path = SNAPSHOT_OPTION,
    database: Optional[str] = DATABASE_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
    log_format: str = LOG_FORMAT_OPTION,
) -> None:
    """Active recruiters in allocation order with their open workload."""
    container = _build(snapshot, config, database, log_level, log_format)
    _emit([info.model_dump() for info in container.recruiter_pool().read()])


def main() -> None:
    app()


if __name__ == "__main__":
    main()
