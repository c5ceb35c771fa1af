"""Dependency injection container for the allocation core."""

from __future__ import annotations

from typing import Any

from dependency_injector import containers, providers

from .allocation import AllocationOrchestrator
from .core import (
    CertificationsEvaluator,
    EducationEvaluator,
    EligibilityEngine,
    ExperienceEvaluator,
    LegacyScorer,
    LocationEvaluator,
    SkillsEvaluator,
)
from .core.evaluators.education import EducationConfig
from .core.evaluators.experience import ExperienceConfig
from .core.evaluators.skills import SkillsConfig
from .cursor import RoundRobinCursor
from .matching import CandidateMatchingPipeline
from .notifications import OutboxPublisher
from .recruiters import RecruiterPoolReader
from .sources import SnapshotRepository
from .storage import AssignmentRepository, CursorRepository, OutboxRepository, init_database
from .storage.database import DEFAULT_DATABASE_URL

DEFAULT_SETTINGS: dict[str, Any] = {
    "database": {"url": DEFAULT_DATABASE_URL, "echo": False},
}


class AllocationContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration(default=DEFAULT_SETTINGS)

    snapshot = providers.Singleton(SnapshotRepository)

    database = providers.Singleton(
        init_database,
        url=config.database.url,
        echo=config.database.echo,
    )

    cursor_repository = providers.Singleton(CursorRepository, database=database)
    assignment_repository = providers.Singleton(AssignmentRepository, database=database)
    outbox_repository = providers.Singleton(OutboxRepository, database=database)

    education_evaluator = providers.Singleton(EducationEvaluator)
    experience_evaluator = providers.Singleton(ExperienceEvaluator)
    skills_evaluator = providers.Singleton(SkillsEvaluator)
    certifications_evaluator = providers.Singleton(CertificationsEvaluator)
    location_evaluator = providers.Singleton(LocationEvaluator)

    evaluators = providers.List(
        education_evaluator,
        experience_evaluator,
        skills_evaluator,
        certifications_evaluator,
        location_evaluator,
    )

    engine = providers.Singleton(
        EligibilityEngine,
        evaluators=evaluators,
        weights=config.engine.weights,
    )

    legacy_scorer = providers.Singleton(LegacyScorer, education=education_evaluator)

    pipeline = providers.Singleton(
        CandidateMatchingPipeline,
        candidates=snapshot,
        roles=snapshot,
        engine=engine,
        legacy=legacy_scorer,
        open_statuses=config.matching.open_statuses,
        committed_statuses=config.matching.committed_statuses,
    )

    cursor = providers.Singleton(RoundRobinCursor, cursors=cursor_repository)

    publisher = providers.Singleton(OutboxPublisher, outbox=outbox_repository)

    recruiter_pool = providers.Singleton(
        RecruiterPoolReader,
        roster=snapshot,
        assignments=assignment_repository,
        workload_statuses=config.allocation.workload_statuses,
    )

    orchestrator = providers.Singleton(
        AllocationOrchestrator,
        pipeline=pipeline,
        cursor=cursor,
        assignments=assignment_repository,
        publisher=publisher,
        roles=snapshot,
        recruiter_pool=recruiter_pool,
        default_batch_size=config.allocation.batch_size,
    )


def create_container(
    *,
    settings: dict | None = None,
    snapshot: SnapshotRepository | None = None,
) -> AllocationContainer:
    """Instantiate container with optional overrides."""

    container = AllocationContainer()

    if snapshot is not None:
        container.snapshot.override(providers.Object(snapshot))

    if not settings:
        return container

    core_settings = {
        key: value
        for key, value in settings.items()
        if key in {"database", "engine", "matching", "allocation"} and isinstance(value, dict)
    }
    if core_settings:
        container.config.from_dict(core_settings)

    evaluator_settings = settings.get("evaluators", {}) if isinstance(settings, dict) else {}

    if "education" in evaluator_settings:
        education_config = EducationConfig(**evaluator_settings["education"])
        container.education_evaluator.override(
            providers.Singleton(EducationEvaluator, config=education_config)
        )

    if "experience" in evaluator_settings:
        experience_config = ExperienceConfig(**evaluator_settings["experience"])
        container.experience_evaluator.override(
            providers.Singleton(ExperienceEvaluator, config=experience_config)
        )

    if "skills" in evaluator_settings:
        skills_config = SkillsConfig(**evaluator_settings["skills"])
        container.skills_evaluator.override(
            providers.Singleton(SkillsEvaluator, config=skills_config)
        )

    return container
