from __future__ import annotations

from pathlib import Path

from talentalloc.container import create_container
from talentalloc.schemas import Recruiter
from talentalloc.schemas.config import load_config
from talentalloc.sources import SnapshotRepository


def test_create_container_with_overrides(tmp_path: Path):
    settings = load_config(
        {
            "database": {"url": f"sqlite:///{tmp_path / 'alloc.db'}"},
            "engine": {"weights": {"education": 0.5, "skills": 0.05}},
            "evaluators": {
                "education": {"alias_score": 88},
                "experience": {"optimal_span_years": 3},
                "skills": {"match_threshold": 75},
            },
            "allocation": {"batch_size": 10, "workload_statuses": ["nominated", "processing"]},
        }
    ).to_settings()

    container = create_container(settings=settings)

    assert container.education_evaluator()._config.alias_score == 88
    assert container.experience_evaluator()._config.optimal_span_years == 3
    assert container.skills_evaluator()._config.match_threshold == 75
    engine = container.engine()
    assert engine.weights["education"] == 0.5
    assert engine.weights["experience"] == 0.30
    assert container.orchestrator()._default_batch_size == 10
    assert container.recruiter_pool()._workload_statuses == ("nominated", "processing")
    assert container.database().url.endswith("alloc.db")


def test_container_wires_snapshot_into_sources(tmp_path: Path):
    snapshot = SnapshotRepository(recruiters=[Recruiter(id="U-1", name="Avi")])

    container = create_container(
        settings={"database": {"url": f"sqlite:///{tmp_path / 'alloc.db'}"}},
        snapshot=snapshot,
    )

    assert container.snapshot() is snapshot
    assert [info.id for info in container.recruiter_pool().read()] == ["U-1"]
    assert container.orchestrator()._default_batch_size is None
