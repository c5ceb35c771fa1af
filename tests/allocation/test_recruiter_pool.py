from __future__ import annotations

from pathlib import Path

import pytest

from talentalloc.recruiters import RecruiterPoolReader
from talentalloc.schemas import Recruiter
from talentalloc.sources import SnapshotRepository
from talentalloc.storage import AssignmentRepository, Database, init_database


@pytest.fixture
def database(tmp_path: Path) -> Database:
    db = init_database(f"sqlite:///{tmp_path / 'allocation.db'}")
    yield db
    db.dispose()


def build_roster(*recruiters: Recruiter) -> SnapshotRepository:
    return SnapshotRepository(recruiters=list(recruiters))


def test_active_recruiters_sorted_by_id(database: Database):
    roster = build_roster(
        Recruiter(id="U-3", name="Cal"),
        Recruiter(id="U-1", name="Avi"),
        Recruiter(id="U-2", name="Bea", active=False),
    )

    pool = RecruiterPoolReader(roster=roster, assignments=AssignmentRepository(database)).read()

    assert [info.id for info in pool] == ["U-1", "U-3"]
    assert all(info.current_open_workload == 0 for info in pool)


def test_workload_counts_only_open_statuses(database: Database):
    assignments = AssignmentRepository(database)
    assignments.create(candidate_id="C-1", project_id="P-1", role_id="R-1", recruiter_id="U-1")
    assignments.create(candidate_id="C-2", project_id="P-1", role_id="R-1", recruiter_id="U-1", status="hired")
    assignments.create(candidate_id="C-3", project_id="P-1", role_id="R-1", recruiter_id="U-1", status="processing")
    roster = build_roster(Recruiter(id="U-1", name="Avi"))

    default = RecruiterPoolReader(roster=roster, assignments=assignments)
    widened = RecruiterPoolReader(
        roster=roster,
        assignments=assignments,
        workload_statuses=["nominated", "processing"],
    )

    assert default.read()[0].current_open_workload == 1
    assert widened.read()[0].current_open_workload == 2


def test_empty_roster_reads_empty(database: Database):
    reader = RecruiterPoolReader(roster=build_roster(), assignments=AssignmentRepository(database))

    assert reader.read() == []
    assert reader.get("U-1") is None
