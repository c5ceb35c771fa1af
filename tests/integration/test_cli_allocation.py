from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from talentalloc.cli import app


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")


def build_snapshot(path: Path) -> Path:
    nurse = {"qualification": {"name": "BSc Nursing"}}
    write_json(
        path,
        {
            "projects": [{"id": "P-1", "title": "Riyadh Hospital Staffing"}],
            "roles": [
                {
                    "id": "R-1",
                    "project_id": "P-1",
                    "designation": "Staff Nurse",
                    "min_experience": 2,
                    "max_experience": 10,
                    "skills": ["Patient Care"],
                    "required_qualifications": [
                        {
                            "qualification": {
                                "name": "Bachelor of Science in Nursing",
                                "short_name": "BSc Nursing",
                            }
                        }
                    ],
                }
            ],
            "candidates": [
                {"id": f"C-{index}", "total_experience_years": 4, "skills": ["Patient Care"], "qualifications": [nurse]}
                for index in range(1, 6)
            ],
            "recruiters": [
                {"id": "U-1", "name": "Avi"},
                {"id": "U-2", "name": "Bea"},
            ],
        },
    )
    return path


def test_cli_allocates_and_reports(tmp_path: Path, runner: CliRunner) -> None:
    snapshot = build_snapshot(tmp_path / "snapshot.json")
    database = f"sqlite:///{tmp_path / 'allocation.db'}"

    result = runner.invoke(
        app,
        [
            "allocate",
            "--snapshot",
            str(snapshot),
            "--project-id",
            "P-1",
            "--role-id",
            "R-1",
            "--database",
            database,
            "--as-of",
            "2024-06",
        ],
    )

    assert result.exit_code == 0, result.output
    rendered = json.loads(result.stdout)
    assert rendered["R-1"]["assigned"] == 5
    assert rendered["R-1"]["errors"] == []

    status = runner.invoke(
        app,
        ["status", "--snapshot", str(snapshot), "--project-id", "P-1", "--database", database],
    )
    assert status.exit_code == 0, status.output
    assert json.loads(status.stdout)[0]["total_allocated"] == 5

    workload = runner.invoke(
        app,
        ["recruiters", "--snapshot", str(snapshot), "--database", database],
    )
    assert workload.exit_code == 0, workload.output
    counts = {item["id"]: item["current_open_workload"] for item in json.loads(workload.stdout)}
    assert counts == {"U-1": 2, "U-2": 3}


def test_cli_score_outputs_match_result(tmp_path: Path, runner: CliRunner) -> None:
    snapshot = build_snapshot(tmp_path / "snapshot.json")

    result = runner.invoke(
        app,
        [
            "score",
            "--snapshot",
            str(snapshot),
            "--candidate-id",
            "C-1",
            "--role-id",
            "R-1",
            "--as-of",
            "2024-06",
        ],
    )

    assert result.exit_code == 0, result.output
    rendered = json.loads(result.stdout)
    assert rendered["passes"] is True
    assert rendered["per_factor_scores"]["education"] == 100


def test_cli_reset_cursor(tmp_path: Path, runner: CliRunner) -> None:
    database = f"sqlite:///{tmp_path / 'allocation.db'}"

    result = runner.invoke(
        app,
        ["reset-cursor", "--project-id", "P-1", "--role-id", "R-1", "--database", database],
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["last_index"] == 0


def test_cli_unknown_project_exits_nonzero(tmp_path: Path, runner: CliRunner) -> None:
    snapshot = build_snapshot(tmp_path / "snapshot.json")

    result = runner.invoke(
        app,
        [
            "allocate",
            "--snapshot",
            str(snapshot),
            "--project-id",
            "P-404",
            "--database",
            f"sqlite:///{tmp_path / 'allocation.db'}",
        ],
    )

    assert result.exit_code == 1


def test_cli_rejects_invalid_config(tmp_path: Path, runner: CliRunner) -> None:
    snapshot = build_snapshot(tmp_path / "snapshot.json")
    config = tmp_path / "config.yaml"
    config.write_text("allocation:\n  batch_size: 0\n", encoding="utf-8")

    result = runner.invoke(
        app,
        ["recruiters", "--snapshot", str(snapshot), "--config", str(config)],
    )

    assert result.exit_code != 0


def test_cli_rejects_unknown_log_format(tmp_path: Path, runner: CliRunner) -> None:
    snapshot = build_snapshot(tmp_path / "snapshot.json")

    result = runner.invoke(
        app,
        ["recruiters", "--snapshot", str(snapshot), "--log-format", "xml"],
    )

    assert result.exit_code != 0
