"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError


class DatabaseConfig(BaseModel):
    url: str | None = None
    echo: bool = False


class EngineConfig(BaseModel):
    weights: dict[str, float] | None = None


class EvaluatorConfig(BaseModel):
    education: dict[str, Any] | None = None
    experience: dict[str, Any] | None = None
    skills: dict[str, Any] | None = None


class MatchingConfig(BaseModel):
    open_statuses: list[str] | None = None
    committed_statuses: list[str] | None = None


class AllocationConfig(BaseModel):
    batch_size: int | None = Field(default=None, gt=0)
    workload_statuses: list[str] | None = None


class AppConfig(BaseModel):
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    evaluators: EvaluatorConfig = Field(default_factory=EvaluatorConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    allocation: AllocationConfig = Field(default_factory=AllocationConfig)

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        database = self.database.model_dump(exclude_none=True)
        if self.database.url:
            settings["database"] = database
        if self.engine.weights:
            settings["engine"] = self.engine.model_dump(exclude_none=True)
        evaluator_settings = self.evaluators.model_dump(exclude_none=True)
        if evaluator_settings:
            settings["evaluators"] = evaluator_settings
        matching_settings = self.matching.model_dump(exclude_none=True)
        if matching_settings:
            settings["matching"] = matching_settings
        allocation_settings = self.allocation.model_dump(exclude_none=True)
        if allocation_settings:
            settings["allocation"] = allocation_settings
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
