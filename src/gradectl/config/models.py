"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, gradectl.toml only contains
overrides. A fresh checkout needs no config file at all.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from gradectl.domain.grades import DEFAULT_MAX_SCORE, DEFAULT_MIN_SCORE

# --- gradectl.toml sections ---


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    backend: Literal["sqlite", "memory"] = "sqlite"
    path: str = ".gradectl/grades.db"
    timeout_seconds: float = Field(default=5.0, gt=0)


class GradesConfig(BaseModel):
    """[grades] section."""

    model_config = {"frozen": True}

    min_score: int = DEFAULT_MIN_SCORE
    max_score: int = DEFAULT_MAX_SCORE

    @model_validator(mode="after")
    def _check_bounds(self) -> GradesConfig:
        if self.min_score > self.max_score:
            msg = f"min_score ({self.min_score}) exceeds max_score ({self.max_score})"
            raise ValueError(msg)
        return self

