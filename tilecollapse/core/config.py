"""Solver configuration.

SolverConfig is the configuration surface consumed when a solver is built:
grid dimensions, starting seed, the outer retry policy and an optional
border tile. It can be built directly, or from TILECOLLAPSE_* environment
variables (the CLI loads a .env file first).
"""

from __future__ import annotations

import os
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

StopPolicy = Literal["success", "first_failure"]

ENV_PREFIX = "TILECOLLAPSE_"


class SolverConfig(BaseModel):
    """Immutable settings for one solver run.

    stop_policy controls run_until_success:
    - "success": keep reseeding until the grid is solved (or the budget runs out)
    - "first_failure": give up on the first unsolvable attempt
    """

    model_config = ConfigDict(frozen=True)

    dimensions: tuple[int, ...] = (8, 8)
    seed: int = 0
    stop_policy: StopPolicy = "success"
    max_attempts: int | None = Field(default=None, gt=0)
    border_tile: int | None = None

    @field_validator("dimensions")
    @classmethod
    def _check_dimensions(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        if not 1 <= len(value) <= 3:
            raise ValueError(f"Worldmap needs 1 to 3 axes, got {len(value)}")
        if any(size <= 0 for size in value):
            raise ValueError(f"Worldmap axes must be positive, got {value}")
        return value

    @field_validator("seed")
    @classmethod
    def _check_seed(cls, value: int) -> int:
        if value < 0:
            raise ValueError("Seed must be non-negative")
        return value

    @property
    def retries_on_failure(self) -> bool:
        return self.stop_policy == "success"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides) -> SolverConfig:
        """
        Build a config from TILECOLLAPSE_* environment variables.

        Recognised variables: TILECOLLAPSE_DIMENSIONS ("8x8", "4x4x2"),
        TILECOLLAPSE_SEED, TILECOLLAPSE_STOP_POLICY, TILECOLLAPSE_MAX_ATTEMPTS,
        TILECOLLAPSE_BORDER_TILE. Keyword overrides that are not None win
        over the environment.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        dims = env.get(f"{ENV_PREFIX}DIMENSIONS")
        if dims:
            values["dimensions"] = parse_dimensions(dims)
        for key in ("seed", "max_attempts", "border_tile"):
            raw = env.get(f"{ENV_PREFIX}{key.upper()}")
            if raw:
                values[key] = int(raw)
        policy = env.get(f"{ENV_PREFIX}STOP_POLICY")
        if policy:
            values["stop_policy"] = policy

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def parse_dimensions(text: str) -> tuple[int, ...]:
    """Parse "8x8" / "4,4,2" style dimension strings."""
    parts = text.lower().replace(",", "x").split("x")
    try:
        return tuple(int(part) for part in parts if part.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid dimensions: {text!r}") from exc
