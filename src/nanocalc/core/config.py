"""Configuration models and I/O for the compute engine.

Pydantic models for solver, validation, cache and engine settings with
YAML/JSON I/O. Every field has a default, so an empty file is a valid
configuration.
"""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from nanocalc.core.errors import ConfigError


class SolverSettings(BaseModel):
    """Mie series truncation behaviour."""

    truncation_tolerance: float = Field(
        default=1e-8,
        ge=0.0,
        lt=1.0,
        description="Stop once a term falls below this fraction of the largest term",
    )
    strict_convergence: bool = Field(
        default=True,
        description="Raise ConvergenceError instead of returning an unconverged result",
    )


class ValidationLimits(BaseModel):
    """Bounds of the solver's well-characterized regime (warnings, not errors)."""

    min_size_parameter: float = Field(default=0.01, gt=0.0, description="Lower size parameter")
    max_size_parameter: float = Field(default=1000.0, gt=0.0, description="Upper size parameter")
    max_extinction_coefficient: float = Field(
        default=10.0, gt=0.0, description="Particle k above which absorption is flagged"
    )

    @model_validator(mode="after")
    def validate_window(self) -> ValidationLimits:
        """Ensure the size parameter window is not empty."""
        if self.min_size_parameter >= self.max_size_parameter:
            raise ValueError(
                "min_size_parameter must be smaller than max_size_parameter, got "
                f"{self.min_size_parameter} >= {self.max_size_parameter}"
            )
        return self


class CacheSettings(BaseModel):
    """Result cache settings."""

    enabled: bool = Field(default=True, description="Reuse results of identical requests")
    buckets: int = Field(default=16, description="Number of independently locked key buckets")

    @field_validator("buckets")
    @classmethod
    def validate_buckets(cls, v: int) -> int:
        """Validate bucket count is reasonable."""
        if not 1 <= v <= 4096:
            raise ValueError(f"Cache buckets must be between 1 and 4096, got {v}")
        return v


class EngineConfig(BaseModel):
    """Complete compute engine configuration."""

    max_workers: int | None = Field(
        default=None, description="Worker threads for sweeps (None: executor default)"
    )
    solver: SolverSettings = Field(default_factory=SolverSettings)
    limits: ValidationLimits = Field(default_factory=ValidationLimits)
    cache: CacheSettings = Field(default_factory=CacheSettings)

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int | None) -> int | None:
        """Validate worker count is positive."""
        if v is not None and v < 1:
            raise ValueError(f"max_workers must be at least 1, got {v}")
        return v


def load_config(path: str | Path) -> EngineConfig:
    """Load configuration from YAML or JSON file.

    Args:
        path: Path to configuration file

    Returns:
        Validated EngineConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If the file cannot be parsed or holds invalid values
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to parse config {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a mapping, got {type(data).__name__}")

    try:
        return EngineConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e


def save_config(config: EngineConfig, path: str | Path) -> None:
    """Save configuration to YAML or JSON file.

    Args:
        config: Configuration to save
        path: Output file path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json", exclude_unset=True)

    with open(path, "w", encoding="utf-8") as f:
        if path.suffix.lower() in [".yaml", ".yml"]:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(data, f, indent=2)


def round_trip_config(config: EngineConfig) -> EngineConfig:
    """Serialize a configuration to YAML and back."""
    data = config.model_dump(mode="json", exclude_unset=True)
    yaml_str = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    loaded_data = yaml.safe_load(yaml_str) or {}
    return EngineConfig(**loaded_data)


__all__ = [
    "SolverSettings",
    "ValidationLimits",
    "CacheSettings",
    "EngineConfig",
    "load_config",
    "save_config",
    "round_trip_config",
]
