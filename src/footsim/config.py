"""Configuration management for footsim."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(ValueError):
    """Raised when footsim configuration validation fails."""


class FootsimConfig(BaseSettings):
    """Defaults applied by the engine entry points."""

    # Simulation defaults
    default_alpha: float = Field(
        default=1.3,
        description="Recency exponent used when a request does not set one",
        alias="FOOTSIM_ALPHA",
    )

    default_iterations: int = Field(
        default=18_000,
        description="Monte Carlo trials per simulated segment",
        alias="FOOTSIM_ITERATIONS",
    )

    seed: int | None = Field(
        default=None,
        description="Seed for the random source; unset means nondeterministic",
        alias="FOOTSIM_SEED",
    )

    progress_steps: int = Field(
        default=20,
        description="Number of progress checkpoints per simulation run",
        alias="FOOTSIM_PROGRESS_STEPS",
    )

    initial_delay_seconds: float = Field(
        default=0.0,
        description="Pause before adjustment in asynchronous runs",
        alias="FOOTSIM_INITIAL_DELAY",
    )

    # Coupon thresholds
    coupon_threshold: float = Field(
        default=70.0,
        description="Confidence percentage required for the standard coupon",
        alias="FOOTSIM_COUPON_THRESHOLD",
    )

    high_confidence_threshold: float = Field(
        default=75.0,
        description="Confidence percentage required for the high-confidence coupon",
        alias="FOOTSIM_HIGH_CONFIDENCE_THRESHOLD",
    )

    # History and logging
    history_limit: int = Field(
        default=50,
        description="Maximum number of reports kept in a simulation history",
        alias="FOOTSIM_HISTORY_LIMIT",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level used by the command line",
        alias="FOOTSIM_LOG_LEVEL",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


# Global configuration instance
config = FootsimConfig()


def get_config() -> FootsimConfig:
    """Get the current configuration."""
    return config


def update_config(**kwargs) -> None:
    """Update configuration settings."""
    global config
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
        else:
            raise ValueError(f"Unknown configuration option: {key}")


def reset_config() -> None:
    """Reset configuration to defaults."""
    global config
    config = FootsimConfig()


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise TypeError(f"Configuration at {path} must be a mapping")
    return dict(data)


def load_config(path: str | os.PathLike[str] | None = None) -> FootsimConfig:
    """Build a configuration from an optional YAML file.

    Keys in the file use the field names (``coupon_threshold``); unset
    fields fall back to ``FOOTSIM_*`` environment variables and ``.env``.
    """

    if path is None:
        return FootsimConfig()
    return FootsimConfig(**_load_yaml(Path(path)))


def validate_config(settings: FootsimConfig) -> list[str]:
    """Validate ``settings``.

    Returns:
        A list of warning messages. :class:`ConfigurationError` is raised if
        any fatal issues are detected.
    """

    errors: list[str] = []
    warnings: list[str] = []

    if not 0 <= settings.default_alpha <= 3:
        errors.append("default_alpha must be within [0, 3]")
    elif settings.default_alpha < 1:
        warnings.append(
            "default_alpha below 1 weights older matches more heavily than recent ones"
        )
    if not 1_000 <= settings.default_iterations <= 20_000:
        errors.append("default_iterations must be within [1000, 20000]")
    if settings.progress_steps <= 0:
        errors.append("progress_steps must be greater than zero")
    if settings.initial_delay_seconds < 0:
        errors.append("initial_delay_seconds must be non-negative")
    for name in ("coupon_threshold", "high_confidence_threshold"):
        value = getattr(settings, name)
        if not 0 < value < 100:
            errors.append(f"{name} must be between 0 and 100")
    if settings.high_confidence_threshold < settings.coupon_threshold:
        errors.append("high_confidence_threshold cannot be below coupon_threshold")
    elif settings.high_confidence_threshold == settings.coupon_threshold:
        warnings.append("both coupons use the same threshold and will be identical")
    if settings.history_limit <= 0:
        errors.append("history_limit must be greater than zero")

    if errors:
        bullet_list = "\n".join(f"- {message}" for message in errors)
        raise ConfigurationError(f"Configuration validation failed:\n{bullet_list}")

    return warnings


__all__ = [
    "ConfigurationError",
    "FootsimConfig",
    "get_config",
    "load_config",
    "reset_config",
    "update_config",
    "validate_config",
]
