# tokenpulse/config/schema.py
"""
Configuration schema for tokenpulse.

Schema hierarchy:
- TokenPulseConfig: top-level config consumed by the API and CLI
- LoaderConfig: progressive loader timing
- RealtimeConfig: connection registry bounds
- LoggingConfig: logging settings

Durations are milliseconds unless stated otherwise.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

# =============================================================================
# Loader Configuration
# =============================================================================


class LoaderConfig(BaseModel):
    """
    Progressive loader timing.

    Both snake_case and the camelCase option names used by front-end
    producers are accepted:

        >>> LoaderConfig(skeletonTimeout=1500, minSkeletonDuration=150)
        >>> LoaderConfig(skeleton_timeout=1500, min_skeleton_duration=150)
    """

    skeleton_timeout: float = Field(
        default=2000,
        ge=0,
        validation_alias=AliasChoices("skeleton_timeout", "skeletonTimeout"),
        description="Hard ceiling after which the skeleton yields, even without data",
    )
    min_skeleton_duration: float = Field(
        default=200,
        ge=0,
        validation_alias=AliasChoices("min_skeleton_duration", "minSkeletonDuration"),
        description="Floor below which the skeleton is never hidden",
    )
    transition_duration: float = Field(
        default=300,
        ge=0,
        validation_alias=AliasChoices("transition_duration", "transitionDuration"),
        description="Advisory animation length between skeleton and content",
    )
    streaming_enabled: bool = Field(
        default=True,
        validation_alias=AliasChoices("streaming_enabled", "streamingEnabled"),
        description="If false, buffer updates and notify only on completion",
    )

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    @model_validator(mode="after")
    def check_bounds(self) -> "LoaderConfig":
        if self.min_skeleton_duration > self.skeleton_timeout:
            raise ValueError(
                f"min_skeleton_duration ({self.min_skeleton_duration}) must not exceed "
                f"skeleton_timeout ({self.skeleton_timeout})"
            )
        return self

    @classmethod
    def for_scans(cls) -> "LoaderConfig":
        """Tighter timings used on the scan results page."""
        return cls(
            skeleton_timeout=1500,
            min_skeleton_duration=150,
            transition_duration=250,
            streaming_enabled=True,
        )


# =============================================================================
# Realtime Configuration
# =============================================================================


class RealtimeConfig(BaseModel):
    """Bounds for the realtime connection registry."""

    max_connections: int = Field(default=1000, ge=1, description="Open connection limit")
    queue_size: int = Field(
        default=100, ge=1, description="Per-connection buffered message limit"
    )
    heartbeat_interval: float = Field(
        default=60.0, gt=0, description="Seconds between heartbeat frames"
    )

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"

    model_config = ConfigDict(extra="forbid")

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


# =============================================================================
# Main Configuration
# =============================================================================


class TokenPulseConfig(BaseModel):
    """
    Complete tokenpulse configuration.

    Examples:
        >>> from tokenpulse.config import load_config
        >>> config = load_config("tokenpulse.yaml")

        >>> config = TokenPulseConfig.from_dict({
        ...     "loader": {"skeleton_timeout": 1500},
        ...     "logging": {"level": "DEBUG"},
        ... })
    """

    loader: LoaderConfig = Field(default_factory=LoaderConfig, description="Loader timing")
    realtime: RealtimeConfig = Field(
        default_factory=RealtimeConfig, description="Realtime registry bounds"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_dict(cls, data: dict) -> "TokenPulseConfig":
        return cls.model_validate(data)
