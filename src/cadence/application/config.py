from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from cadence.domain.constants import (
    DEFAULT_LIMIT_DUE,
    DEFAULT_LIMIT_NEW,
    FSRS_DESIRED_RETENTION,
    FSRS_LEARNING_STEPS_MINUTES,
    FSRS_MAXIMUM_INTERVAL,
    FSRS_RELEARNING_STEPS_MINUTES,
)


def config_files() -> list[Path]:
    """Candidate config files, highest priority first."""
    return [
        Path.home() / ".config/cadence/config.toml",
        Path.home() / ".cadence.toml",
    ]


class FsrsSettings(BaseModel):
    """Explicit knobs for the FSRS adapter (no hidden library defaults)."""

    enable_fuzzing: bool = True
    enable_short_term: bool = False
    desired_retention: float = Field(default=FSRS_DESIRED_RETENTION, gt=0.0, lt=1.0)
    maximum_interval: int = Field(default=FSRS_MAXIMUM_INTERVAL, ge=1)
    learning_steps_minutes: list[float] = Field(
        default_factory=lambda: list(FSRS_LEARNING_STEPS_MINUTES)
    )
    relearning_steps_minutes: list[float] = Field(
        default_factory=lambda: list(FSRS_RELEARNING_STEPS_MINUTES)
    )
    parameters: list[float] | None = None


class AppConfig(BaseSettings):
    """
    Configuration model for Cadence.
    Supports loading from:
    1. Environment variables (CADENCE_*, nested with __)
    2. Config file (~/.config/cadence/config.toml or ~/.cadence.toml)
    3. Manual overrides passed by the host
    """

    model_config = SettingsConfigDict(
        env_prefix="CADENCE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Scheduling
    scheduler: Literal["fsrs", "sm2"] = "fsrs"
    fsrs: FsrsSettings = Field(default_factory=FsrsSettings)

    # Queue
    limit_due: int = Field(default=DEFAULT_LIMIT_DUE, ge=0)
    limit_new: int = Field(default=DEFAULT_LIMIT_NEW, ge=0)
    include_learning: bool = True
    exclude_empty_answers: bool = True
    deck_filter: Annotated[list[str], NoDecode] = Field(default_factory=list)

    # Logging
    log_level: str = "INFO"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # First existing file wins
        toml_file = next((f for f in config_files() if f.exists()), None)

        # Earlier sources take priority
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (
            init_settings,
            env_settings,
        )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        return str(v).upper()

    @field_validator("deck_filter", mode="before")
    @classmethod
    def split_deck_filter(cls, v: Any) -> Any:
        # Allow CADENCE_DECK_FILTER="Math,Biology"
        if isinstance(v, str):
            return [d.strip() for d in v.split(",") if d.strip()]
        return v


def resolve_config(overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/cadence/config.toml (if exists)
    3. Environment variables (CADENCE_*)
    4. overrides (None values are ignored)
    """
    cleaned = {k: v for k, v in (overrides or {}).items() if v is not None}
    return AppConfig(**cleaned)
