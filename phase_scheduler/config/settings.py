from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from phase_scheduler.timeline.types import BufferPolicy, SpacingPolicy

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SchedulerSettings(BaseSettings):
    default_evaluation_days: int = Field(
        default=1,
        ge=0,
        validation_alias="PHASE_SCHEDULER_EVALUATION_DAYS",
        description="Peer evaluation days after each phase",
    )
    default_breathe_days: int = Field(
        default=0,
        ge=0,
        validation_alias="PHASE_SCHEDULER_BREATHE_DAYS",
        description="Rest days after each evaluation window",
    )
    default_number_of_phases: int = Field(default=3, ge=1, validation_alias="PHASE_SCHEDULER_NUMBER_OF_PHASES")
    default_phase_duration_days: int = Field(default=7, ge=1, validation_alias="PHASE_SCHEDULER_PHASE_DURATION_DAYS")
    default_auto_space_phases: bool = Field(default=True, validation_alias="PHASE_SCHEDULER_AUTO_SPACE_PHASES")
    default_preset_phase_duration_days: int = Field(
        default=7,
        ge=1,
        validation_alias="PHASE_SCHEDULER_PRESET_PHASE_DURATION_DAYS",
    )
    preset_catalog_path: Path | None = Field(
        default=None,
        validation_alias="PHASE_SCHEDULER_PRESET_CATALOG",
        description="YAML preset catalog (bundled catalog when unset)",
    )
    log_level: str = Field(default="INFO", validation_alias="PHASE_SCHEDULER_LOG_LEVEL")
    log_file: Path | None = Field(
        default=None,
        validation_alias="PHASE_SCHEDULER_LOG_FILE",
        description="Optional rotating log file in addition to stderr",
    )
    log_json: bool = Field(
        default=False,
        validation_alias="PHASE_SCHEDULER_LOG_JSON",
        description="Write the log file as JSON lines",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            logger.warning(f"Invalid PHASE_SCHEDULER_LOG_LEVEL '{value}' (expected one of {', '.join(LOG_LEVELS)}), using INFO")
            return "INFO"
        return level

    @field_validator("preset_catalog_path")
    @classmethod
    def validate_preset_catalog_path(cls, value: Path | None) -> Path | None:
        """Warn early when a configured catalog file is missing."""
        if value is not None and not value.exists():
            logger.warning(f"PHASE_SCHEDULER_PRESET_CATALOG points to a missing file: {value}. Preset loading will fail.")
        return value

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    def default_buffer_policy(self) -> BufferPolicy:
        return BufferPolicy(
            evaluation_days=self.default_evaluation_days,
            breathe_days=self.default_breathe_days,
        )

    def default_spacing_policy(self) -> SpacingPolicy:
        return SpacingPolicy(
            number_of_phases=self.default_number_of_phases,
            phase_duration_days=self.default_phase_duration_days,
            auto_space_phases=self.default_auto_space_phases,
        )


settings = SchedulerSettings()
