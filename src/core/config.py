"""
Application settings.

Everything can be overridden with environment variables prefixed by XIANGQI_,
ex) XIANGQI_DATABASE_URL=sqlite:///:memory:
"""

import os
from typing import Mapping, Self

from pydantic import BaseModel, ValidationError, field_validator, model_validator

from src.core.exceptions import ConfigurationError
from src.core.shared_types import Difficulty, GameMode, Side

ENV_PREFIX = "XIANGQI_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    database_url: str = "sqlite:///xiangqi.db"
    log_level: str = "INFO"
    # seconds the opponent "thinks" before its move gets applied
    opponent_delay_min: float = 0.5
    opponent_delay_max: float = 1.5
    default_difficulty: Difficulty = Difficulty.EASY
    default_mode: GameMode = GameMode.LOCAL
    default_human_side: Side = Side.RED

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        if value.upper() not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")
        return value.upper()

    @model_validator(mode="after")
    def validate_delays(self) -> Self:
        if self.opponent_delay_min < 0 or self.opponent_delay_max < self.opponent_delay_min:
            raise ValueError(
                f"Need 0 <= opponent_delay_min <= opponent_delay_max. Got {self.opponent_delay_min} and {self.opponent_delay_max}"
            )
        return self

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Self:
        """Collect XIANGQI_* variables (unknown ones are ignored) and validate them."""
        environ = os.environ if environ is None else environ
        values = {
            name: environ[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in environ
        }
        try:
            return cls.model_validate(values)
        except ValidationError as error:
            raise ConfigurationError(f"Invalid settings: {error}") from error


settings = Settings.from_env()
