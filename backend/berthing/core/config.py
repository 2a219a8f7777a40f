from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "berthing"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    # Observability Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "console"
    ENABLE_METRICS: bool = False
    METRICS_PORT: int = 8001

    # Planning defaults
    DEFAULT_PLAN_ALGORITHM: str = "FIFO"
    DEFAULT_PLAN_AUTHOR: str = "Unknown"
    # Identifiers in warnings are shortened to this many characters (0 = full)
    WARNING_ID_LENGTH: int = Field(default=8, ge=0)

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


settings = Settings()  # type: ignore
