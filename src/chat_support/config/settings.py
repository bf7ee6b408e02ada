from functools import lru_cache
from typing import Literal
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment.

    Queue policy values are read once at startup and handed to the
    components that need them; nothing reads them from a global at run time.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Chat Support Service"
    app_version: str = "0.1.0"
    environment: Literal["local", "dev", "staging", "prod"] = "local"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Observability
    log_level: int = 20  # INFO by default (DEBUG=10, INFO=20, WARNING=30, ERROR=40)
    log_format: Literal["json", "console"] = "json"
    metrics_enabled: bool = True

    # Monitoring loop
    monitor_enabled: bool = True
    monitor_interval_seconds: float = Field(default=1.0, gt=0)
    session_liveness_seconds: float = Field(default=3.0, gt=0)

    # Capacity policy
    queue_size_multiplier: float = Field(default=1.5, gt=0)
    overflow_deactivation_ratio: float = Field(default=0.75, gt=0, le=1)
    # Sized for 6 overflow juniors: 6 * 4 * 1.5. Not derived from the roster.
    overflow_queue_buffer: int = Field(default=36, ge=0)
    release_agent_on_expiry: bool = False

    @property
    def is_production(self) -> bool:
        return self.environment == "prod"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
