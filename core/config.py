"""
Pydantic-based configuration for the network and host diagnostics.

All knobs are exposed via MMDEBUG_* environment variables (or a local .env)
so probe defaults can be tuned per environment without touching the CLI.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MMDEBUG_", case_sensitive=False, env_file=".env", extra="ignore")

    # Probe defaults
    timeout_s: float = Field(10.0, gt=0, description="probe timeout in seconds")
    port: int = Field(443, ge=1, le=65535)

    # One deadline for dial + upgrade + handshake; False bounds the dial only
    deadline_covers_exchange: bool = Field(True)

    # CA file used instead of the system trust store
    ca_bundle: Optional[str] = Field(None)

    # Directory-service STARTTLS reply handling
    ldap_read_size: int = Field(1024, ge=1)
    ldap_min_response_bytes: int = Field(10, ge=1)

    # Host diagnostics
    process_name: str = Field("mattermost")
    env_prefix_filter: str = Field("MM_")
    procfs_root: str = Field("/proc")

    log_level: str = Field("WARNING")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(LOG_LEVELS)}")
        return v


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
