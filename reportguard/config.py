"""
Runtime settings for reportguard.

Settings are read from the environment (prefix ``REPORTGUARD_``) once, at process
start, and handed to the store, the account directory and the cascade controller.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from reportguard.cascade.policy import ThresholdPolicy

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="REPORTGUARD_", env_file=".env", extra="ignore")

    service_name: str = "reportguard"
    log_level: str = "INFO"
    data_dir: Path = DEFAULT_DATA_DIR

    # Collection names inside the document store
    reports_collection: str = "reports"
    posts_collection: str = "posts"
    profiles_collection: str = "profiles"
    accounts_collection: str = "accounts"

    # Escalation thresholds
    item_block_threshold: int = Field(25, ge=1)
    profile_block_threshold: int = Field(10, ge=1)
    account_block_threshold: int = Field(5, ge=1)

    @field_validator("log_level")
    @classmethod
    def normalise_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return v

    def thresholds(self) -> ThresholdPolicy:
        return ThresholdPolicy(
            item=self.item_block_threshold,
            profile=self.profile_block_threshold,
            account=self.account_block_threshold,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
