"""Pydantic settings for the rebalancing engine configuration."""

from functools import lru_cache
from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from src.core.constants.generic import DEFAULT_REBALANCE_ROUNDS, SECONDS_PER_YEAR


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Allocator
    rebalance_rounds: int = Field(
        default=DEFAULT_REBALANCE_ROUNDS, ge=1, le=10_000, description="Number of greedy allocation rounds"
    )
    excluded_market_ids: Annotated[List[str], NoDecode] = Field(
        default_factory=list, description="Market unique keys never considered for rebalancing"
    )
    rebalance_fee_tenths_bps: int = Field(
        default=10, ge=0, le=100_000, description="Fee on moved capital, in tenths of a basis point"
    )

    # Earnings
    seconds_per_year: int = Field(default=SECONDS_PER_YEAR, gt=0, description="Annualization base in seconds")

    # Reporting
    report_max_distribution_items: int = Field(default=6, ge=2, le=50, description="Max slices in distribution")
    log_level: str = Field(default="WARNING", description="Root logging level")

    @field_validator("excluded_market_ids", mode="before")
    @classmethod
    def parse_market_ids(cls, v):
        """Parse comma-separated market ids."""
        if isinstance(v, str):
            if not v.strip():
                return []
            return [key.strip() for key in v.split(",") if key.strip()]
        return v or []

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Upper-case and validate the logging level name."""
        level = str(v or "WARNING").upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def excluded_market_set(self) -> set:
        """Excluded market ids as a set for fast lookups."""
        return set(self.excluded_market_ids)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
