"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - nft_tiers is validated into a TierTable at load time (bad tables fail fast)

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - nft_tiers as a JSON mapping in env (NFT_TIERS='{"Bronze Supporter": 1000}')
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.nft_tiers import (
    DEFAULT_BASE_TIER, DEFAULT_TIERS, TierTable, build_tier_table,
)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://fund:fund@db:5432/milestone_fund"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Concurrency
    project_lock_timeout_seconds: float = 10.0

    # NFT issuance
    nft_tiers: dict[str, int] = dict(DEFAULT_TIERS)
    nft_base_tier: str = DEFAULT_BASE_TIER
    nft_token_prefix: str = "NFT"

    @model_validator(mode="after")
    def validate_tier_table(self):
        try:
            build_tier_table(self.nft_tiers, self.nft_base_tier)
        except ValueError as e:
            raise ValueError(f"invalid NFT tier table: {e}") from e
        return self

    @property
    def tier_table(self) -> TierTable:
        return build_tier_table(self.nft_tiers, self.nft_base_tier)

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
