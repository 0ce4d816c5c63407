"""Lightweight configuration for the Strategikon engine and API."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from strategikon.domain.rules_config import DEFAULT_RULES, RulesConfig


class Settings(BaseSettings):
    """Application settings, overridable via ``STRATEGIKON_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="STRATEGIKON_", env_file=".env", env_file_encoding="utf-8"
    )

    log_level: str = Field(default="info", description="Root logger level")
    rules_version: str = Field(default="2.0", description="Combat ruleset version")
    damage_scale_factor: float = Field(
        default=DEFAULT_RULES.casualties.damage_scale_factor,
        gt=0.0,
        description="Fraction of net damage poured into casualty buckets",
    )
    max_turns: int = Field(
        default=DEFAULT_RULES.resolution.max_turns,
        ge=1,
        description="Turn limit before a battle is decided on remaining strength",
    )
    balance_iterations: int = Field(
        default=100, ge=1, description="Battles simulated per balance scenario"
    )
    max_concurrent_simulations: int = Field(
        default=4, ge=1, description="Battle simulations allowed to run at once"
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed to call the HTTP API",
    )

    def build_rules(self, base: RulesConfig = DEFAULT_RULES) -> RulesConfig:
        """Derive the rules configuration these settings describe."""

        return base.with_damage_scale(self.damage_scale_factor).with_max_turns(self.max_turns)


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
