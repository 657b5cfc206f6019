"""Lightweight configuration for the warcouncil tools."""

from __future__ import annotations

from dataclasses import replace
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from warcouncil.domain.rules_config import DEFAULT_RULES, RulesConfig


class Settings(BaseSettings):
    """Minimal application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    data_dir: Path = Field(default=Path("worlds"), description="Where world snapshots live")
    rules_version: str = Field(default="1.0", description="Ruleset version used by the domain")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed to call the HTTP API",
    )
    log_level: str = Field(default="INFO", description="Root logging level for main.py")
    simulation_seed: str = Field(
        default="warcouncil", description="Base seed for batch simulations and the API world"
    )
    simulation_max_turns: int = Field(
        default=200, description="Turn cap for one simulated game", gt=0
    )
    simulation_workers: int = Field(
        default=1, description="Worker threads used by batch simulations", ge=1
    )
    battle_history_limit: int = Field(
        default=50, description="Battle reports kept in the in-memory history", gt=0
    )
    allow_attacks_after_war_required: bool = Field(
        default=True,
        description="Allow (and log) attacks once a war declaration is required instead of rejecting them",
    )

    def rules(self, base: RulesConfig = DEFAULT_RULES) -> RulesConfig:
        """Overlay the tunable settings onto ``base``."""

        return replace(
            base,
            war=replace(
                base.war, allow_attacks_after_war_required=self.allow_attacks_after_war_required
            ),
            simulation=replace(
                base.simulation,
                max_turns=self.simulation_max_turns,
                battle_history_limit=self.battle_history_limit,
            ),
        )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    settings = Settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    return settings
