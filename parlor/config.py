"""
Configuration - Settings read from the environment.

Every field maps to a PARLOR_-prefixed environment variable (or a .env
file) and has a development default so a bare `parlor serve` works:
- PARLOR_ENV, PARLOR_LOG_LEVEL
- PARLOR_ALLOWED_ORIGINS (comma separated)
- PARLOR_RANDOM_SEED (reproducible dev servers)
- PARLOR_QUICK_DRAW_TOTAL_ROUNDS, PARLOR_QUICK_DRAW_ROUND_SECONDS,
  PARLOR_QUICK_DRAW_MAX_PLAYERS, PARLOR_WORD_GUESS_MAX_GUESSES
"""

from __future__ import annotations
from typing import Annotated, Optional
import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PARLOR_", env_file=".env", extra="ignore")

    env: str = "development"
    log_level: str = "INFO"
    allowed_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])
    # Fixed seed for reproducible dev servers; None draws from the OS
    random_seed: Optional[int] = None

    quick_draw_total_rounds: int = Field(3, ge=1)
    quick_draw_round_seconds: int = Field(80, ge=1)
    quick_draw_max_players: int = Field(8, ge=2)
    word_guess_max_guesses: int = Field(6, ge=1)

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [o.strip() for o in value.split(",") if o.strip()]
        return value

    @field_validator("random_seed", mode="before")
    @classmethod
    def _blank_seed(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


def load_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    level = (settings if settings is not None else load_settings()).log_level
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
