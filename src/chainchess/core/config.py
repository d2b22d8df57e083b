"""Application settings, read once from the environment."""

import logging
import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "CHAINCHESS_"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    database_url: str = "sqlite:///chainchess.db"
    log_level: str = "INFO"
    initial_rating: int = 1200
    k_factor: int = Field(default=32, gt=0)
    # games flagged before this many plies are aborted instead of lost on time
    abort_threshold_plies: int = Field(default=2, ge=0)
    lobby_entry_ttl: float = Field(default=300.0, gt=0)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        """Pick up every field that has a CHAINCHESS_<FIELD NAME> variable set. Pydantic does the type conversion."""
        environ = dict(os.environ) if environ is None else environ
        values = {
            name: environ[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in environ
        }
        return cls(**values)


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )
