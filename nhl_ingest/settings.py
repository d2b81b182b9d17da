from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_NHL_API_BASE = "https://api-web.nhle.com/v1"
DEFAULT_DATABASE_URL = "sqlite:///./nhl_ingest.db"


@dataclass(frozen=True)
class IngestSettings:
    nhl_api_base: str = DEFAULT_NHL_API_BASE
    database_url: str = DEFAULT_DATABASE_URL
    teams_collection: str = "teams"
    games_collection: str = "games"
    request_timeout_seconds: float = 12.0
    request_retries: int = 3
    request_backoff_seconds: float = 0.5


def _env_number(name: str, default: float, cast):
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using default %s", name, raw, default)
        return default


def load_settings() -> IngestSettings:
    """Build settings from the process environment."""

    defaults = IngestSettings()
    return IngestSettings(
        nhl_api_base=(os.getenv("NHL_API_BASE") or defaults.nhl_api_base).rstrip("/"),
        database_url=os.getenv("DATABASE_URL") or defaults.database_url,
        teams_collection=os.getenv("TEAMS_COLLECTION") or defaults.teams_collection,
        games_collection=os.getenv("GAMES_COLLECTION") or defaults.games_collection,
        request_timeout_seconds=_env_number(
            "NHL_API_TIMEOUT_SECONDS", defaults.request_timeout_seconds, float
        ),
        request_retries=max(
            1, _env_number("NHL_API_RETRIES", defaults.request_retries, int)
        ),
        request_backoff_seconds=_env_number(
            "NHL_API_BACKOFF_SECONDS", defaults.request_backoff_seconds, float
        ),
    )
