"""Sync NHL standings and games into the document store, one date at a time."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date

from nhl_ingest.ingestion.dates import get_date_range
from nhl_ingest.ingestion.games import ingest_games_for_date
from nhl_ingest.ingestion.nhl_client import NhlApiClient
from nhl_ingest.ingestion.standings import ingest_standings_for_date
from nhl_ingest.ingestion.store import UpsertStore
from nhl_ingest.settings import IngestSettings

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    dates: list[str] = field(default_factory=list)
    teams_fetched: int = 0
    teams_upserted: int = 0
    games_fetched: int = 0
    games_upserted: int = 0
    boxscores_fetched: int = 0
    errors: int = 0
    failed_dates: list[str] = field(default_factory=list)


def ingest(
    days_to_ingest: int,
    client: NhlApiClient,
    upserter: UpsertStore,
    *,
    settings: IngestSettings | None = None,
    today: date | None = None,
) -> IngestResult:
    """Ingest standings, then games, for each date from N days ago through today.

    A failure while processing one date is logged and the run moves on to the
    next date.
    """

    settings = settings or IngestSettings()
    dates = get_date_range(days_to_ingest, today=today)
    result = IngestResult(dates=dates)
    logger.info(
        "Starting combined NHL data ingestion for %s dates: %s",
        len(dates),
        ", ".join(dates),
    )

    for game_date in dates:
        logger.info("Starting processing for date=%s", game_date)
        try:
            ingest_standings_for_date(
                game_date,
                client,
                upserter,
                result,
                collection=settings.teams_collection,
            )
            ingest_games_for_date(
                game_date,
                client,
                upserter,
                result,
                collection=settings.games_collection,
            )
        except Exception:
            result.failed_dates.append(game_date)
            logger.exception("CRITICAL ERROR processing data for date=%s", game_date)

    logger.info("Combined ingestion finished for %s dates", len(dates))
    return result
