"""Standings flow: fetch one date's standings and upsert every team."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nhl_ingest.ingestion.constants import TEAMS_COLLECTION
from nhl_ingest.ingestion.errors import StorageError, TransformationError
from nhl_ingest.ingestion.transformers import transform_team

if TYPE_CHECKING:
    from nhl_ingest.ingestion.nhl_client import NhlApiClient
    from nhl_ingest.ingestion.store import UpsertStore
    from nhl_ingest.ingestion.sync import IngestResult

logger = logging.getLogger(__name__)


def _full_name(city: str | None, name: str | None) -> str:
    return f"{city or ''} {name or ''}".strip()


def ingest_standings_for_date(
    standings_date: str,
    client: NhlApiClient,
    upserter: UpsertStore,
    result: IngestResult,
    *,
    collection: str = TEAMS_COLLECTION,
) -> None:
    logger.info("Starting NHL team standings ingestion for date=%s", standings_date)

    payload = client.fetch_standings(standings_date)
    teams = payload.get("standings")
    if not isinstance(teams, list):
        teams = []

    result.teams_fetched += len(teams)
    logger.info("Standings date=%s found %s teams", standings_date, len(teams))

    for raw_team in teams:
        team_id = None
        try:
            team = transform_team(raw_team)
            team_id = team.id
            team = team.model_copy(update={"full_name": _full_name(team.city, team.name)})
            upserter.upsert(collection, team.id, team.to_document())
        except (TransformationError, StorageError):
            result.errors += 1
            logger.exception(
                "Failed ingesting team date=%s team_id=%s",
                standings_date,
                team_id,
            )
            continue

        result.teams_upserted += 1
        logger.info("Ingested/Updated Team: %s (%s)", team.full_name, team.id)
