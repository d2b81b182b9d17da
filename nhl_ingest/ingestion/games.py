"""Games flow: fetch one date's schedule, pull boxscores for started games, upsert."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable

from nhl_ingest.ingestion.constants import GAME_STATES_FOR_DETAILS, GAMES_COLLECTION
from nhl_ingest.ingestion.errors import StorageError, TransformationError
from nhl_ingest.ingestion.transformers import extract_game_id, transform_game

if TYPE_CHECKING:
    from nhl_ingest.ingestion.nhl_client import NhlApiClient
    from nhl_ingest.ingestion.store import UpsertStore
    from nhl_ingest.ingestion.sync import IngestResult

logger = logging.getLogger(__name__)


def flatten_schedule(schedule: dict[str, Any]) -> list[Any]:
    """Return the games of every ``gameWeek`` entry in upstream order."""

    weeks = schedule.get("gameWeek")
    if not isinstance(weeks, list):
        return []

    games: list[Any] = []
    for week in weeks:
        if not isinstance(week, dict):
            continue
        week_games = week.get("games")
        if isinstance(week_games, list):
            games.extend(week_games)
    return games


def should_fetch_details(raw_game: dict[str, Any]) -> bool:
    state = raw_game.get("gameState")
    return isinstance(state, str) and state in GAME_STATES_FOR_DETAILS


def _abbrev(raw_game: dict[str, Any], side: str) -> Any:
    team = raw_game.get(side)
    return team.get("abbrev") if isinstance(team, dict) else None


def _process_game(
    raw_game: Any,
    client: NhlApiClient,
    upserter: UpsertStore,
    result: IngestResult,
    collection: str,
) -> int | str:
    game_id = extract_game_id(raw_game)

    boxscore: dict[str, Any] = {}
    if should_fetch_details(raw_game):
        boxscore = client.fetch_boxscore(game_id)
        if boxscore:
            result.boxscores_fetched += 1

    game = transform_game(raw_game, boxscore)
    upserter.upsert(collection, game.game_id, game.to_document(), preserve_created_at=False)
    return game_id


def _upsert_games(
    games: Iterable[Any],
    game_date: str,
    client: NhlApiClient,
    upserter: UpsertStore,
    result: IngestResult,
    collection: str,
) -> None:
    for raw_game in games:
        try:
            game_id = _process_game(raw_game, client, upserter, result, collection)
        except (TransformationError, StorageError):
            result.errors += 1
            logger.exception(
                "Failed ingesting game date=%s game_id=%s",
                game_date,
                raw_game.get("id") if isinstance(raw_game, dict) else None,
            )
            continue

        result.games_upserted += 1
        logger.info(
            "Ingested/Updated Game: %s (%s @ %s)",
            game_id,
            _abbrev(raw_game, "awayTeam"),
            _abbrev(raw_game, "homeTeam"),
        )


def ingest_games_for_date(
    game_date: str,
    client: NhlApiClient,
    upserter: UpsertStore,
    result: IngestResult,
    *,
    collection: str = GAMES_COLLECTION,
) -> None:
    schedule = client.fetch_schedule(game_date)
    games = flatten_schedule(schedule)
    result.games_fetched += len(games)
    logger.info("Game schedule date=%s found %s games", game_date, len(games))

    _upsert_games(games, game_date, client, upserter, result, collection)
