"""Map raw NHL API payloads onto TeamRecord / GameRecord."""

from __future__ import annotations

from typing import Any, Mapping

import pydantic

from nhl_ingest.ingestion.constants import UNKNOWN_STATUS, UNKNOWN_TEAM
from nhl_ingest.ingestion.errors import TransformationError
from nhl_ingest.ingestion.schema import GameRawPayload, GameRecord, TeamRecord, TeamSummary


def _safe_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _safe_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _localized(value: Any) -> Any:
    # The API wraps display strings as {"default": "...", "fr": "..."}.
    if isinstance(value, Mapping):
        return value.get("default")
    return value


def _safe_str(value: Any) -> str | None:
    value = _localized(value)
    return value if isinstance(value, str) else None


def _safe_id(value: Any) -> int | str | None:
    if isinstance(value, bool):
        return None
    return value if isinstance(value, (int, str)) else None


def _first_present(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _team_name(team: Mapping[str, Any]) -> str:
    name = team.get("name")
    if isinstance(name, Mapping) and isinstance(name.get("default"), str):
        return name["default"]
    if isinstance(name, str):
        return name
    abbrev = team.get("abbrev")
    if abbrev:
        return str(abbrev)
    return UNKNOWN_TEAM


def transform_team(raw_team: Mapping[str, Any]) -> TeamRecord:
    """Normalize one entry of the standings payload.

    ``fullName`` is left unset; the standings ingestor derives it.
    """

    if not isinstance(raw_team, Mapping):
        raise TransformationError("team", "standing entry is not an object")

    team_id = _localized(raw_team.get("teamAbbrev"))
    if not team_id:
        raise TransformationError("team", "missing teamAbbrev")

    try:
        return TeamRecord(
            id=str(team_id),
            name=_safe_str(raw_team.get("teamName")) or "Unknown Team",
            city=_safe_str(raw_team.get("placeName")) or "Unknown City",
            logo=_safe_str(raw_team.get("teamLogo")) or None,
            conference=_safe_str(raw_team.get("conferenceName")),
            division=_safe_str(raw_team.get("divisionName")),
            wins=_safe_int(raw_team.get("wins")) or 0,
            losses=_safe_int(raw_team.get("losses")) or 0,
            overtime_losses=_safe_int(raw_team.get("otLosses")) or 0,
            points=_safe_int(raw_team.get("points")) or 0,
            total_games=_safe_int(raw_team.get("gamesPlayed")) or 0,
            win_percentage=_safe_float(raw_team.get("winPctg")) or 0.0,
            points_percentage=_safe_float(raw_team.get("pointPctg")) or 0.0,
            raw=dict(raw_team),
        )
    except pydantic.ValidationError as exc:
        raise TransformationError("team", str(exc), team_id) from exc


def extract_game_id(raw_game: Any) -> int | str:
    if not isinstance(raw_game, Mapping):
        raise TransformationError("game", "schedule entry is not an object")
    game_id = raw_game.get("id")
    if game_id is None or game_id == "":
        raise TransformationError("game", "missing id")
    return game_id


def _team_side(
    side: str,
    game_id: int | str,
    raw_game: Mapping[str, Any],
    raw_boxscore: Mapping[str, Any],
) -> TeamSummary:
    team = raw_game.get(side)
    if team is None:
        team = {}
    if not isinstance(team, Mapping):
        raise TransformationError("game", f"{side} is not an object", game_id)

    box_team = raw_boxscore.get(side)
    box_score = box_team.get("score") if isinstance(box_team, Mapping) else None
    score = _first_present(_safe_int(box_score), _safe_int(team.get("score")))

    return TeamSummary(
        id=_safe_id(team.get("id")),
        name=_team_name(team),
        abbrev=_safe_str(team.get("abbrev")),
        score=score if score is not None else 0,
        logo_url=_safe_str(team.get("logo")) or None,
        dark_logo_url=_safe_str(team.get("darkLogo")) or None,
    )


def transform_game(
    raw_game: Mapping[str, Any],
    raw_boxscore: Mapping[str, Any] | None = None,
) -> GameRecord:
    """Normalize one schedule entry, preferring boxscore scores when present."""

    game_id = extract_game_id(raw_game)
    if not isinstance(raw_boxscore, Mapping):
        raw_boxscore = {}

    try:
        return GameRecord(
            game_id=game_id,
            start_time=_safe_str(raw_game.get("startTimeUTC")),
            status=_safe_str(raw_game.get("gameState")) or UNKNOWN_STATUS,
            home_team=_team_side("homeTeam", game_id, raw_game, raw_boxscore),
            away_team=_team_side("awayTeam", game_id, raw_game, raw_boxscore),
            raw=GameRawPayload(schedule=dict(raw_game), boxscore=dict(raw_boxscore)),
        )
    except pydantic.ValidationError as exc:
        raise TransformationError("game", str(exc), game_id) from exc
