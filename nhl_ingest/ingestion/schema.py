"""Normalized documents written to the teams and games collections."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from nhl_ingest.ingestion.store import SERVER_TIMESTAMP


class _Document(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        """Render the stored body, stamping ``updatedAt`` at write time."""
        body = self.model_dump(mode="json", by_alias=True, exclude=self._unset_fields())
        body["updatedAt"] = SERVER_TIMESTAMP
        return body

    def _unset_fields(self) -> set[str]:
        return set()


class TeamRecord(_Document):
    """
    One team's standing as of the ingested date.
    """

    id: str
    name: str
    city: str
    # Filled in by the standings ingestor once city/name are known.
    full_name: Optional[str] = None
    conference: Optional[str] = None
    division: Optional[str] = None

    wins: int = 0
    losses: int = 0
    overtime_losses: int = 0
    points: int = 0
    total_games: int = 0
    win_percentage: float = 0.0
    points_percentage: float = 0.0

    logo: Optional[str] = None
    raw: dict[str, Any] = Field(default_factory=dict)

    def _unset_fields(self) -> set[str]:
        return {"full_name"} if self.full_name is None else set()


class TeamSummary(_Document):
    id: Optional[int | str] = None
    name: str
    abbrev: Optional[str] = None
    score: int = 0
    logo_url: Optional[str] = None
    dark_logo_url: Optional[str] = None


class GameRawPayload(BaseModel):
    schedule: dict[str, Any] = Field(default_factory=dict)
    boxscore: dict[str, Any] = Field(default_factory=dict)


class GameRecord(_Document):
    game_id: int | str
    start_time: Optional[str] = None
    status: str
    home_team: TeamSummary
    away_team: TeamSummary
    raw: GameRawPayload
