from __future__ import annotations

from datetime import date, timedelta

from nhl_ingest.ingestion.constants import MAX_DAYS_TO_INGEST
from nhl_ingest.ingestion.errors import ValidationError


def get_date_range(days_to_ingest: int, today: date | None = None) -> list[str]:
    """Return ISO dates from ``days_to_ingest`` days ago through today, oldest first."""

    if isinstance(days_to_ingest, bool) or not isinstance(days_to_ingest, int):
        raise ValidationError("days_to_ingest", f"expected an integer, got {days_to_ingest!r}")
    if days_to_ingest < 0:
        raise ValidationError("days_to_ingest", "must not be negative")
    if days_to_ingest > MAX_DAYS_TO_INGEST:
        raise ValidationError(
            "days_to_ingest",
            f"must be at most {MAX_DAYS_TO_INGEST}, got {days_to_ingest}",
        )

    end = today or date.today()
    return [
        (end - timedelta(days=offset)).isoformat()
        for offset in range(days_to_ingest, -1, -1)
    ]
