"""CLI entrypoint for scheduled ingestion runs."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from dotenv import load_dotenv

from nhl_ingest.db import build_engine
from nhl_ingest.ingestion.constants import MAX_DAYS_TO_INGEST
from nhl_ingest.ingestion.errors import ValidationError
from nhl_ingest.ingestion.nhl_client import NhlApiClient
from nhl_ingest.ingestion.store import SqlDocumentStore, UpsertStore
from nhl_ingest.ingestion.sync import IngestResult, ingest
from nhl_ingest.settings import IngestSettings, load_settings

logger = logging.getLogger(__name__)


def _non_negative_int(raw: str) -> int:
    try:
        days = int(raw, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid days argument: {raw!r}") from None
    if days < 0:
        raise argparse.ArgumentTypeError(f"Invalid days argument: {raw!r} (must be >= 0)")
    return days


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Ingest NHL standings and games for today and the previous N days.",
        epilog="Examples: nhl-ingest (today only), nhl-ingest 7 (last 7 days).",
    )
    parser.add_argument(
        "days",
        nargs="?",
        type=_non_negative_int,
        default=0,
        help="Number of past days to ingest in addition to today (default: 0).",
    )
    return parser.parse_args(argv)


def _warn_if_large(days: int) -> None:
    if days > MAX_DAYS_TO_INGEST:
        logger.warning(
            "Ingesting %s days. This may take a while and consume API quota.",
            days,
        )


def run_ingestion(days: int, settings: IngestSettings) -> IngestResult:
    engine = build_engine(settings.database_url)
    try:
        upserter = UpsertStore(SqlDocumentStore(engine))
        client = NhlApiClient.from_settings(settings)
        return ingest(days, client, upserter, settings=settings)
    finally:
        engine.dispose()


def main(argv: Sequence[str] | None = None) -> None:
    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    args = _parse_args(argv)
    _warn_if_large(args.days)
    settings = load_settings()

    try:
        result = run_ingestion(args.days, settings)
    except ValidationError as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc

    logger.info(
        "Done: dates=%s teams=%s/%s games=%s/%s boxscores=%s errors=%s failed_dates=%s",
        len(result.dates),
        result.teams_upserted,
        result.teams_fetched,
        result.games_upserted,
        result.games_fetched,
        result.boxscores_fetched,
        result.errors,
        ",".join(result.failed_dates) or "none",
    )
    if result.failed_dates:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
