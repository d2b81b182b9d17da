"""NHL web API client for schedules, boxscores and standings."""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from nhl_ingest.settings import IngestSettings

logger = logging.getLogger(__name__)
DEFAULT_USER_AGENT = "nhl-ingest/1.0"
MAX_BODY_SNIPPET = 300


class NhlApiClient:
    """Fetches parsed JSON from the NHL API.

    Every failure is logged and returned as ``{}``; callers never see an
    exception from this class. An empty payload can therefore mean either
    "nothing scheduled" or "the request failed".
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 12.0,
        retries: int = 3,
        backoff_seconds: float = 0.5,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.retries = max(1, retries)
        self.backoff_seconds = backoff_seconds

    @classmethod
    def from_settings(cls, settings: IngestSettings) -> "NhlApiClient":
        return cls(
            settings.nhl_api_base,
            timeout_seconds=settings.request_timeout_seconds,
            retries=settings.request_retries,
            backoff_seconds=settings.request_backoff_seconds,
        )

    def fetch_schedule(self, game_date: str) -> dict[str, Any]:
        return self._get_json(f"/schedule/{game_date}", f"schedule for date {game_date}")

    def fetch_boxscore(self, game_id: int | str) -> dict[str, Any]:
        return self._get_json(f"/gamecenter/{game_id}/boxscore", f"boxscore for game {game_id}")

    def fetch_standings(self, game_date: str) -> dict[str, Any]:
        return self._get_json(f"/standings/{game_date}", f"standings for date {game_date}")

    def _sleep_before_retry(self, attempt: int) -> None:
        if attempt < self.retries - 1:
            time.sleep(self.backoff_seconds * (2**attempt))

    def _get_json(self, path: str, label: str) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        headers = {
            "User-Agent": DEFAULT_USER_AGENT,
            "Accept": "application/json",
        }

        last_error: str | None = None
        for attempt in range(self.retries):
            try:
                response = requests.get(
                    url,
                    headers=headers,
                    timeout=(self.timeout_seconds, self.timeout_seconds),
                )
            except requests.RequestException as exc:
                last_error = str(exc)
                self._sleep_before_retry(attempt)
                continue

            if response.status_code >= 500:
                last_error = f"HTTP {response.status_code}"
                logger.warning(
                    "NHL API %s status=%s attempt=%s/%s",
                    label,
                    response.status_code,
                    attempt + 1,
                    self.retries,
                )
                self._sleep_before_retry(attempt)
                continue

            if response.status_code != 200:
                logger.warning(
                    "WARN fetching %s. status=%s body=%s",
                    label,
                    response.status_code,
                    response.text[:MAX_BODY_SNIPPET],
                )
                return {}

            try:
                payload = response.json()
            except ValueError:
                logger.warning(
                    "WARN fetching %s. Invalid JSON body=%s",
                    label,
                    response.text[:MAX_BODY_SNIPPET],
                )
                return {}
            if not isinstance(payload, dict):
                logger.warning("WARN fetching %s. Expected a JSON object", label)
                return {}
            return payload

        logger.warning(
            "WARN fetching %s failed after %s attempts: %s",
            label,
            self.retries,
            last_error,
        )
        return {}
