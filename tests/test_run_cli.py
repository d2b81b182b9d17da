from __future__ import annotations

import contextlib
import io
import unittest
from unittest.mock import patch

from nhl_ingest.ingestion import run
from nhl_ingest.ingestion.errors import ValidationError
from nhl_ingest.ingestion.sync import IngestResult


class ParseArgsTests(unittest.TestCase):
    def test_defaults_to_today_only(self) -> None:
        self.assertEqual(0, run._parse_args([]).days)

    def test_accepts_positive_integer(self) -> None:
        self.assertEqual(30, run._parse_args(["30"]).days)

    def test_rejects_invalid_values(self) -> None:
        for bad in ("abc", "-1", "1.5"):
            with self.subTest(value=bad):
                with contextlib.redirect_stderr(io.StringIO()):
                    with self.assertRaises(SystemExit) as ctx:
                        run._parse_args([bad])
                self.assertNotEqual(0, ctx.exception.code)


class MainTests(unittest.TestCase):
    def test_successful_run_exits_normally(self) -> None:
        result = IngestResult(dates=["2026-10-19"], teams_upserted=32)
        with patch.object(run, "run_ingestion", return_value=result) as mock_run, patch.object(
            run, "load_dotenv"
        ):
            run.main(["0"])

        self.assertEqual(0, mock_run.call_args.args[0])

    def test_failed_dates_exit_non_zero(self) -> None:
        result = IngestResult(dates=["2026-10-19"], failed_dates=["2026-10-19"])
        with patch.object(run, "run_ingestion", return_value=result), patch.object(
            run, "load_dotenv"
        ):
            with self.assertRaises(SystemExit) as ctx:
                run.main([])

        self.assertEqual(1, ctx.exception.code)

    def test_over_limit_warns_then_exits_non_zero(self) -> None:
        with patch.object(
            run,
            "run_ingestion",
            side_effect=ValidationError("days_to_ingest", "must be at most 365, got 400"),
        ), patch.object(run, "load_dotenv"):
            with self.assertLogs("nhl_ingest.ingestion.run", level="WARNING") as logs:
                with self.assertRaises(SystemExit) as ctx:
                    run.main(["400"])

        self.assertEqual(1, ctx.exception.code)
        self.assertTrue(any("400 days" in line for line in logs.output))


if __name__ == "__main__":
    unittest.main()
