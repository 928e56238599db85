"""CLI entrypoint for survey response geocoding enrichment."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

from survey_geocode.common.config_loader import build_settings, load_config
from survey_geocode.common.constants import DEFAULT_CONFIG_PATH, EXIT_HARD_FAIL, EXIT_SUCCESS
from survey_geocode.common.errors import PipelineError
from survey_geocode.common.http import HttpClient, RetryConfig
from survey_geocode.common.ids import generate_run_id
from survey_geocode.common.logging import build_logger, default_logger, log_event
from survey_geocode.enrich.batch import require_api_key, run_batch
from survey_geocode.enrich.pacing import build_pacer
from survey_geocode.enrich.reports import write_run_summary
from survey_geocode.geocode.client import GeocodingClient


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", default=None)
    parser.add_argument("--overlay-config", default=None)
    parser.add_argument("--data-dir", default=None)
    parser.add_argument("--file", dest="files", action="append", default=None)
    parser.add_argument("--base-url", default=None)
    parser.add_argument("--delay", type=float, default=None)
    parser.add_argument("--timeout", type=float, default=None)
    parser.add_argument("--rate-limit", type=float, default=None)
    parser.add_argument("--no-pace-skipped", dest="pace_skipped", action="store_const", const=False, default=None)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--log-dir", default=None)
    parser.add_argument("--summary-out", default=None)
    return parser.parse_args(argv)


def _config_path(args: argparse.Namespace) -> Path | None:
    if args.config:
        return Path(args.config)
    default = Path(DEFAULT_CONFIG_PATH)
    return default if default.exists() else None


def run_command(args: argparse.Namespace, env: Mapping[str, str] | None = None) -> int:
    run_id = args.run_id or generate_run_id()
    log_dir = Path(args.log_dir) if args.log_dir else None
    logger = build_logger(run_id, log_dir=log_dir, level=args.log_level)
    log_event(logger, "starting location data enhancement", run_id=run_id, stage="batch", event="BATCH_START")

    try:
        cfg = load_config(
            _config_path(args),
            overlay_path=Path(args.overlay_config) if args.overlay_config else None,
        )
        settings = build_settings(
            cfg,
            env=os.environ if env is None else env,
            overrides={
                "data_dir": args.data_dir,
                "files": args.files,
                "base_url": args.base_url,
                "delay_seconds": args.delay,
                "timeout": args.timeout,
                "rate_per_sec": args.rate_limit,
                "pace_skipped": args.pace_skipped,
            },
        )
        api_key = require_api_key(settings)

        pacer = build_pacer(settings)
        with HttpClient(timeout=settings.timeout, retry=RetryConfig(max_attempts=settings.max_attempts)) as http_client:
            geocoder = GeocodingClient(
                api_key,
                http_client,
                base_url=settings.base_url,
                timeout=settings.timeout,
                logger=logger,
            )
            report = run_batch(settings, geocoder, pacer, run_id=run_id, logger=logger)
    except PipelineError as exc:
        log_event(
            logger,
            f"run aborted: {exc}",
            level=logging.ERROR,
            run_id=run_id,
            stage="batch",
            event="BATCH_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_HARD_FAIL

    if args.summary_out:
        summary_path = write_run_summary(Path(args.summary_out), report)
        log_event(logger, f"run summary written to {summary_path}", run_id=run_id, stage="batch", event="SUMMARY_WRITTEN")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    load_dotenv()
    try:
        return run_command(args)
    except Exception:
        default_logger().exception("script failed")
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
