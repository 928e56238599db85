"""Batch orchestration over the configured response files."""

from __future__ import annotations

import logging

from survey_geocode.common.config_loader import Settings
from survey_geocode.common.constants import API_KEY_ENV_VARS
from survey_geocode.common.errors import ValidationFailure
from survey_geocode.common.logging import default_logger, log_event
from survey_geocode.common.models import BatchReport, FileReport
from survey_geocode.enrich.file_processor import process_file
from survey_geocode.enrich.pacing import Pacer
from survey_geocode.enrich.pipeline import Geocoder


def require_api_key(settings: Settings) -> str:
    if not settings.api_key:
        raise ValidationFailure(f"No geocoding API key configured; set {API_KEY_ENV_VARS[0]}")
    return settings.api_key


def validate_access(geocoder: Geocoder, address: str, *, logger: logging.Logger | None = None) -> None:
    logger = logger or default_logger()
    log_event(logger, "validating geocoding API key", stage="validate", event="VALIDATE_START")
    if geocoder.lookup(address) is None:
        raise ValidationFailure("API key validation failed; check the configured geocoding API key")
    log_event(logger, "API key is valid", stage="validate", event="VALIDATE_END", status="ok")


def run_batch(
    settings: Settings,
    geocoder: Geocoder,
    pacer: Pacer,
    *,
    run_id: str,
    logger: logging.Logger | None = None,
) -> BatchReport:
    logger = logger or default_logger()
    validate_access(geocoder, settings.validation_address, logger=logger)

    reports: list[FileReport] = []
    for path in settings.target_paths():
        if not path.exists():
            log_event(
                logger,
                f"file not found: {path}",
                level=logging.ERROR,
                run_id=run_id,
                stage="process",
                file=path.name,
                event="FILE_MISSING",
                status="error",
                error_code="FILE_NOT_FOUND",
            )
            reports.append(FileReport(path=path, status="missing", error_code="FILE_NOT_FOUND"))
            continue
        reports.append(
            process_file(
                path,
                geocoder,
                pacer,
                backup_marker=settings.backup_marker,
                pace_skipped=settings.pace_skipped,
                logger=logger,
            )
        )

    backups = [report.backup_path.name for report in reports if report.backup_path is not None]
    log_event(
        logger,
        f"location data enhancement completed; backups: {', '.join(backups) or 'none'}",
        run_id=run_id,
        stage="batch",
        event="BATCH_END",
        status="ok",
    )
    return BatchReport(run_id=run_id, validated=True, files=reports)
