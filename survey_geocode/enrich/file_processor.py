"""Enrich one response document in place, keeping a backup of the original."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from survey_geocode.common.errors import FileIOError, MalformedDocumentError, PipelineError
from survey_geocode.common.fs import backup_path_for, write_bytes, write_json
from survey_geocode.common.logging import default_logger, log_event
from survey_geocode.common.models import EnrichmentStats, FileReport
from survey_geocode.enrich.pacing import Pacer
from survey_geocode.enrich.pipeline import Geocoder, enrich_responses


def _read_document(path: Path) -> tuple[bytes, dict]:
    try:
        original = path.read_bytes()
    except OSError as exc:
        raise FileIOError(f"Could not read {path}: {exc}") from exc

    try:
        document = json.loads(original.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise MalformedDocumentError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(document, dict) or not isinstance(document.get("responses"), list):
        raise MalformedDocumentError(f"Invalid data structure in {path}: expected a 'responses' list")
    return original, document


def enrich_file(
    path: Path,
    geocoder: Geocoder,
    pacer: Pacer,
    *,
    backup_marker: str = "backup",
    pace_skipped: bool = True,
    logger: logging.Logger | None = None,
) -> tuple[EnrichmentStats, Path]:
    """Enrich `path` and return the run stats plus the backup location.

    The backup holds the bytes read before enrichment and is written before the
    original is touched. A failed backup leaves the original as it was.
    """
    logger = logger or default_logger()
    original, document = _read_document(path)
    log_event(
        logger,
        f"found {len(document['responses'])} responses",
        stage="process",
        file=path.name,
        event="FILE_LOADED",
        total=len(document["responses"]),
    )

    result = enrich_responses(
        document["responses"],
        geocoder,
        pacer,
        pace_skipped=pace_skipped,
        logger=logger,
        file_label=path.name,
    )
    document["responses"] = result.records

    backup_path = backup_path_for(path, backup_marker)
    try:
        write_bytes(backup_path, original)
    except OSError as exc:
        raise FileIOError(f"Could not write backup {backup_path}: {exc}") from exc
    log_event(logger, f"backup saved to {backup_path.name}", stage="process", file=path.name, event="BACKUP_WRITTEN")

    try:
        write_json(path, document)
    except OSError as exc:
        raise FileIOError(f"Could not write {path}: {exc}") from exc
    log_event(logger, f"updated {path.name}", stage="process", file=path.name, event="FILE_WRITTEN", status="ok")

    return result.stats, backup_path


def process_file(
    path: Path,
    geocoder: Geocoder,
    pacer: Pacer,
    *,
    backup_marker: str = "backup",
    pace_skipped: bool = True,
    logger: logging.Logger | None = None,
) -> FileReport:
    logger = logger or default_logger()
    log_event(logger, f"processing {path.name}", stage="process", file=path.name, event="FILE_START")
    try:
        stats, backup_path = enrich_file(
            path,
            geocoder,
            pacer,
            backup_marker=backup_marker,
            pace_skipped=pace_skipped,
            logger=logger,
        )
    except PipelineError as exc:
        log_event(
            logger,
            f"error processing {path}: {exc}",
            level=logging.ERROR,
            stage="process",
            file=path.name,
            event="FILE_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return FileReport(path=path, status="error", error_code=exc.error_code)
    except Exception as exc:
        log_event(
            logger,
            f"unexpected failure processing {path}: {exc}",
            level=logging.ERROR,
            stage="process",
            file=path.name,
            event="FILE_FAIL",
            status="error",
            error_code="UNEXPECTED_ERROR",
        )
        return FileReport(path=path, status="error", error_code="UNEXPECTED_ERROR")

    return FileReport(path=path, status="ok", stats=stats, backup_path=backup_path)
