"""Record enrichment: composite address -> lookup -> merged record."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Protocol

from survey_geocode.common.constants import ADDRESS_FIELDS
from survey_geocode.common.errors import MissingAddressError
from survey_geocode.common.logging import default_logger, log_event
from survey_geocode.common.models import EnrichmentResult, EnrichmentStats, GeocodeResult
from survey_geocode.enrich.pacing import Pacer


class Geocoder(Protocol):
    def lookup(self, address: str) -> GeocodeResult | None: ...


def is_enriched(record: dict[str, Any]) -> bool:
    return record.get("latitude") is not None and record.get("longitude") is not None


def composite_address(record: dict[str, Any]) -> str:
    parts = [str(record[name]) for name in ADDRESS_FIELDS if record.get(name) not in (None, "")]
    return ", ".join(parts)


def require_address(record: dict[str, Any]) -> str:
    address = composite_address(record)
    if not address.strip():
        raise MissingAddressError(f"No address found for response {record.get('id')}")
    return address


def merge_geocode(record: dict[str, Any], result: GeocodeResult) -> dict[str, Any]:
    merged = dict(record)
    merged["latitude"] = result.latitude
    merged["longitude"] = result.longitude
    if result.state:
        merged["state"] = result.state
    merged["timezone"] = result.timezone
    merged["formatted_address"] = result.formatted_address
    return merged


def enrich_responses(
    records: Iterable[dict[str, Any]],
    geocoder: Geocoder,
    pacer: Pacer,
    *,
    pace_skipped: bool = True,
    logger: logging.Logger | None = None,
    file_label: str | None = None,
) -> EnrichmentResult:
    """Geocode every record that lacks coordinates, keeping order and length.

    Records are copied, never mutated. The pacer runs after every record unless
    `pace_skipped` is false, in which case only records that reached the
    provider are paced.
    """
    logger = logger or default_logger()
    stats = EnrichmentStats()
    updated: list[dict[str, Any]] = []

    for record in records:
        record_id = record.get("id")
        looked_up = False

        if is_enriched(record):
            log_event(
                logger,
                f"skipping {record_id} (already has coordinates)",
                level=logging.DEBUG,
                stage="enrich",
                file=file_label,
                record_id=record_id,
                event="RECORD_SKIP",
            )
            updated.append(record)
            stats.skipped += 1
        else:
            try:
                address = require_address(record)
            except MissingAddressError as exc:
                log_event(
                    logger,
                    str(exc),
                    level=logging.WARNING,
                    stage="enrich",
                    file=file_label,
                    record_id=record_id,
                    event="RECORD_NO_ADDRESS",
                    status="warning",
                    error_code=exc.error_code,
                )
                updated.append(record)
                stats.no_address += 1
            else:
                looked_up = True
                result = geocoder.lookup(address)
                if result is not None:
                    updated.append(merge_geocode(record, result))
                    stats.geocoded += 1
                    log_event(
                        logger,
                        f"updated response {record_id} with coordinates",
                        stage="enrich",
                        file=file_label,
                        record_id=record_id,
                        event="RECORD_GEOCODED",
                        status="ok",
                    )
                else:
                    updated.append(record)
                    stats.failed += 1
                    log_event(
                        logger,
                        f"could not geocode response {record_id}",
                        level=logging.WARNING,
                        stage="enrich",
                        file=file_label,
                        record_id=record_id,
                        event="RECORD_FAIL",
                        status="warning",
                        error_code="PROVIDER_ERROR",
                    )

        if looked_up or pace_skipped:
            pacer.pause()

    stats.total = len(updated)
    log_event(
        logger,
        f"summary: {stats.geocoded} geocoded, {stats.skipped} skipped, {stats.total} total",
        stage="enrich",
        file=file_label,
        event="ENRICH_SUMMARY",
        status="ok",
        geocoded=stats.geocoded,
        skipped=stats.skipped,
        total=stats.total,
    )
    return EnrichmentResult(records=updated, stats=stats)
