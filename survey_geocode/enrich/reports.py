"""Run summary reporting."""

from __future__ import annotations

from pathlib import Path

from survey_geocode.common.fs import write_json
from survey_geocode.common.models import BatchReport
from survey_geocode.common.time_utils import utc_timestamp_iso

COUNT_KEYS = ("geocoded", "skipped", "no_address", "failed", "total")


def build_run_summary(report: BatchReport) -> dict:
    totals = {key: 0 for key in COUNT_KEYS}
    for file_report in report.files:
        if file_report.stats is None:
            continue
        counts = file_report.stats.to_dict()
        for key in COUNT_KEYS:
            totals[key] += int(counts.get(key, 0))

    error_count = sum(1 for file_report in report.files if file_report.status != "ok")
    return {
        "run_id": report.run_id,
        "timestamp": utc_timestamp_iso(),
        "status": "success" if error_count == 0 else "partial",
        "validated": report.validated,
        "totals": totals,
        "error_count": error_count,
        "files": [file_report.to_dict() for file_report in report.files],
    }


def write_run_summary(path: Path, report: BatchReport) -> Path:
    write_json(path, build_run_summary(report))
    return path
