"""Data models used across the enrichment run."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class GeocodeResult:
    latitude: float
    longitude: float
    formatted_address: str
    timezone: str
    state: str | None = None
    country: str | None = None
    address_components: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class EnrichmentStats:
    geocoded: int = 0
    skipped: int = 0
    no_address: int = 0
    failed: int = 0
    total: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class EnrichmentResult:
    records: list[dict[str, Any]]
    stats: EnrichmentStats


@dataclass(frozen=True)
class FileReport:
    path: Path
    status: str
    stats: EnrichmentStats | None = None
    backup_path: Path | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "status": self.status,
            "stats": self.stats.to_dict() if self.stats is not None else None,
            "backup_path": str(self.backup_path) if self.backup_path is not None else None,
            "error_code": self.error_code,
        }


@dataclass(frozen=True)
class BatchReport:
    run_id: str
    validated: bool
    files: list[FileReport]
