"""Configuration loading and runtime settings."""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from survey_geocode.common.constants import (
    API_KEY_ENV_VARS,
    BASE_URL_ENV_VAR,
    DEFAULT_CONFIG,
    REQUEST_DELAY_ENV_VAR,
)
from survey_geocode.common.errors import ConfigError
from survey_geocode.common.fs import read_yaml
from survey_geocode.common.http import TimeoutConfig
from survey_geocode.common.schema import validate_geocode_config


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    base_url: str
    timeout: TimeoutConfig
    max_attempts: int
    pacing_strategy: str
    delay_seconds: float
    rate_per_sec: float
    pace_skipped: bool
    validation_address: str
    data_dir: Path
    files: tuple[str, ...]
    backup_marker: str

    def target_paths(self) -> list[Path]:
        return [self.data_dir / name for name in self.files]


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    payload = read_yaml(path)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")
    return payload


def load_config(
    config_path: Path | None = None,
    *,
    overlay_path: Path | None = None,
    allow_unknown: bool = False,
) -> dict:
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        cfg = _deep_merge(cfg, _load_yaml(config_path))
    if overlay_path is not None and overlay_path.exists():
        cfg = _deep_merge(cfg, _load_yaml(overlay_path))
    return validate_geocode_config(cfg, allow_unknown=allow_unknown)


def resolve_api_key(env: Mapping[str, str], api_key_env: str) -> str | None:
    names = [api_key_env, *(name for name in API_KEY_ENV_VARS if name != api_key_env)]
    for name in names:
        value = (env.get(name) or "").strip()
        if value:
            return value
    return None


def _env_float(env: Mapping[str, str], name: str) -> float | None:
    raw = (env.get(name) or "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    if value < 0:
        raise ConfigError(f"{name} must be >= 0")
    return value


def build_settings(
    cfg: dict,
    *,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Combine validated config, environment and CLI overrides (highest wins)."""
    env = os.environ if env is None else env
    overrides = {key: value for key, value in (overrides or {}).items() if value is not None}

    provider = cfg["provider"]
    pacing = cfg["pacing"]
    data = cfg["data"]

    base_url = (env.get(BASE_URL_ENV_VAR) or "").strip() or provider["base_url"]
    delay_seconds = _env_float(env, REQUEST_DELAY_ENV_VAR)
    if delay_seconds is None:
        delay_seconds = float(pacing["delay_seconds"])

    timeout = TimeoutConfig(
        connect=float(provider["timeout"]["connect"]),
        read=float(provider["timeout"]["read"]),
    )
    if "timeout" in overrides:
        if float(overrides["timeout"]) <= 0:
            raise ConfigError("timeout must be > 0")
        timeout = TimeoutConfig(connect=float(overrides["timeout"]), read=float(overrides["timeout"]))

    pacing_strategy = pacing["strategy"]
    rate_per_sec = float(pacing["rate_per_sec"])
    if "rate_per_sec" in overrides:
        pacing_strategy = "token_bucket"
        rate_per_sec = float(overrides["rate_per_sec"])
        if rate_per_sec <= 0:
            raise ConfigError("rate limit must be > 0")

    delay_seconds = float(overrides.get("delay_seconds", delay_seconds))
    if delay_seconds < 0:
        raise ConfigError("delay must be >= 0")

    files = overrides.get("files") or data["files"]

    return Settings(
        api_key=resolve_api_key(env, provider["api_key_env"]),
        base_url=str(overrides.get("base_url", base_url)).rstrip("/"),
        timeout=timeout,
        max_attempts=int(provider["max_attempts"]),
        pacing_strategy=pacing_strategy,
        delay_seconds=delay_seconds,
        rate_per_sec=rate_per_sec,
        pace_skipped=bool(overrides.get("pace_skipped", pacing["pace_skipped"])),
        validation_address=str(cfg["validation"]["address"]),
        data_dir=Path(overrides.get("data_dir", data["dir"])),
        files=tuple(files),
        backup_marker=str(data["backup_marker"]),
    )
