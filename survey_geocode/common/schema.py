"""Minimal strict schema for YAML config validation."""

from __future__ import annotations

from survey_geocode.common.constants import PACING_STRATEGIES
from survey_geocode.common.errors import ConfigError


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_number(value: object, ctx: str, *, minimum: float, inclusive: bool = True) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{ctx} must be a number")
    if value < minimum or (not inclusive and value == minimum):
        op = ">=" if inclusive else ">"
        raise ConfigError(f"{ctx} must be {op} {minimum}")


def validate_geocode_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    sections = {
        "provider": {"base_url", "api_key_env", "timeout", "max_attempts"},
        "pacing": {"strategy", "delay_seconds", "rate_per_sec", "pace_skipped"},
        "validation": {"address"},
        "data": {"dir", "files", "backup_marker"},
    }
    _assert_required_keys(cfg, set(sections), "geocode config")
    _assert_no_unknown_keys(cfg, set(sections), "geocode config", allow_unknown)
    for name, keys in sections.items():
        _assert_required_keys(cfg[name], keys, name)
        _assert_no_unknown_keys(cfg[name], keys, name, allow_unknown)

    provider = cfg["provider"]
    _assert_required_keys(provider["timeout"], {"connect", "read"}, "provider.timeout")
    _assert_number(provider["timeout"]["connect"], "provider.timeout.connect", minimum=0, inclusive=False)
    _assert_number(provider["timeout"]["read"], "provider.timeout.read", minimum=0, inclusive=False)
    if isinstance(provider["max_attempts"], bool) or not isinstance(provider["max_attempts"], int):
        raise ConfigError("provider.max_attempts must be an integer")
    if provider["max_attempts"] < 1:
        raise ConfigError("provider.max_attempts must be >= 1")

    pacing = cfg["pacing"]
    if pacing["strategy"] not in PACING_STRATEGIES:
        raise ConfigError(f"Unsupported pacing strategy: {pacing['strategy']}")
    _assert_number(pacing["delay_seconds"], "pacing.delay_seconds", minimum=0)
    _assert_number(pacing["rate_per_sec"], "pacing.rate_per_sec", minimum=0, inclusive=False)
    if not isinstance(pacing["pace_skipped"], bool):
        raise ConfigError("pacing.pace_skipped must be a boolean")

    if not str(cfg["validation"]["address"] or "").strip():
        raise ConfigError("validation.address must be a non-empty string")

    files = cfg["data"]["files"]
    if not isinstance(files, list) or not all(isinstance(name, str) and name for name in files):
        raise ConfigError("data.files must be a list of file names")
    if not str(cfg["data"]["backup_marker"] or "").strip():
        raise ConfigError("data.backup_marker must be a non-empty string")

    return cfg
