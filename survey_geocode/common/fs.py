"""Filesystem helpers."""

from __future__ import annotations

import json
from pathlib import Path


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_yaml(path: Path):
    import yaml

    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def dump_json(payload) -> str:
    # Insertion order, no key sorting.
    return json.dumps(payload, ensure_ascii=False, indent=2) + "\n"


def write_json(path: Path, payload) -> None:
    text = dump_json(payload)
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8") as f:
        f.write(text)


def backup_path_for(path: Path, marker: str = "backup") -> Path:
    """`responses.json` -> `responses.backup.json`, next to the original."""
    return path.with_name(f"{path.stem}.{marker}{path.suffix}")


def write_bytes(path: Path, content: bytes) -> None:
    with path.open("wb") as f:
        f.write(content)
