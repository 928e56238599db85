from __future__ import annotations

from pathlib import Path

import pytest

from survey_geocode.common.config_loader import build_settings, load_config


@pytest.fixture
def make_settings(tmp_path: Path):
    def _make(**overrides):
        values = {"data_dir": tmp_path, "delay_seconds": 0}
        values.update(overrides)
        env = values.pop("env", {"GOOGLE_MAPS_API_KEY": "test-key"})
        return build_settings(load_config(), env=env, overrides=values)

    return _make
