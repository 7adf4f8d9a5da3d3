"""Config loading and profile overlay."""

import pytest

from predlaunch.config import get_settings, load_config
from predlaunch.config.settings import Settings


def test_profile_overlay(tmp_path):
    (tmp_path / "default.toml").write_text(
        '[storage]\ndb_path = "a.duckdb"\n[launch]\nbase_units_per_unit = 1000\n[logging]\nlevel = "info"\n'
    )
    (tmp_path / "dev.toml").write_text('[launch]\nnormalized_claims = true\n[logging]\nlevel = "debug"\n')
    settings = get_settings("dev", config_dir=tmp_path)
    assert settings.db_path == "a.duckdb"
    assert settings.base_units_per_unit == 1000
    assert settings.normalized_claims is True
    assert settings.logging_level == "DEBUG"
    assert load_config(None, config_dir=tmp_path)["launch"] == {"base_units_per_unit": 1000}


def test_defaults_without_files(tmp_path):
    settings = get_settings(config_dir=tmp_path)
    assert settings.base_units_per_unit == 1_000_000_000
    assert settings.normalized_claims is False
    assert settings.default_identity == "local"
    assert settings.logging_format == "console"


def test_invalid_unit_scale():
    with pytest.raises(ValueError):
        Settings(launch={"base_units_per_unit": 0}).base_units_per_unit
