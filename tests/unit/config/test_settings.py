"""Tests for environment-driven settings."""

import pytest

from learning_pass.config.settings import Settings, get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.mark.unit
class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("LP_LIBRARY_CONFIG", "LP_PARTNERS_DIR", "LP_FLAT_OUTPUT_DIR", "LP_FLAT_OVERWRITE"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.library_config == "./config/library.yml"
        assert settings.partners_dir == "./config/partners"
        assert settings.flat_output_dir is None
        assert settings.flat_overwrite is True

    def test_env_prefix(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LP_FLAT_OUTPUT_DIR", str(tmp_path))
        monkeypatch.setenv("LP_FLAT_OVERWRITE", "false")

        settings = Settings(_env_file=None)

        assert settings.flat_output_dir == str(tmp_path)
        assert settings.flat_overwrite is False

    def test_log_level_upper_cased(self, monkeypatch):
        monkeypatch.setenv("LP_LOG_LEVEL", "debug")

        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
