"""
Tests for utils/config.py: AppConfig and CsvColumns
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.config import AppConfig, CsvColumns, DEFAULT_CSV_PATH

_ENV_VARS = ("APP_DB_PATH", "APP_PORT", "APP_HOST", "APP_LOG_FORMAT",
             "APP_CORS_ORIGINS", "APP_API_KEY", "APP_ENV", "APP_DB_POOL_SIZE")


@pytest.fixture()
def clean_env(monkeypatch):
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


class TestAppConfigDefaults:
    def test_defaults(self, clean_env):
        cfg = AppConfig.from_env()
        assert cfg.db_path == Path("use_cases.sqlite")
        assert cfg.api_port == 3001
        assert cfg.api_host == "127.0.0.1"
        assert cfg.log_format == "text"
        assert cfg.cors_origins == ["http://localhost:5173"]
        assert cfg.api_key == ""
        assert cfg.environment == "development"
        assert cfg.pool_size == 10

    def test_flags(self, clean_env):
        cfg = AppConfig.from_env()
        assert cfg.is_production is False
        assert cfg.api_key_enabled is False


class TestAppConfigFromEnv:
    def test_overrides(self, clean_env):
        clean_env.setenv("APP_DB_PATH", "/data/uc.sqlite")
        clean_env.setenv("APP_PORT", "8080")
        clean_env.setenv("APP_LOG_FORMAT", " JSON ")
        clean_env.setenv("APP_API_KEY", " s3cret ")
        clean_env.setenv("APP_ENV", "Production")
        clean_env.setenv("APP_DB_POOL_SIZE", "3")
        cfg = AppConfig.from_env()
        assert cfg.db_path == Path("/data/uc.sqlite")
        assert cfg.api_port == 8080
        assert cfg.log_format == "json"
        assert cfg.api_key == "s3cret"
        assert cfg.api_key_enabled is True
        assert cfg.is_production is True
        assert cfg.pool_size == 3

    def test_cors_list(self, clean_env):
        clean_env.setenv("APP_CORS_ORIGINS", "http://a.example, http://b.example,,")
        assert AppConfig.from_env().cors_origins == ["http://a.example", "http://b.example"]

    def test_cors_wildcard(self, clean_env):
        clean_env.setenv("APP_CORS_ORIGINS", "*")
        assert AppConfig.from_env().cors_origins == ["*"]

    def test_blank_env_means_development(self, clean_env):
        clean_env.setenv("APP_ENV", "  ")
        assert AppConfig.from_env().environment == "development"


class TestCsvColumns:
    def test_mapping_covers_all_writable_columns(self):
        assert set(CsvColumns.MAPPING.values()) == {
            "use_case", "concept_description", "concrete_implementation", "benefit",
            "industry", "department", "value_chain_step", "url",
        }

    def test_required_headers(self):
        assert CsvColumns.REQUIRED == ("Use Case", "Concept description")

    def test_default_csv_path(self):
        assert DEFAULT_CSV_PATH == Path("Use_Case_Library.csv")
