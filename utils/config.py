"""Configuration management utilities for the Use Case Library.

Provides:
- ``AppConfig``: application settings loaded from environment variables
- ``CsvColumns``: the fixed header names expected by the CSV importer
"""

import os as _os
from pathlib import Path
from typing import Dict


class CsvColumns:
    """Header names of the use case library spreadsheet export."""

    USE_CASE = "Use Case"
    CONCEPT_DESCRIPTION = "Concept description"
    CONCRETE_IMPLEMENTATION = "Concrete implementation"
    BENEFIT = "Benefit"
    INDUSTRY = "Industry"
    DEPARTMENT = "Department"
    VALUE_CHAIN_STEP = "Value Chain Step"
    URL = "URL"

    # CSV header -> use_cases column
    MAPPING: Dict[str, str] = {
        USE_CASE: "use_case",
        CONCEPT_DESCRIPTION: "concept_description",
        CONCRETE_IMPLEMENTATION: "concrete_implementation",
        BENEFIT: "benefit",
        INDUSTRY: "industry",
        DEPARTMENT: "department",
        VALUE_CHAIN_STEP: "value_chain_step",
        URL: "url",
    }

    REQUIRED = (USE_CASE, CONCEPT_DESCRIPTION)


DEFAULT_CSV_PATH = Path("Use_Case_Library.csv")


class AppConfig:
    """Application-level configuration loaded from environment variables.

    All env vars have sensible defaults so the application works out of the
    box without any configuration.

    Environment variables:
        APP_DB_PATH: Path to the SQLite database file (default: use_cases.sqlite)
        APP_PORT: API server port (default: 3001)
        APP_HOST: API server bind address (default: 127.0.0.1)
        APP_LOG_FORMAT: Logging format — "text" or "json" (default: text)
        APP_CORS_ORIGINS: Comma-separated allowed origins (default: http://localhost:5173)
        APP_API_KEY: Shared secret required on POST requests (default: unset)
        APP_ENV: "development" or "production" (default: development)
        APP_DB_POOL_SIZE: Max DB connections in pool (default: 10)
    """

    def __init__(self) -> None:
        self.db_path = Path(_os.getenv("APP_DB_PATH", "use_cases.sqlite"))
        self.api_port = int(_os.getenv("APP_PORT", "3001"))
        self.api_host = _os.getenv("APP_HOST", "127.0.0.1")
        self.log_format = _os.getenv("APP_LOG_FORMAT", "text").strip().lower()
        raw_origins = _os.getenv("APP_CORS_ORIGINS", "http://localhost:5173")
        self.cors_origins: list[str] = (
            ["*"] if raw_origins.strip() == "*"
            else [o.strip() for o in raw_origins.split(",") if o.strip()]
        )
        self.api_key = _os.getenv("APP_API_KEY", "").strip()
        self.environment = (
            _os.getenv("APP_ENV", "development").strip().lower() or "development"
        )
        self.pool_size = int(_os.getenv("APP_DB_POOL_SIZE", "10"))

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def api_key_enabled(self) -> bool:
        return bool(self.api_key)
