"""
Pytest fixtures for the Use Case Library tests.

Provides reusable fixtures: a temporary SQLite database, an ``AppConfig``
pointing at it, a FastAPI TestClient, a valid create payload, and a helper
that writes CSV exports for the importer tests.
"""

import csv
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient  # noqa: E402

from api.app import create_app  # noqa: E402
from utils.config import AppConfig, CsvColumns  # noqa: E402
from utils.database import connect  # noqa: E402

TEST_API_KEY = "test-secret-key"

CSV_HEADERS = list(CsvColumns.MAPPING)


# ── Config / database ─────────────────────────────────────────────────────────

@pytest.fixture()
def db_path(tmp_path) -> Path:
    return tmp_path / "use_cases.sqlite"


@pytest.fixture()
def app_config(db_path, monkeypatch) -> AppConfig:
    """Development config with a shared secret, isolated from the real env."""
    for var in ("APP_DB_PATH", "APP_API_KEY", "APP_ENV", "APP_LOG_FORMAT",
                "APP_CORS_ORIGINS", "APP_DB_POOL_SIZE"):
        monkeypatch.delenv(var, raising=False)
    cfg = AppConfig.from_env()
    cfg.db_path = db_path
    cfg.api_key = TEST_API_KEY
    cfg.pool_size = 2
    return cfg


@pytest.fixture()
def db_conn(db_path):
    """Open connection with the schema created; closed after the test."""
    conn = connect(db_path)
    yield conn
    conn.close()


# ── API client ────────────────────────────────────────────────────────────────

@pytest.fixture()
def client(app_config):
    """TestClient running the app lifespan (pool closed on exit)."""
    with TestClient(create_app(app_config), raise_server_exceptions=False) as c:
        yield c


@pytest.fixture()
def auth_headers() -> dict[str, str]:
    return {"X-API-Key": TEST_API_KEY}


@pytest.fixture()
def payload() -> dict[str, str]:
    """A valid create request body."""
    return {
        "useCase": "Predictive Maintenance",
        "conceptDescription": "Use ML to predict failures",
        "industry": "Manufacturing",
    }


@pytest.fixture()
def create(client, auth_headers):
    """Helper: POST a use case and return the response."""
    def _create(use_case: str, description: str = "A sufficiently long description",
                **extra):
        body = {"useCase": use_case, "conceptDescription": description, **extra}
        return client.post("/api/use-cases", json=body, headers=auth_headers)
    return _create


# ── CSV helper ────────────────────────────────────────────────────────────────

def write_csv(path: Path, rows: list[list[str]], headers: list[str] | None = None,
              bom: bool = False) -> Path:
    """Write a CSV export with the standard headers (or *headers*)."""
    encoding = "utf-8-sig" if bom else "utf-8"
    with open(path, "w", newline="", encoding=encoding) as f:
        writer = csv.writer(f)
        writer.writerow(headers if headers is not None else CSV_HEADERS)
        writer.writerows(rows)
    return path


@pytest.fixture()
def csv_writer(tmp_path):
    """Fixture form of write_csv() that places files under tmp_path."""
    def _write(rows: list[list[str]], name: str = "library.csv", **kwargs) -> Path:
        return write_csv(tmp_path / name, rows, **kwargs)
    return _write
