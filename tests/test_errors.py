"""
Tests for api/errors.py — error taxonomy and JSON error body shape
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.errors import (
    GENERIC_INTERNAL_MESSAGE,
    STATUS_CODES,
    AppError,
    ErrorKind,
    error_body,
    register_error_handlers,
)


class TestTaxonomy:
    def test_every_kind_has_a_status(self):
        assert set(STATUS_CODES) == set(ErrorKind)

    def test_status_mapping(self):
        assert AppError.validation([]).status_code == 400
        assert AppError.unauthorized().status_code == 401
        assert AppError.not_found("Use case", 7).status_code == 404
        assert AppError.duplicate().status_code == 409
        assert AppError(ErrorKind.INTERNAL, "x").status_code == 500

    def test_codes(self):
        assert ErrorKind.VALIDATION.value == "VALIDATION_ERROR"
        assert ErrorKind.DUPLICATE.value == "DUPLICATE_ENTRY"
        assert ErrorKind.INTERNAL.value == "INTERNAL_SERVER_ERROR"

    def test_not_found_message(self):
        assert AppError.not_found("Use case", 7).message == "Use case with id 7 not found"


class TestErrorBody:
    def test_without_details(self):
        assert error_body(ErrorKind.NOT_FOUND, "gone") == {
            "success": False, "error": "gone", "code": "NOT_FOUND",
        }

    def test_with_details(self):
        details = [{"field": "useCase", "message": "Use case name is required"}]
        body = error_body(ErrorKind.VALIDATION, "Validation failed", details)
        assert body["details"] == details


def _app(production: bool) -> FastAPI:
    app = FastAPI()
    register_error_handlers(app, production=production)

    @app.get("/internal")
    def internal():
        raise AppError(ErrorKind.INTERNAL, "disk full at /var/secret")

    @app.get("/crash")
    def crash():
        raise ValueError("secret detail")

    return app


class TestHandlers:
    def test_classified_internal_error_redacted_in_production(self):
        client = TestClient(_app(production=True), raise_server_exceptions=False)
        resp = client.get("/internal")
        assert resp.status_code == 500
        assert resp.json()["error"] == GENERIC_INTERNAL_MESSAGE

    def test_unhandled_error_verbose_in_development(self):
        client = TestClient(_app(production=False), raise_server_exceptions=False)
        resp = client.get("/crash")
        assert resp.status_code == 500
        assert resp.json() == {
            "success": False, "error": "secret detail", "code": "INTERNAL_SERVER_ERROR",
        }

    def test_unhandled_error_redacted_in_production(self):
        client = TestClient(_app(production=True), raise_server_exceptions=False)
        assert client.get("/crash").json()["error"] == GENERIC_INTERNAL_MESSAGE

    def test_unknown_route(self):
        client = TestClient(_app(production=False))
        resp = client.get("/missing")
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Route not found", "code": "NOT_FOUND"}
