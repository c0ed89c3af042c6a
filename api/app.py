"""
FastAPI application factory.

Usage:
    python -m api.app                         # Dev server on port 3001
    APP_DB_PATH=/data/use_cases.sqlite python -m api.app

OpenAPI docs available at http://localhost:3001/docs after starting.

Settings come from an ``AppConfig`` (environment variables by default);
tests pass their own instance to create_app().  Each application owns its
connection pool on ``app.state.pool``.
"""

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from api.database import ConnectionPool
from api.errors import register_error_handlers
from api.models import HealthOut
from api.routes import frontend as frontend_routes
from api.routes import use_cases
from utils.config import AppConfig

_logger = logging.getLogger("use_case_api")

# Requests slower than this are logged again at WARNING level.
SLOW_REQUEST_MS = 500

# ── Structured JSON logging ───────────────────────────────────────────────────


class _JsonFormatter(logging.Formatter):
    """Emit log records as newline-delimited JSON."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Merge extra fields added via logger.info("...", extra={...})
        for key in ("method", "path", "status", "duration_ms", "client_ip",
                    "request_id"):
            if hasattr(record, key):
                data[key] = getattr(record, key)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


def configure_logging(log_format: str) -> None:
    """Install a single stderr handler on the root logger."""
    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
    logging.basicConfig(handlers=[handler], level=logging.INFO, force=True)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the effective settings on startup; close pooled connections on shutdown."""
    cfg: AppConfig = app.state.config
    _logger.info(
        "startup env=%s db=%s api_key=%s cors=%s",
        cfg.environment, cfg.db_path,
        "configured" if cfg.api_key_enabled else "NOT configured",
        ",".join(cfg.cors_origins),
    )
    if not cfg.api_key_enabled:
        if cfg.is_production:
            _logger.warning("APP_API_KEY is not set; POST /api/use-cases will reject every request")
        else:
            _logger.warning("APP_API_KEY is not set; POST /api/use-cases is open (development)")
    yield
    app.state.pool.close_all()
    _logger.info("shutdown complete")


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Settings to use; read from the environment when omitted.

    Returns:
        Configured FastAPI application instance.
    """
    cfg = config if config is not None else AppConfig.from_env()
    configure_logging(cfg.log_format)

    app = FastAPI(
        title="Use Case Library API",
        summary="Browse, filter and contribute digital transformation use cases.",
        description=(
            "## Use Case Library API\n\n"
            "A catalogue of use cases, each tagged with an industry, a department "
            "and a value chain step.\n\n"
            "### Conventions\n"
            "- Field names are **camelCase** on the wire.\n"
            "- Lists are paginated (`page`, `limit` ≤ 100) and newest first.\n"
            "- `POST /api/use-cases` requires the shared secret in `X-API-Key`.\n"
            "- Errors have the shape "
            "`{success: false, error, code, details?}`."
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {
                "name": "use-cases",
                "description": "List, filter, fetch and create use cases.",
            },
            {
                "name": "meta",
                "description": "Health check.",
            },
        ],
    )

    app.state.config = cfg
    app.state.pool = ConnectionPool(cfg.db_path, max_size=cfg.pool_size)
    app.state.started_at = time.monotonic()

    # ── CORS middleware ───────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-API-Key"],
    )

    # ── Request logging middleware ────────────────────────────────────────────

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log each request with a short request ID and its duration."""
        request_id = str(uuid.uuid4())[:8]
        start = time.monotonic()
        client_ip = request.client.host if request.client else "unknown"
        path = request.url.path

        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000

        response.headers["X-Request-ID"] = request_id

        if cfg.log_format == "json":
            _logger.info(
                "request",
                extra={
                    "method": request.method,
                    "path": path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                    "client_ip": client_ip,
                    "request_id": request_id,
                },
            )
        else:
            _logger.info(
                "method=%s path=%s status=%d duration_ms=%.1f ip=%s rid=%s",
                request.method, path, response.status_code, duration_ms,
                client_ip, request_id,
            )
        if duration_ms > SLOW_REQUEST_MS:
            _logger.warning(
                "slow_request method=%s path=%s duration_ms=%.1f",
                request.method, path, duration_ms,
            )
        return response

    # ── Security headers ──────────────────────────────────────────────────────

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        """Add Content-Security-Policy, X-Content-Type-Options, and X-Frame-Options."""
        response = await call_next(request)
        # 'unsafe-inline' is required for the page bootstrap <script> blocks.
        # cdn.jsdelivr.net serves the Swagger UI assets at /docs.
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self' cdn.jsdelivr.net 'unsafe-inline'; "
            "style-src 'self' cdn.jsdelivr.net 'unsafe-inline'; "
            "img-src 'self' data: fastapi.tiangolo.com; "
            "font-src 'self'; "
            "connect-src 'self';"
        )
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response

    # ── Error handling ────────────────────────────────────────────────────────
    register_error_handlers(app, production=cfg.is_production)

    # ── Health check ──────────────────────────────────────────────────────────

    @app.get("/health", tags=["meta"], summary="Health check", response_model=HealthOut)
    def health() -> HealthOut:
        """Return 200 while the process is serving requests."""
        return HealthOut(
            status="healthy",
            timestamp=_utc_now_iso(),
            uptime=round(time.monotonic() - app.state.started_at, 3),
        )

    # ── Register routers ──────────────────────────────────────────────────────
    app.include_router(use_cases.router, prefix="/api")

    # ── Static files + Jinja2 templates ───────────────────────────────────────
    _here = Path(__file__).parent.parent  # project root

    static_dir = _here / "static"
    templates_dir = _here / "templates"

    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    if templates_dir.exists():
        templates = Jinja2Templates(directory=str(templates_dir))
        frontend_routes.set_templates(templates)
        app.include_router(frontend_routes.router)

    return app


# Singleton instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn
    _cfg: AppConfig = app.state.config
    uvicorn.run(
        "api.app:app",
        host=_cfg.api_host,
        port=_cfg.api_port,
        reload=True,
        log_level="info",
    )
