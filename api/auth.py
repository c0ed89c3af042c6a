"""
Shared-secret authentication for mutating endpoints.

Clients send the secret in the ``X-API-Key`` header.  The configured value
comes from ``AppConfig.api_key`` (``APP_API_KEY``).  When no secret is
configured, development mode lets requests through with a warning and
production mode rejects them.
"""

import logging
import secrets

from fastapi import Request, Security
from fastapi.security import APIKeyHeader

from api.errors import AppError
from utils.config import AppConfig

logger = logging.getLogger("use_case_api")

api_key_scheme = APIKeyHeader(name="X-API-Key", auto_error=False)


def require_api_key(
    request: Request,
    x_api_key: str | None = Security(api_key_scheme),
) -> None:
    """FastAPI dependency: reject the request unless X-API-Key matches."""
    config: AppConfig = request.app.state.config

    if not config.api_key_enabled:
        if config.is_production:
            logger.error("api_key_missing path=%s: no API key configured, rejecting", request.url.path)
            raise AppError.unauthorized()
        logger.warning("api_key_missing path=%s: no API key configured, accepting (development)",
                       request.url.path)
        return

    if not x_api_key or not secrets.compare_digest(
        x_api_key.encode("utf-8"), config.api_key.encode("utf-8")
    ):
        logger.warning("api_key_rejected path=%s client=%s",
                       request.url.path,
                       request.client.host if request.client else "unknown")
        raise AppError.unauthorized()
