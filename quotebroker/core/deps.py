# quotebroker/core/deps.py
import logging

from fastapi import Depends, Request

from quotebroker.core.config import Settings, get_settings
from quotebroker.core.errors import ServiceConfigError

logger = logging.getLogger(__name__)


def require_service_config(settings: Settings = Depends(get_settings)) -> Settings:
    """
    Store endpoint, service credential and notification key must all be set
    before any workflow logic runs.
    """
    missing = settings.missing_service_config()
    if missing:
        logger.error("missing environment variables", extra={"missing": missing})
        raise ServiceConfigError()
    return settings


async def configured_body(
    request: Request,
    _settings: Settings = Depends(require_service_config),
) -> bytes:
    """Raw request body, read only after the configuration check has passed."""
    return await request.body()
