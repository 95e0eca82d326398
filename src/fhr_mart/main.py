"""Entry point for the FHR Mart storefront service.

Creates the FastAPI application, configures logging, and starts the
uvicorn server.
"""

from __future__ import annotations

import structlog
import uvicorn
from fastapi import FastAPI

from common import setup_logging

from fhr_mart.advisor import AdvisoryGateway
from fhr_mart.api import create_app
from fhr_mart.config import Settings, get_settings

logger = structlog.get_logger(__name__)


def build_app(
    settings: Settings | None = None,
    advisor: AdvisoryGateway | None = None,
) -> FastAPI:
    """Construct the fully-configured storefront application."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, json_logs=settings.environment == "production")

    app = create_app(settings, advisor=advisor)

    state = app.state.app_state
    logger.info(
        "application_ready",
        service=settings.service_name,
        version=settings.service_version,
        products=len(state.catalog),
        assistant_online=state.advisor.configured,
    )
    return app


def main() -> None:
    """Launch the FHR Mart server."""
    settings = get_settings()
    app = build_app(settings)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
