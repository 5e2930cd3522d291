"""Logging setup shared by the service entry points."""

from __future__ import annotations

import logging

from tenantforms.core.config import AppSettings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: AppSettings | None = None) -> None:
    """Configure root logging from application settings."""
    if settings is None:
        settings = AppSettings()
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
    logging.getLogger("tenantforms").setLevel(settings.log_level.upper())
