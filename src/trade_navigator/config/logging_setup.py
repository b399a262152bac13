"""
Logging configuration helper.

Configures process-wide logging once from the settings' log level.
"""
import logging

from .settings import get_settings

_LOGGING_CONFIGURED = False


def configure_logging():
    """Configure process-wide logging from settings."""
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    _LOGGING_CONFIGURED = True
