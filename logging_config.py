"""Configuration des logs structurés (structlog, rendu JSON)."""

import logging
import os
from typing import Optional

import structlog

from errors import ConfigError

_configured = False


def _resolve_level(raw_value: str) -> int:
    level = logging.getLevelName(raw_value.strip().upper())
    if not isinstance(level, int):
        raise ConfigError(f"Valeur invalide pour FORMS_LOG_LEVEL: '{raw_value}'")
    return level


def configure_logging(level_name: Optional[str] = None) -> None:
    """Configure structlog une seule fois pour tout le processus."""
    global _configured
    level = _resolve_level(level_name or os.environ.get("FORMS_LOG_LEVEL", "INFO"))
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str):
    """Retourne un logger structlog pour le module donné."""
    if not _configured:
        configure_logging()
    return structlog.get_logger(name)
