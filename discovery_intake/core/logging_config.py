# discovery_intake/core/logging_config.py
import logging
import sys
from typing import Optional

import structlog


def setup_logging(level: str = "INFO") -> None:
    """
    Configure structlog + standaard logging.
    Logs gaan als JSON naar stdout (Vercel / Cloud Run pakt dit automatisch op).
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


# Korter dan dit: geen enkel teken van de key loggen
MIN_MASKED_LENGTH = 24


def mask_secret(secret: Optional[str]) -> dict:
    """Diagnostics for a credential without ever logging it in full."""
    if not secret:
        return {"has_key": False, "key_prefix": None, "key_suffix": None, "key_length": 0}
    long_enough = len(secret) >= MIN_MASKED_LENGTH
    return {
        "has_key": True,
        "key_prefix": secret[:7] if long_enough else None,
        "key_suffix": secret[-4:] if long_enough else None,
        "key_length": len(secret),
    }


# Globale logger die je overal kunt importeren
logger = structlog.get_logger("discovery-intake")
