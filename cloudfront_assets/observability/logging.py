from __future__ import annotations

import logging
from logging.config import dictConfig

from asgi_correlation_id.context import correlation_id
from pythonjsonlogger import jsonlogger

PACKAGE_LOGGER = "cloudfront_assets"


class CorrelationIdFilter(logging.Filter):
    """Tag records with the request correlation ID when rewriting inside a request."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id.get() or "unknown"
        return True


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """Route ``cloudfront_assets`` diagnostics to stderr.

    JSON lines by default so build logs can be shipped as-is; ``json_output=False``
    gives a plain one-line format for interactive use.
    """
    if json_output:
        formatter = {
            "()": jsonlogger.JsonFormatter,
            "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s %(correlation_id)s",
        }
    else:
        formatter = {"format": "%(levelname)s %(name)s: %(message)s"}

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"with_correlation": {"()": CorrelationIdFilter}},
            "formatters": {"assets": formatter},
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "assets",
                    "filters": ["with_correlation"],
                }
            },
            "loggers": {
                PACKAGE_LOGGER: {
                    "handlers": ["stderr"],
                    "level": level.upper(),
                    "propagate": False,
                },
            },
        }
    )
