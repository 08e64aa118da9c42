"""
Observability module: structured logging.
"""

from kudu_connector.observability.logging import (
    JsonFormatter,
    LogLevel,
    StructuredLogger,
    get_logger,
    setup_logging,
)

__all__ = [
    "JsonFormatter",
    "LogLevel",
    "StructuredLogger",
    "get_logger",
    "setup_logging",
]
