"""
Core module: Type definitions, error hierarchy, and configuration.

This module provides the foundational abstractions for the connector:
- Result/Either pair for non-raising name decomposition
- Exhaustive error hierarchy with error codes
- Client-session configuration with validation
"""

from kudu_connector.core.types import (
    Result,
    Ok,
    Err,
    SchemaTableName,
    Timestamp,
)
from kudu_connector.core.errors import (
    ErrorCode,
    KuduConnectorError,
    ConfigValidationError,
    StorageConnectionError,
    UnsupportedSchemaError,
    InvalidIdentifierError,
    NotConvertibleError,
    ProcedureError,
)
from kudu_connector.core.config import KuduClientConfig

__all__ = [
    "Result",
    "Ok",
    "Err",
    "SchemaTableName",
    "Timestamp",
    "ErrorCode",
    "KuduConnectorError",
    "ConfigValidationError",
    "StorageConnectionError",
    "UnsupportedSchemaError",
    "InvalidIdentifierError",
    "NotConvertibleError",
    "ProcedureError",
    "KuduClientConfig",
]
