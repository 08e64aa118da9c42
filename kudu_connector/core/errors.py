"""
Error Hierarchy for the Kudu Connector

Design Principles:
- Construction-time errors abort session creation and reach the host
- Per-call naming errors stay local to the offending translation
- Never swallow errors; chain the library exception as ``cause``
- Carry full error context for debugging and audit trails

Each error type includes:
- Unique error code for programmatic handling
- Human-readable message for logging
- Optional cause chain for root cause analysis
- Timestamp for correlation with connector logs

Usage:
    try:
        session = create_session("kudu", config)
    except ConfigValidationError as e:
        log.error("bad kudu config", error=e.to_dict())
        raise
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Sequence
from uuid import uuid4

from kudu_connector.core.types import Timestamp


# =============================================================================
# ERROR CODE ENUMERATION
# =============================================================================
class ErrorCode(Enum):
    """
    Unique error codes for programmatic error handling.

    Codes are grouped by subsystem:
    - 1xxx: Configuration errors
    - 2xxx: Storage client errors
    - 3xxx: Naming (schema emulation) errors
    - 4xxx: Procedure errors
    """

    # Configuration errors (1xxx)
    CONFIG_MISSING = 1001
    CONFIG_INVALID_VALUE = 1002
    CONFIG_INVALID_ADDRESS = 1003
    CONFIG_NON_POSITIVE_TIMEOUT = 1004
    CONFIG_UNKNOWN_PROPERTY = 1005
    CONFIG_DUPLICATE_CONNECTOR = 1006

    # Storage client errors (2xxx)
    STORAGE_CONNECTION_FAILED = 2001
    STORAGE_CLIENT_UNAVAILABLE = 2002
    STORAGE_CLIENT_CLOSED = 2003

    # Naming errors (3xxx)
    NAMING_UNSUPPORTED_SCHEMA = 3001
    NAMING_INVALID_IDENTIFIER = 3002
    NAMING_NOT_CONVERTIBLE = 3003

    # Procedure errors (4xxx)
    PROCEDURE_INVALID_RANGE_BOUNDS = 4001
    PROCEDURE_ALTER_FAILED = 4002
    PROCEDURE_UNKNOWN = 4003
    PROCEDURE_INVALID_ARGUMENTS = 4004


# =============================================================================
# BASE ERROR CLASS
# =============================================================================
@dataclass
class KuduConnectorError(Exception):
    """
    Base class for all connector errors.

    Provides common infrastructure for error handling:
    - Unique error ID for log correlation
    - Error code for programmatic handling
    - Timestamp for correlation
    - Cause chain for root cause analysis
    """

    code: ErrorCode
    message: str
    error_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: Timestamp = field(default_factory=Timestamp.now)
    cause: Optional[BaseException] = None
    context: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize error to dictionary for logging."""
        return {
            "error_id": self.error_id,
            "code": self.code.name,
            "code_value": self.code.value,
            "message": self.message,
            "timestamp_nanos": self.timestamp.nanos,
            "context": self.context,
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message} (id={self.error_id[:8]})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code.name}, "
            f"message={self.message!r}, "
            f"error_id={self.error_id!r})"
        )


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================
@dataclass
class ConfigValidationError(KuduConnectorError):
    """
    Missing or invalid configuration.

    Detected before any network activity; fatal to connector
    startup and never retried.
    """

    @classmethod
    def missing_config(cls, what: str = "config") -> ConfigValidationError:
        """Required configuration object or field is absent."""
        return cls(
            code=ErrorCode.CONFIG_MISSING,
            message=f"{what} is required",
            context={"field": what},
        )

    @classmethod
    def invalid_value(
        cls,
        field_name: str,
        value: Any,
        reason: str,
        cause: Optional[BaseException] = None,
    ) -> ConfigValidationError:
        """Configuration value could not be parsed or is out of range."""
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field_name}': {reason}",
            cause=cause,
            context={"field": field_name, "value": str(value)[:100], "reason": reason},
        )

    @classmethod
    def invalid_address(cls, address: str, reason: str) -> ConfigValidationError:
        """Master address is not a valid host[:port]."""
        return cls(
            code=ErrorCode.CONFIG_INVALID_ADDRESS,
            message=f"Invalid master address '{address}': {reason}",
            context={"address": address, "reason": reason},
        )

    @classmethod
    def non_positive_timeout(cls, field_name: str, millis: float) -> ConfigValidationError:
        """A configured duration is zero or negative."""
        return cls(
            code=ErrorCode.CONFIG_NON_POSITIVE_TIMEOUT,
            message=f"'{field_name}' must be > 0, got {millis}ms",
            context={"field": field_name, "millis": millis},
        )

    @classmethod
    def unknown_property(cls, names: Sequence[str]) -> ConfigValidationError:
        """Properties under the kudu namespace that nothing consumes."""
        return cls(
            code=ErrorCode.CONFIG_UNKNOWN_PROPERTY,
            message=f"Unknown configuration properties: {', '.join(sorted(names))}",
            context={"properties": sorted(names)},
        )

    @classmethod
    def duplicate_connector(cls, connector_id: str) -> ConfigValidationError:
        """A connector with this id is already active in the process."""
        return cls(
            code=ErrorCode.CONFIG_DUPLICATE_CONNECTOR,
            message=f"Connector '{connector_id}' is already active",
            context={"connector_id": connector_id},
        )


# =============================================================================
# STORAGE CLIENT ERRORS
# =============================================================================
@dataclass
class StorageConnectionError(KuduConnectorError):
    """
    Failure building or using the Kudu client handle.

    Fatal to startup. The host may retry connector initialization;
    nothing in this package retries.
    """

    @classmethod
    def connection_failed(
        cls,
        master_addresses: Sequence[str],
        cause: Optional[BaseException] = None,
    ) -> StorageConnectionError:
        """Client builder could not reach or parse the masters."""
        return cls(
            code=ErrorCode.STORAGE_CONNECTION_FAILED,
            message=f"Failed to connect to Kudu masters {','.join(master_addresses)}"
                    + (f": {cause}" if cause is not None else ""),
            cause=cause,
            context={"master_addresses": list(master_addresses)},
        )

    @classmethod
    def client_unavailable(
        cls,
        cause: Optional[BaseException] = None,
    ) -> StorageConnectionError:
        """The kudu client library is not importable."""
        return cls(
            code=ErrorCode.STORAGE_CLIENT_UNAVAILABLE,
            message="kudu-python package not installed: pip install kudu-connector[kudu]",
            cause=cause,
        )

    @classmethod
    def client_closed(cls, connector_id: Optional[str] = None) -> StorageConnectionError:
        """The client handle was already released."""
        return cls(
            code=ErrorCode.STORAGE_CLIENT_CLOSED,
            message="Kudu client has been closed"
                    + (f" for connector '{connector_id}'" if connector_id else ""),
            context={"connector_id": connector_id},
        )


# =============================================================================
# NAMING ERRORS
# =============================================================================
@dataclass
class UnsupportedSchemaError(KuduConnectorError):
    """Logical schema is not addressable without schema emulation."""

    @classmethod
    def for_schema(cls, schema: str, default_schema: str) -> UnsupportedSchemaError:
        return cls(
            code=ErrorCode.NAMING_UNSUPPORTED_SCHEMA,
            message=f"Schema '{schema}' is not supported when schema emulation "
                    f"is disabled; only '{default_schema}' is available",
            context={"schema": schema, "default_schema": default_schema},
        )


@dataclass
class InvalidIdentifierError(KuduConnectorError):
    """Schema or table name would break the naming convention."""

    @classmethod
    def for_identifier(cls, kind: str, name: str, reason: str) -> InvalidIdentifierError:
        return cls(
            code=ErrorCode.NAMING_INVALID_IDENTIFIER,
            message=f"Invalid {kind} name '{name}': {reason}",
            context={"kind": kind, "name": name, "reason": reason},
        )


@dataclass
class NotConvertibleError(KuduConnectorError):
    """
    Physical table name cannot be decomposed under the active convention.

    Callers enumerating schemas or tables skip such names.
    """

    @classmethod
    def for_name(cls, physical_name: str, reason: str) -> NotConvertibleError:
        return cls(
            code=ErrorCode.NAMING_NOT_CONVERTIBLE,
            message=f"Table name '{physical_name}' is not convertible: {reason}",
            context={"physical_name": physical_name, "reason": reason},
        )


# =============================================================================
# PROCEDURE ERRORS
# =============================================================================
@dataclass
class ProcedureError(KuduConnectorError):
    """Errors from connector procedures (range partition management)."""

    @classmethod
    def invalid_range_bounds(
        cls,
        range_bounds: str,
        reason: str,
        cause: Optional[BaseException] = None,
    ) -> ProcedureError:
        return cls(
            code=ErrorCode.PROCEDURE_INVALID_RANGE_BOUNDS,
            message=f"Invalid range bounds: {reason}",
            cause=cause,
            context={"range_bounds": range_bounds[:200], "reason": reason},
        )

    @classmethod
    def alter_failed(
        cls,
        procedure: str,
        table: str,
        cause: Optional[BaseException] = None,
    ) -> ProcedureError:
        return cls(
            code=ErrorCode.PROCEDURE_ALTER_FAILED,
            message=f"{procedure} failed on table '{table}'"
                    + (f": {cause}" if cause is not None else ""),
            cause=cause,
            context={"procedure": procedure, "table": table},
        )

    @classmethod
    def unknown_procedure(cls, name: str) -> ProcedureError:
        return cls(
            code=ErrorCode.PROCEDURE_UNKNOWN,
            message=f"Unknown procedure '{name}'",
            context={"procedure": name},
        )

    @classmethod
    def invalid_arguments(
        cls,
        name: str,
        arg_count: int,
        cause: Optional[BaseException] = None,
    ) -> ProcedureError:
        """Arguments do not match the procedure's parameters."""
        return cls(
            code=ErrorCode.PROCEDURE_INVALID_ARGUMENTS,
            message=f"Invalid arguments for procedure '{name}'"
                    + (f": {cause}" if cause is not None else ""),
            cause=cause,
            context={"procedure": name, "arg_count": arg_count},
        )
