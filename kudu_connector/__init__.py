"""
Kudu Connector: Client Session Bootstrap

Bootstrap and session management for a SQL engine connector backed by
Apache Kudu:
- Configuration: master addresses, client timeouts, schema emulation
- Client: one Kudu client handle per connector instance
- Schema emulation: engine ``schema.table`` names on Kudu's flat namespace
- Session: the single object providers use to reach the cluster
- Bootstrap: per-connector registry of providers and procedures

License: MIT
"""

__version__ = "0.1.0"

# =============================================================================
# PUBLIC API EXPORTS
# =============================================================================
from kudu_connector.core.types import (
    Result,
    Ok,
    Err,
    SchemaTableName,
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

from kudu_connector.client import (
    KuduClientBuilder,
    KuduClientFactory,
    KuduClientHandle,
    ClientSettings,
)
from kudu_connector.schema import (
    SchemaEmulation,
    NoSchemaEmulation,
    SchemaEmulationByTableNameConvention,
    select_schema_emulation,
)
from kudu_connector.session import (
    KuduClientSession,
    SessionProvider,
    create_session,
)
from kudu_connector.procedures import (
    RangeBounds,
    add_range_partition,
    drop_range_partition,
    build_procedures,
)
from kudu_connector.bootstrap import ConnectorBootstrap, KuduConnector

__all__ = [
    # Version
    "__version__",
    # Result monad
    "Result",
    "Ok",
    "Err",
    "SchemaTableName",
    # Errors
    "ErrorCode",
    "KuduConnectorError",
    "ConfigValidationError",
    "StorageConnectionError",
    "UnsupportedSchemaError",
    "InvalidIdentifierError",
    "NotConvertibleError",
    "ProcedureError",
    # Config
    "KuduClientConfig",
    # Client
    "KuduClientBuilder",
    "KuduClientFactory",
    "KuduClientHandle",
    "ClientSettings",
    # Schema emulation
    "SchemaEmulation",
    "NoSchemaEmulation",
    "SchemaEmulationByTableNameConvention",
    "select_schema_emulation",
    # Session
    "KuduClientSession",
    "SessionProvider",
    "create_session",
    # Procedures
    "RangeBounds",
    "add_range_partition",
    "drop_range_partition",
    "build_procedures",
    # Bootstrap
    "ConnectorBootstrap",
    "KuduConnector",
]
