"""
Connector-Wide Constants

All naming conventions and configuration defaults centralized here.
"""

from typing import Final

# =============================================================================
# TIME UNITS
# =============================================================================
SECOND_MS: Final[int] = 1000
MINUTE_MS: Final[int] = 60 * SECOND_MS
HOUR_MS: Final[int] = 60 * MINUTE_MS
DAY_MS: Final[int] = 24 * HOUR_MS

# =============================================================================
# KUDU CLIENT DEFAULTS
# =============================================================================
DEFAULT_MASTER_PORT: Final[int] = 7051
DEFAULT_ADMIN_OPERATION_TIMEOUT_MS: Final[int] = 30 * SECOND_MS
DEFAULT_OPERATION_TIMEOUT_MS: Final[int] = 30 * SECOND_MS
DEFAULT_SOCKET_READ_TIMEOUT_MS: Final[int] = 10 * SECOND_MS

# =============================================================================
# SCHEMA EMULATION
# =============================================================================
DEFAULT_SCHEMA: Final[str] = "default"
SCHEMA_SEPARATOR: Final[str] = "."
DEFAULT_SCHEMA_EMULATION_PREFIX: Final[str] = ""

# =============================================================================
# CONFIGURATION PROPERTY NAMES
# =============================================================================
PROP_MASTER_ADDRESSES: Final[str] = "kudu.client.master-addresses"
PROP_ADMIN_OPERATION_TIMEOUT: Final[str] = "kudu.client.default-admin-operation-timeout"
PROP_OPERATION_TIMEOUT: Final[str] = "kudu.client.default-operation-timeout"
PROP_SOCKET_READ_TIMEOUT: Final[str] = "kudu.client.default-socket-read-timeout"
PROP_DISABLE_STATISTICS: Final[str] = "kudu.client.disable-statistics"
PROP_SCHEMA_EMULATION_ENABLED: Final[str] = "kudu.schema-emulation.enabled"
PROP_SCHEMA_EMULATION_PREFIX: Final[str] = "kudu.schema-emulation.prefix"

KNOWN_PROPERTIES: Final[frozenset[str]] = frozenset({
    PROP_MASTER_ADDRESSES,
    PROP_ADMIN_OPERATION_TIMEOUT,
    PROP_OPERATION_TIMEOUT,
    PROP_SOCKET_READ_TIMEOUT,
    PROP_DISABLE_STATISTICS,
    PROP_SCHEMA_EMULATION_ENABLED,
    PROP_SCHEMA_EMULATION_PREFIX,
})

# =============================================================================
# PROCEDURES
# =============================================================================
ADD_RANGE_PARTITION_PROCEDURE: Final[str] = "system.add_range_partition"
DROP_RANGE_PARTITION_PROCEDURE: Final[str] = "system.drop_range_partition"
