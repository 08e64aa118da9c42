"""
Kudu Client Session
===================

The per-connector bundle of a live client handle and its naming strategy.

Every provider registered for a connector (metadata, splits, record
sets, page sources and sinks, procedures) reaches the cluster through
the same session. Session state is fixed at construction; changing the
schema-emulation policy means recreating the connector, so already
planned queries never see table names resolve two different ways.
"""

from __future__ import annotations

from typing import Any, List, Optional

from kudu_connector.client.factory import KuduClientFactory
from kudu_connector.client.handle import KuduClientHandle
from kudu_connector.core.config import KuduClientConfig
from kudu_connector.core.errors import ConfigValidationError
from kudu_connector.core.types import SchemaTableName
from kudu_connector.observability.logging import get_logger
from kudu_connector.schema.emulation import SchemaEmulation, select_schema_emulation

logger = get_logger(__name__)


class KuduClientSession:
    """
    Connector identity + client handle + schema emulation.

    Read-only after construction. Use ``create_session`` rather than
    calling the constructor so configuration is validated first.
    """

    __slots__ = ("_connector_id", "_client", "_schema_emulation")

    def __init__(
        self,
        connector_id: str,
        client: KuduClientHandle,
        schema_emulation: SchemaEmulation,
    ) -> None:
        self._connector_id = connector_id
        self._client = client
        self._schema_emulation = schema_emulation

    @property
    def connector_id(self) -> str:
        return self._connector_id

    @property
    def client(self) -> KuduClientHandle:
        return self._client

    @property
    def schema_emulation(self) -> SchemaEmulation:
        return self._schema_emulation

    # -------------------------------------------------------------------------
    # NAMING
    # -------------------------------------------------------------------------

    def to_physical_name(self, schema: str, table: str) -> str:
        return self._schema_emulation.to_physical_name(schema, table)

    def to_logical_name(self, physical_name: str) -> SchemaTableName:
        return self._schema_emulation.to_logical_name(physical_name)

    def list_schemas(self) -> List[str]:
        return self._schema_emulation.list_schemas(self._client)

    def list_tables(self, schema: Optional[str] = None) -> List[SchemaTableName]:
        return self._schema_emulation.list_tables(self._client, schema)

    def schema_exists(self, schema: str) -> bool:
        return self._schema_emulation.schema_exists(self._client, schema)

    def open_table(self, schema: str, table: str) -> Any:
        """Open the Kudu table behind a logical name."""
        return self._client.table(self.to_physical_name(schema, table))

    # -------------------------------------------------------------------------
    # LIFECYCLE
    # -------------------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._client.closed

    def close(self) -> None:
        """Release the client handle. Idempotent."""
        self._client.close()

    def __repr__(self) -> str:
        return (
            f"KuduClientSession(connector_id={self._connector_id!r}, "
            f"client={self._client!r}, "
            f"schema_emulation={self._schema_emulation!r})"
        )


def create_session(
    connector_id: str,
    config: Optional[KuduClientConfig],
    client_factory: Optional[KuduClientFactory] = None,
) -> KuduClientSession:
    """
    Validate config, build the client, select the naming strategy.

    Called once per connector instance; see SessionProvider for the
    build-once gate when the caller cannot guarantee that.

    Raises:
        ConfigValidationError: config missing or invalid; raised before
            any connection attempt.
        StorageConnectionError: the client could not be built.
    """
    if config is None:
        raise ConfigValidationError.missing_config("config")
    if not connector_id:
        raise ConfigValidationError.missing_config("connector_id")
    config.validate()

    factory = client_factory or KuduClientFactory()
    with logger.context(connector_id=connector_id):
        client = factory.build(config)
        try:
            schema_emulation = select_schema_emulation(config)
        except BaseException:
            client.close()
            raise

        session = KuduClientSession(connector_id, client, schema_emulation)
        logger.info(
            "Kudu client session created",
            schema_emulation=repr(schema_emulation),
        )
    return session
