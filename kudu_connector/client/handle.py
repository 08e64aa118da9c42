"""
Kudu Client Handle
==================

Owned wrapper around the raw kudu-python client.

One handle exists per connector instance. It is shared by every
provider registered for that connector and released only at connector
shutdown. The underlying client is safe for concurrent use; the handle
adds no locking around calls, only around ``close()``.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from kudu_connector.client.protocols import KuduClientProtocol, TableAltererProtocol
from kudu_connector.core.errors import StorageConnectionError
from kudu_connector.observability.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ClientSettings:
    """
    Effective settings the client was built with.

    Attributes:
        master_addresses: Masters in configured order.
        admin_operation_timeout_ms: Bound for DDL/admin calls.
        operation_timeout_ms: Bound for read/write RPCs.
        socket_read_timeout_ms: Bound for a single socket read.
        statistics_enabled: False when statistics were disabled on the builder.
    """
    master_addresses: Tuple[str, ...]
    admin_operation_timeout_ms: int
    operation_timeout_ms: int
    socket_read_timeout_ms: int
    statistics_enabled: bool = True


class KuduClientHandle:
    """
    Exclusive owner of a connection to the Kudu cluster.

    Example:
        >>> handle = KuduClientFactory().build(config)
        >>> handle.list_tables()
        ['presto::sales.orders', 'metrics']
        >>> handle.close()
    """

    __slots__ = ("_client", "_settings", "_closed", "_close_lock")

    def __init__(self, client: KuduClientProtocol, settings: ClientSettings) -> None:
        self._client = client
        self._settings = settings
        self._closed = False
        self._close_lock = threading.Lock()

    @property
    def raw(self) -> KuduClientProtocol:
        """The underlying kudu-python client."""
        self._ensure_open()
        return self._client

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def closed(self) -> bool:
        return self._closed

    # -------------------------------------------------------------------------
    # METADATA OPERATIONS
    # -------------------------------------------------------------------------

    def list_tables(self, match_substring: Optional[str] = None) -> List[str]:
        """Physical table names, optionally filtered by substring."""
        self._ensure_open()
        if match_substring:
            return list(self._client.list_tables(match_substring))
        return list(self._client.list_tables())

    def table_exists(self, table_name: str) -> bool:
        self._ensure_open()
        return bool(self._client.table_exists(table_name))

    def table(self, table_name: str) -> Any:
        """Open a table by physical name."""
        self._ensure_open()
        return self._client.table(table_name)

    def new_table_alterer(self, table: Any) -> TableAltererProtocol:
        self._ensure_open()
        return self._client.new_table_alterer(table)

    # -------------------------------------------------------------------------
    # LIFECYCLE
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """
        Release the connection.

        Safe to call multiple times. Must not be called while
        providers may still use the handle.
        """
        with self._close_lock:
            if self._closed:
                return
            self._closed = True

        close = getattr(self._client, "close", None)
        if callable(close):
            close()
        logger.info(
            "Kudu client closed",
            master_addresses=",".join(self._settings.master_addresses),
        )

    def _ensure_open(self) -> None:
        if self._closed:
            raise StorageConnectionError.client_closed()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return (
            f"KuduClientHandle(masters={','.join(self._settings.master_addresses)!r}, "
            f"{state})"
        )
