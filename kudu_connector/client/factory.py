"""
Kudu Client Factory
===================

Builds the single Kudu client handle for a connector from configuration.

Design Principles:
------------------
1. **Validate First**: Durations are checked before any builder call
2. **Builder Before Build**: Every option, including disabling
   statistics, is applied before the client is constructed
3. **Lazy Loading**: ``kudu`` is imported only when a real client is built
4. **No Retries**: A failed build raises StorageConnectionError; retry
   policy belongs to the host's connector lifecycle

Side Effects:
-------------
``build()`` may open network connections and start background
threads inside the client library, which is why a session builds it
exactly once and caches it.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from kudu_connector.client.handle import ClientSettings, KuduClientHandle
from kudu_connector.client.protocols import ConnectFunction, KuduClientProtocol
from kudu_connector.core import constants as C
from kudu_connector.core.config import KuduClientConfig, parse_master_address
from kudu_connector.core.errors import (
    ConfigValidationError,
    KuduConnectorError,
    StorageConnectionError,
)
from kudu_connector.observability.logging import get_logger

logger = get_logger(__name__)


def _import_connect() -> ConnectFunction:
    try:
        import kudu
    except ImportError as e:
        raise StorageConnectionError.client_unavailable(cause=e) from e
    return kudu.connect


# =============================================================================
# CLIENT BUILDER
# =============================================================================

class KuduClientBuilder:
    """
    Collects client options, then connects once.

    Mirrors the option set of the Kudu client builder; values are in
    the millisecond units the client library expects.

    Example:
        >>> builder = KuduClientBuilder(["m1:7051", "m2:7051"])
        >>> builder.default_operation_timeout_ms(30_000).disable_statistics()
        >>> handle = builder.build()
    """

    __slots__ = (
        "_master_addresses",
        "_connect",
        "_admin_timeout_ms",
        "_operation_timeout_ms",
        "_socket_read_timeout_ms",
        "_statistics_enabled",
        "_built",
    )

    def __init__(
        self,
        master_addresses: Sequence[str],
        connect: Optional[ConnectFunction] = None,
    ) -> None:
        self._master_addresses: Tuple[str, ...] = tuple(master_addresses)
        self._connect = connect
        self._admin_timeout_ms = C.DEFAULT_ADMIN_OPERATION_TIMEOUT_MS
        self._operation_timeout_ms = C.DEFAULT_OPERATION_TIMEOUT_MS
        self._socket_read_timeout_ms = C.DEFAULT_SOCKET_READ_TIMEOUT_MS
        self._statistics_enabled = True
        self._built = False

    def default_admin_operation_timeout_ms(self, timeout_ms: int) -> KuduClientBuilder:
        self._check_mutable()
        self._admin_timeout_ms = self._positive("default_admin_operation_timeout", timeout_ms)
        return self

    def default_operation_timeout_ms(self, timeout_ms: int) -> KuduClientBuilder:
        self._check_mutable()
        self._operation_timeout_ms = self._positive("default_operation_timeout", timeout_ms)
        return self

    def default_socket_read_timeout_ms(self, timeout_ms: int) -> KuduClientBuilder:
        self._check_mutable()
        self._socket_read_timeout_ms = self._positive("default_socket_read_timeout", timeout_ms)
        return self

    def disable_statistics(self) -> KuduClientBuilder:
        self._check_mutable()
        self._statistics_enabled = False
        return self

    @property
    def settings(self) -> ClientSettings:
        """Options as they will be applied by ``build()``."""
        return ClientSettings(
            master_addresses=self._master_addresses,
            admin_operation_timeout_ms=self._admin_timeout_ms,
            operation_timeout_ms=self._operation_timeout_ms,
            socket_read_timeout_ms=self._socket_read_timeout_ms,
            statistics_enabled=self._statistics_enabled,
        )

    def build(self) -> KuduClientHandle:
        """
        Connect to the masters and return the owned handle.

        Raises:
            StorageConnectionError: Library missing, masters unreachable,
                or addresses rejected by the client.
        """
        self._check_mutable()
        connect = self._connect or _import_connect()
        settings = self.settings

        try:
            hosts, ports = self._split_addresses()
            # kudu-python has no separate socket-read knob; the RPC
            # timeout bounds the whole call including reads.
            client: KuduClientProtocol = connect(
                hosts,
                ports,
                admin_timeout_ms=settings.admin_operation_timeout_ms,
                rpc_timeout_ms=settings.operation_timeout_ms,
            )
        except KuduConnectorError:
            raise
        except Exception as e:
            raise StorageConnectionError.connection_failed(
                self._master_addresses, cause=e
            ) from e

        self._built = True
        return KuduClientHandle(client, settings)

    def _split_addresses(self) -> Tuple[List[str], List[int]]:
        if not self._master_addresses:
            raise ConfigValidationError.missing_config("master_addresses")
        pairs = [parse_master_address(address) for address in self._master_addresses]
        return [host for host, _ in pairs], [port for _, port in pairs]

    def _check_mutable(self) -> None:
        if self._built:
            raise RuntimeError("KuduClientBuilder has already built a client")

    @staticmethod
    def _positive(name: str, timeout_ms: int) -> int:
        if timeout_ms <= 0:
            raise ConfigValidationError.non_positive_timeout(name, timeout_ms)
        return int(timeout_ms)


# =============================================================================
# FACTORY
# =============================================================================

class KuduClientFactory:
    """
    Turns a KuduClientConfig into a KuduClientHandle.

    Args:
        connect: Replacement for ``kudu.connect``. Hosts that embed
            their own client, and tests, inject one here.
    """

    __slots__ = ("_connect",)

    def __init__(self, connect: Optional[ConnectFunction] = None) -> None:
        self._connect = connect

    def builder(self, config: KuduClientConfig) -> KuduClientBuilder:
        """
        Configure a builder from config without connecting.

        Raises:
            ConfigValidationError: A timeout is zero or negative.
        """
        config.validate_timeouts()

        builder = KuduClientBuilder(config.master_addresses, connect=self._connect)
        builder.default_admin_operation_timeout_ms(config.default_admin_operation_timeout_ms)
        builder.default_operation_timeout_ms(config.default_operation_timeout_ms)
        builder.default_socket_read_timeout_ms(config.default_socket_read_timeout_ms)
        if config.disable_statistics:
            builder.disable_statistics()
        return builder

    def build(self, config: KuduClientConfig) -> KuduClientHandle:
        """
        Build the client handle.

        Raises:
            ConfigValidationError: Before any network call, on bad durations.
            StorageConnectionError: The client could not be built.
        """
        builder = self.builder(config)
        settings = builder.settings
        logger.info(
            "Building Kudu client",
            master_addresses=",".join(settings.master_addresses),
            admin_operation_timeout_ms=settings.admin_operation_timeout_ms,
            operation_timeout_ms=settings.operation_timeout_ms,
            socket_read_timeout_ms=settings.socket_read_timeout_ms,
            statistics_enabled=settings.statistics_enabled,
        )
        try:
            handle = builder.build()
        except StorageConnectionError as e:
            logger.error("Kudu client build failed", error=e.to_dict())
            raise
        logger.info("Kudu client built", master_addresses=",".join(settings.master_addresses))
        return handle


def build_client(
    config: KuduClientConfig,
    connect: Optional[ConnectFunction] = None,
) -> KuduClientHandle:
    """Shorthand for ``KuduClientFactory(connect).build(config)``."""
    return KuduClientFactory(connect).build(config)
