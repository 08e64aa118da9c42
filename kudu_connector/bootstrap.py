"""
Connector Bootstrap: Per-Connector Service Registry
===================================================

Explicit construction of everything a connector instance exposes to the
host engine:

- one KuduClientSession (through a SessionProvider build-once gate)
- the range-partition procedures bound to that session
- host-supplied provider factories (split manager, record-set provider,
  page source/sink providers, ...), each called once with the session

The host keeps one ConnectorBootstrap and calls ``create()`` once per
catalog. Connector ids are unique among the connectors it has active.

Example:
    >>> bootstrap = ConnectorBootstrap()
    >>> connector = bootstrap.create(
    ...     "kudu",
    ...     {"kudu.client.master-addresses": "kudu-master:7051"},
    ...     providers={"split_manager": KuduSplitManager},
    ... )
    >>> connector.get("split_manager")
    >>> connector.shutdown()
"""

from __future__ import annotations

import inspect
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, Set, Union

from kudu_connector.client.factory import KuduClientFactory
from kudu_connector.core.config import KuduClientConfig
from kudu_connector.core.errors import ConfigValidationError, ProcedureError
from kudu_connector.observability.logging import get_logger
from kudu_connector.procedures.range_partitions import ProcedureHandler, build_procedures
from kudu_connector.session.client_session import KuduClientSession
from kudu_connector.session.provider import SessionProvider

logger = get_logger(__name__)

ProviderFactory = Callable[[KuduClientSession], Any]


class KuduConnector:
    """
    Services of one connector instance, all sharing one session.

    Providers are constructed on first ``get()`` and cached; a factory
    is never called twice for the same connector.
    """

    __slots__ = (
        "_connector_id",
        "_config",
        "_type_manager",
        "_sessions",
        "_factories",
        "_providers",
        "_procedures",
        "_lock",
        "_on_shutdown",
    )

    def __init__(
        self,
        connector_id: str,
        config: KuduClientConfig,
        sessions: SessionProvider,
        type_manager: Any = None,
        on_shutdown: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._connector_id = connector_id
        self._config = config
        self._type_manager = type_manager
        self._sessions = sessions
        self._factories: Dict[str, ProviderFactory] = {}
        self._providers: Dict[str, Any] = {}
        self._procedures: Optional[Mapping[str, ProcedureHandler]] = None
        self._lock = threading.RLock()
        self._on_shutdown = on_shutdown

    @property
    def connector_id(self) -> str:
        return self._connector_id

    @property
    def config(self) -> KuduClientConfig:
        return self._config

    @property
    def type_manager(self) -> Any:
        """Host type registry, passed through untouched."""
        return self._type_manager

    @property
    def session(self) -> KuduClientSession:
        return self._sessions.get()

    @property
    def closed(self) -> bool:
        return self._sessions.closed

    # -------------------------------------------------------------------------
    # PROVIDERS
    # -------------------------------------------------------------------------

    def bind(self, name: str, factory: ProviderFactory) -> None:
        """
        Register a provider factory under a name.

        Raises:
            ValueError: name already bound.
        """
        with self._lock:
            if name in self._factories:
                raise ValueError(f"provider '{name}' is already bound")
            self._factories[name] = factory

    def get(self, name: str) -> Any:
        """
        Provider instance for ``name``, constructed once.

        Raises:
            KeyError: nothing bound under ``name``.
        """
        with self._lock:
            if name in self._providers:
                return self._providers[name]
            factory = self._factories.get(name)
            if factory is None:
                raise KeyError(f"no provider bound as '{name}'")
            provider = factory(self.session)
            self._providers[name] = provider
            return provider

    def bound_names(self) -> List[str]:
        with self._lock:
            return sorted(self._factories)

    # -------------------------------------------------------------------------
    # PROCEDURES
    # -------------------------------------------------------------------------

    @property
    def procedures(self) -> Mapping[str, ProcedureHandler]:
        with self._lock:
            if self._procedures is None:
                self._procedures = build_procedures(self.session)
            return self._procedures

    def call_procedure(self, name: str, *args: str) -> None:
        """
        Raises:
            ProcedureError: unknown procedure name, arguments that do not
                match its parameters, or the procedure failed.
        """
        handler = self.procedures.get(name)
        if handler is None:
            raise ProcedureError.unknown_procedure(name)
        try:
            inspect.signature(handler).bind(*args)
        except TypeError as e:
            raise ProcedureError.invalid_arguments(name, len(args), cause=e) from e
        handler(*args)

    # -------------------------------------------------------------------------
    # LIFECYCLE
    # -------------------------------------------------------------------------

    def shutdown(self) -> None:
        """Release the client handle and the connector id. Idempotent."""
        with self._lock:
            if self._sessions.closed:
                return
            self._sessions.shutdown()
        logger.info("Kudu connector shut down", connector_id=self._connector_id)
        if self._on_shutdown is not None:
            self._on_shutdown(self._connector_id)

    def __repr__(self) -> str:
        return f"KuduConnector(connector_id={self._connector_id!r}, providers={self.bound_names()!r})"


class ConnectorBootstrap:
    """
    Creates connectors and tracks which connector ids are active.

    Args:
        client_factory: Shared factory used for every connector's client.
    """

    __slots__ = ("_client_factory", "_active", "_pending", "_lock")

    def __init__(self, client_factory: Optional[KuduClientFactory] = None) -> None:
        self._client_factory = client_factory
        self._active: Dict[str, KuduConnector] = {}
        self._pending: Set[str] = set()
        self._lock = threading.Lock()

    def create(
        self,
        connector_id: str,
        config: Union[KuduClientConfig, Mapping[str, str], None],
        type_manager: Any = None,
        providers: Optional[Mapping[str, ProviderFactory]] = None,
    ) -> KuduConnector:
        """
        Build a connector and its session.

        Startup errors (configuration, client build) propagate and leave
        the connector id free for a later attempt.

        Raises:
            ConfigValidationError: invalid config or duplicate connector id.
            StorageConnectionError: the client could not be built.
        """
        if not connector_id:
            raise ConfigValidationError.missing_config("connector_id")
        if config is None:
            raise ConfigValidationError.missing_config("config")
        if not isinstance(config, KuduClientConfig):
            config = KuduClientConfig.from_properties(config)

        with self._lock:
            if connector_id in self._active or connector_id in self._pending:
                raise ConfigValidationError.duplicate_connector(connector_id)
            self._pending.add(connector_id)

        sessions = SessionProvider(connector_id, config, self._client_factory)
        connector = KuduConnector(
            connector_id,
            config,
            sessions,
            type_manager=type_manager,
            on_shutdown=self._release,
        )
        # The client build may block on the masters; only the id is held
        # under the lock. Startup is fatal on failure: build now, not on
        # first query.
        try:
            sessions.get()
            for name, factory in (providers or {}).items():
                connector.bind(name, factory)
        except BaseException:
            sessions.shutdown()
            with self._lock:
                self._pending.discard(connector_id)
            raise

        with self._lock:
            self._pending.discard(connector_id)
            self._active[connector_id] = connector

        logger.info(
            "Kudu connector created",
            connector_id=connector_id,
            providers=connector.bound_names(),
        )
        return connector

    def active_connectors(self) -> List[str]:
        with self._lock:
            return sorted(self._active)

    def shutdown_all(self) -> None:
        with self._lock:
            connectors = list(self._active.values())
        for connector in connectors:
            connector.shutdown()

    def _release(self, connector_id: str) -> None:
        with self._lock:
            self._active.pop(connector_id, None)
