"""
Session Provider: Build-Once Gate
=================================

Guarantees a single KuduClientSession (and so a single client handle)
per connector instance, whichever thread asks first.

Lifecycle:
    UNBUILT --get()--> BUILT --shutdown()--> CLOSED
    UNBUILT --get() fails--> UNBUILT   (host may retry initialization)
    UNBUILT --shutdown()--> CLOSED
"""

from __future__ import annotations

import threading
from typing import Optional

from kudu_connector.client.factory import KuduClientFactory
from kudu_connector.core.config import KuduClientConfig
from kudu_connector.core.errors import StorageConnectionError
from kudu_connector.session.client_session import KuduClientSession, create_session


class SessionProvider:
    """
    Lazily creates the connector's session exactly once.

    Thread Safety:
        ``get()`` and ``shutdown()`` serialize on one lock. Handle use
        after construction is not synchronized here.

    Example:
        >>> provider = SessionProvider("kudu", config)
        >>> provider.get() is provider.get()
        True
        >>> provider.shutdown()
    """

    __slots__ = ("_connector_id", "_config", "_client_factory", "_session", "_closed", "_lock")

    def __init__(
        self,
        connector_id: str,
        config: KuduClientConfig,
        client_factory: Optional[KuduClientFactory] = None,
    ) -> None:
        self._connector_id = connector_id
        self._config = config
        self._client_factory = client_factory
        self._session: Optional[KuduClientSession] = None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def connector_id(self) -> str:
        return self._connector_id

    @property
    def built(self) -> bool:
        return self._session is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def get(self) -> KuduClientSession:
        """
        Return the session, building it on first call.

        Raises:
            ConfigValidationError / StorageConnectionError: from the
                first build; the gate stays open for a later attempt.
            StorageConnectionError: the provider was shut down.
        """
        session = self._session
        if session is not None and not self._closed:
            return session

        with self._lock:
            if self._closed:
                raise StorageConnectionError.client_closed(self._connector_id)
            if self._session is None:
                self._session = create_session(
                    self._connector_id, self._config, self._client_factory
                )
            return self._session

    def shutdown(self) -> None:
        """Close the session if it was built. Idempotent."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            session = self._session
        if session is not None:
            session.close()
