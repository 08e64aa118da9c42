"""
Unit Tests: Connector Bootstrap

Tests:
    - Connector creation from config objects and raw properties
    - Connector id uniqueness and release on shutdown
    - Providers built once around the shared session
    - Procedure dispatch
"""

import threading
import time
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from kudu_connector.bootstrap import ConnectorBootstrap
from kudu_connector.client.factory import KuduClientFactory
from kudu_connector.core.config import KuduClientConfig
from kudu_connector.core.errors import (
    ConfigValidationError,
    ErrorCode,
    ProcedureError,
    StorageConnectionError,
)

from kudu_connector.tests.conftest import FakeKuduClient, RecordingConnect


class BlockingConnect(RecordingConnect):
    """Holds every connect until ``release`` is set."""

    def __init__(self, client=None):
        super().__init__(client or FakeKuduClient())
        self.entered = threading.Event()
        self.release = threading.Event()

    def __call__(self, *args, **kwargs):
        self.entered.set()
        self.release.wait(timeout=5)
        return super().__call__(*args, **kwargs)


@pytest.fixture
def bootstrap(client_factory):
    return ConnectorBootstrap(client_factory)


class TestCreate:
    """Tests for ConnectorBootstrap.create."""

    def test_from_properties(self, bootstrap, connect):
        connector = bootstrap.create("kudu", {
            "connector.name": "kudu",
            "kudu.client.master-addresses": "h1:7051",
            "kudu.schema-emulation.enabled": "true",
            "kudu.schema-emulation.prefix": "presto::",
        })
        assert connector.connector_id == "kudu"
        assert connector.session.to_physical_name("sales", "orders") == "presto::sales.orders"
        assert len(connect.calls) == 1
        assert bootstrap.active_connectors() == ["kudu"]

    def test_session_built_eagerly(self, bootstrap, connect, plain_config):
        bootstrap.create("kudu", plain_config)
        assert len(connect.calls) == 1

    def test_type_manager_passthrough(self, bootstrap, plain_config):
        type_manager = object()
        connector = bootstrap.create("kudu", plain_config, type_manager=type_manager)
        assert connector.type_manager is type_manager

    def test_missing_config(self, bootstrap, connect):
        with pytest.raises(ConfigValidationError) as exc_info:
            bootstrap.create("kudu", None)
        assert exc_info.value.code == ErrorCode.CONFIG_MISSING
        assert connect.calls == []

    def test_invalid_config_leaves_id_free(self, bootstrap, connect, plain_config):
        bad = KuduClientConfig(
            master_addresses=("h1",),
            default_socket_read_timeout=timedelta(0),
        )
        with pytest.raises(ConfigValidationError):
            bootstrap.create("kudu", bad)
        assert connect.calls == []
        assert bootstrap.active_connectors() == []
        bootstrap.create("kudu", plain_config)

    def test_connection_failure_leaves_id_free(self, plain_config):
        connect = RecordingConnect(error=OSError("down"))
        bootstrap = ConnectorBootstrap(KuduClientFactory(connect))
        with pytest.raises(StorageConnectionError):
            bootstrap.create("kudu", plain_config)
        assert bootstrap.active_connectors() == []

        connect.error = None
        bootstrap.create("kudu", plain_config)
        assert bootstrap.active_connectors() == ["kudu"]

    def test_duplicate_id(self, bootstrap, plain_config):
        bootstrap.create("kudu", plain_config)
        with pytest.raises(ConfigValidationError) as exc_info:
            bootstrap.create("kudu", plain_config)
        assert exc_info.value.code == ErrorCode.CONFIG_DUPLICATE_CONNECTOR

    def test_distinct_ids_get_distinct_sessions(self, bootstrap, connect, plain_config):
        first = bootstrap.create("kudu_a", plain_config)
        second = bootstrap.create("kudu_b", plain_config)
        assert first.session is not second.session
        assert len(connect.calls) == 2


class TestConcurrentCreate:
    """A slow client build must not stall the rest of the bootstrap."""

    @pytest.fixture
    def blocking(self):
        connect = BlockingConnect()
        yield connect
        connect.release.set()

    def _create_in_thread(self, bootstrap, connector_id, config):
        errors = []

        def run():
            try:
                bootstrap.create(connector_id, config)
            except Exception as e:
                errors.append(e)

        thread = threading.Thread(target=run, daemon=True)
        thread.start()
        return thread, errors

    def test_active_connectors_not_blocked_by_build(self, blocking, plain_config):
        bootstrap = ConnectorBootstrap(KuduClientFactory(blocking))
        thread, errors = self._create_in_thread(bootstrap, "a", plain_config)
        assert blocking.entered.wait(timeout=2)

        started = time.monotonic()
        assert bootstrap.active_connectors() == []
        assert time.monotonic() - started < 0.5

        blocking.release.set()
        thread.join(timeout=2)
        assert errors == []
        assert bootstrap.active_connectors() == ["a"]

    def test_id_reserved_while_building(self, blocking, plain_config):
        bootstrap = ConnectorBootstrap(KuduClientFactory(blocking))
        thread, errors = self._create_in_thread(bootstrap, "a", plain_config)
        assert blocking.entered.wait(timeout=2)

        with pytest.raises(ConfigValidationError) as exc_info:
            bootstrap.create("a", plain_config)
        assert exc_info.value.code == ErrorCode.CONFIG_DUPLICATE_CONNECTOR

        blocking.release.set()
        thread.join(timeout=2)
        assert errors == []
        assert len(blocking.calls) == 1


class TestProviders:
    """Tests for provider binding on KuduConnector."""

    def test_provider_built_once_with_session(self, bootstrap, plain_config):
        split_manager = MagicMock(name="split_manager")
        connector = bootstrap.create(
            "kudu", plain_config, providers={"split_manager": split_manager}
        )
        first = connector.get("split_manager")
        second = connector.get("split_manager")
        assert first is second
        split_manager.assert_called_once_with(connector.session)

    def test_all_providers_share_session(self, bootstrap, plain_config):
        connector = bootstrap.create("kudu", plain_config, providers={
            "metadata": lambda session: ("metadata", session),
            "page_source": lambda session: ("page_source", session),
        })
        assert connector.get("metadata")[1] is connector.get("page_source")[1]
        assert connector.bound_names() == ["metadata", "page_source"]

    def test_duplicate_bind(self, bootstrap, plain_config):
        connector = bootstrap.create("kudu", plain_config, providers={"metadata": MagicMock()})
        with pytest.raises(ValueError):
            connector.bind("metadata", MagicMock())

    def test_unknown_provider(self, bootstrap, plain_config):
        connector = bootstrap.create("kudu", plain_config)
        with pytest.raises(KeyError):
            connector.get("record_set")


class TestProcedures:
    """Tests for procedure dispatch."""

    def test_call_procedure(self, bootstrap, emulating_config, fake_client):
        connector = bootstrap.create("kudu", emulating_config)
        connector.call_procedure(
            "system.drop_range_partition", "sales", "orders", '{"lower": 1, "upper": 2}'
        )
        fake_client.alterers[0].drop_range_partition.assert_called_once_with(
            lower_bound=(1,), upper_bound=(2,)
        )

    def test_procedures_cached(self, bootstrap, plain_config):
        connector = bootstrap.create("kudu", plain_config)
        assert connector.procedures is connector.procedures

    def test_unknown_procedure(self, bootstrap, plain_config):
        connector = bootstrap.create("kudu", plain_config)
        with pytest.raises(ProcedureError) as exc_info:
            connector.call_procedure("system.compact", "default", "orders")
        assert exc_info.value.code == ErrorCode.PROCEDURE_UNKNOWN

    @pytest.mark.parametrize("args", [
        ("sales",),
        ("sales", "orders"),
        ("sales", "orders", '{"lower": 1}', "extra"),
    ])
    def test_wrong_argument_count(self, bootstrap, emulating_config, fake_client, args):
        connector = bootstrap.create("kudu", emulating_config)
        with pytest.raises(ProcedureError) as exc_info:
            connector.call_procedure("system.add_range_partition", *args)
        assert exc_info.value.code == ErrorCode.PROCEDURE_INVALID_ARGUMENTS
        assert exc_info.value.context["arg_count"] == len(args)
        assert fake_client.alterers == []


class TestShutdown:
    """Tests for connector shutdown."""

    def test_shutdown_releases_id(self, bootstrap, plain_config, fake_client):
        connector = bootstrap.create("kudu", plain_config)
        connector.shutdown()
        connector.shutdown()
        assert connector.closed
        assert fake_client.closed
        assert bootstrap.active_connectors() == []
        bootstrap.create("kudu", plain_config)

    def test_session_unavailable_after_shutdown(self, bootstrap, plain_config):
        connector = bootstrap.create("kudu", plain_config)
        connector.shutdown()
        with pytest.raises(StorageConnectionError):
            connector.session

    def test_shutdown_all(self, bootstrap, plain_config):
        bootstrap.create("kudu_a", plain_config)
        bootstrap.create("kudu_b", plain_config)
        bootstrap.shutdown_all()
        assert bootstrap.active_connectors() == []
