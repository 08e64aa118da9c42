"""
Unit Tests: Kudu Client Construction

Tests:
    - Builder option translation to milliseconds
    - Statistics switch applied before build
    - Error wrapping and the no-connect guarantee on bad config
    - Handle lifecycle
"""

import logging
import sys
from datetime import timedelta

import pytest

from kudu_connector.client.factory import KuduClientBuilder, KuduClientFactory, build_client
from kudu_connector.client.handle import ClientSettings, KuduClientHandle
from kudu_connector.core.config import KuduClientConfig
from kudu_connector.core.errors import (
    ConfigValidationError,
    ErrorCode,
    StorageConnectionError,
)

from kudu_connector.tests.conftest import RecordingConnect


class TestKuduClientBuilder:
    """Tests for KuduClientBuilder."""

    def test_defaults(self, connect):
        handle = KuduClientBuilder(["h1:7051"], connect).build()
        assert connect.calls == [{
            "host": ["h1"],
            "port": [7051],
            "admin_timeout_ms": 30_000,
            "rpc_timeout_ms": 30_000,
        }]
        assert handle.settings.statistics_enabled is True
        assert handle.settings.socket_read_timeout_ms == 10_000

    def test_fluent_options(self, connect):
        builder = (
            KuduClientBuilder(["h1:7051", "[::1]:7150"], connect)
            .default_admin_operation_timeout_ms(5000)
            .default_operation_timeout_ms(7000)
            .default_socket_read_timeout_ms(900)
            .disable_statistics()
        )
        handle = builder.build()
        assert connect.calls[0]["host"] == ["h1", "::1"]
        assert connect.calls[0]["port"] == [7051, 7150]
        assert connect.calls[0]["admin_timeout_ms"] == 5000
        assert connect.calls[0]["rpc_timeout_ms"] == 7000
        assert handle.settings == ClientSettings(
            master_addresses=("h1:7051", "[::1]:7150"),
            admin_operation_timeout_ms=5000,
            operation_timeout_ms=7000,
            socket_read_timeout_ms=900,
            statistics_enabled=False,
        )

    @pytest.mark.parametrize("timeout_ms", [0, -1])
    def test_rejects_non_positive(self, connect, timeout_ms):
        builder = KuduClientBuilder(["h1"], connect)
        with pytest.raises(ConfigValidationError) as exc_info:
            builder.default_operation_timeout_ms(timeout_ms)
        assert exc_info.value.code == ErrorCode.CONFIG_NON_POSITIVE_TIMEOUT

    def test_options_frozen_after_build(self, connect):
        builder = KuduClientBuilder(["h1"], connect)
        builder.build()
        with pytest.raises(RuntimeError):
            builder.disable_statistics()
        with pytest.raises(RuntimeError):
            builder.build()

    def test_no_addresses(self, connect):
        with pytest.raises(ConfigValidationError):
            KuduClientBuilder([], connect).build()
        assert connect.calls == []

    def test_connect_failure_wrapped(self):
        cause = OSError("connection refused")
        connect = RecordingConnect(error=cause)
        with pytest.raises(StorageConnectionError) as exc_info:
            KuduClientBuilder(["h1:7051"], connect).build()
        assert exc_info.value.code == ErrorCode.STORAGE_CONNECTION_FAILED
        assert exc_info.value.cause is cause
        assert exc_info.value.__cause__ is cause
        assert exc_info.value.context["master_addresses"] == ["h1:7051"]

    def test_library_missing(self, monkeypatch):
        # A None entry makes the import raise ImportError
        monkeypatch.setitem(sys.modules, "kudu", None)
        with pytest.raises(StorageConnectionError) as exc_info:
            KuduClientBuilder(["h1"]).build()
        assert exc_info.value.code == ErrorCode.STORAGE_CLIENT_UNAVAILABLE
        assert isinstance(exc_info.value.cause, ImportError)


class TestKuduClientFactory:
    """Tests for KuduClientFactory."""

    def test_translates_config(self, connect, client_factory, emulating_config, fake_client):
        handle = client_factory.build(emulating_config)
        assert isinstance(handle, KuduClientHandle)
        assert handle.raw is fake_client
        assert connect.calls == [{
            "host": ["h1", "h2"],
            "port": [7051, 7051],
            "admin_timeout_ms": 20_000,
            "rpc_timeout_ms": 15_000,
        }]
        assert handle.settings.socket_read_timeout_ms == 2500
        assert handle.settings.statistics_enabled is True

    def test_disable_statistics(self, client_factory):
        config = KuduClientConfig(master_addresses=("h1",), disable_statistics=True)
        assert client_factory.builder(config).settings.statistics_enabled is False
        assert client_factory.build(config).settings.statistics_enabled is False

    def test_builder_does_not_connect(self, connect, client_factory, plain_config):
        client_factory.builder(plain_config)
        assert connect.calls == []

    def test_zero_timeout_never_connects(self, connect, client_factory):
        config = KuduClientConfig(
            master_addresses=("h1",),
            default_admin_operation_timeout=timedelta(0),
        )
        with pytest.raises(ConfigValidationError):
            client_factory.build(config)
        assert connect.calls == []

    def test_build_client_shorthand(self, connect, plain_config):
        handle = build_client(plain_config, connect)
        assert handle.list_tables() == connect.client.tables

    def test_build_failure_logged_with_error_fields(self, plain_config, caplog):
        factory = KuduClientFactory(RecordingConnect(error=OSError("down")))
        with caplog.at_level(logging.ERROR, logger="kudu_connector.client.factory"):
            with pytest.raises(StorageConnectionError) as exc_info:
                factory.build(plain_config)
        (record,) = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert record.getMessage() == "Kudu client build failed"
        assert record.error == exc_info.value.to_dict()
        assert record.error["code"] == "STORAGE_CONNECTION_FAILED"
        assert record.error["error_id"] == exc_info.value.error_id
        assert record.error["context"]["master_addresses"] == ["h1:7051"]


class TestKuduClientHandle:
    """Tests for KuduClientHandle."""

    @pytest.fixture
    def handle(self, fake_client):
        settings = ClientSettings(("h1:7051",), 1000, 1000, 1000)
        return KuduClientHandle(fake_client, settings)

    def test_list_tables_filter(self, handle):
        assert handle.list_tables("hr.") == ["presto::hr.employees"]

    def test_table_exists(self, handle):
        assert handle.table_exists("metrics")
        assert not handle.table_exists("missing")

    def test_close_idempotent(self, handle, fake_client):
        handle.close()
        handle.close()
        assert handle.closed
        assert fake_client.closed

    def test_use_after_close(self, handle):
        handle.close()
        with pytest.raises(StorageConnectionError) as exc_info:
            handle.list_tables()
        assert exc_info.value.code == ErrorCode.STORAGE_CLIENT_CLOSED
        with pytest.raises(StorageConnectionError):
            handle.raw

    def test_client_without_close(self):
        class NoClose:
            def list_tables(self, match_substring=None):
                return []

        handle = KuduClientHandle(NoClose(), ClientSettings(("h1",), 1, 1, 1))
        handle.close()
        assert handle.closed

