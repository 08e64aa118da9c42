"""
Shared fixtures: an in-memory stand-in for the kudu-python client.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from kudu_connector.client.factory import KuduClientFactory
from kudu_connector.core.config import KuduClientConfig


class FakeKuduClient:
    """Implements the KuduClientProtocol subset over a list of names."""

    def __init__(self, tables: Optional[List[str]] = None) -> None:
        self.tables: List[str] = list(tables or [])
        self.list_calls = 0
        self.closed = False
        self.alterers: List[MagicMock] = []

    def list_tables(self, match_substring: Optional[str] = None) -> List[str]:
        self.list_calls += 1
        if match_substring:
            return [name for name in self.tables if match_substring in name]
        return list(self.tables)

    def table_exists(self, table_name: str) -> bool:
        return table_name in self.tables

    def table(self, table_name: str) -> Any:
        if table_name not in self.tables:
            raise RuntimeError(f"Not found: the table does not exist: table_name: {table_name}")
        return {"name": table_name}

    def new_table_alterer(self, table: Any) -> MagicMock:
        alterer = MagicMock(name=f"alterer[{table['name']}]")
        self.alterers.append(alterer)
        return alterer

    def close(self) -> None:
        self.closed = True


class RecordingConnect:
    """Stands in for ``kudu.connect`` and records every call."""

    def __init__(self, client: Optional[FakeKuduClient] = None, error: Optional[Exception] = None) -> None:
        self.client = client or FakeKuduClient()
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, host, port=7051, admin_timeout_ms=None, rpc_timeout_ms=None):
        self.calls.append({
            "host": host,
            "port": port,
            "admin_timeout_ms": admin_timeout_ms,
            "rpc_timeout_ms": rpc_timeout_ms,
        })
        if self.error is not None:
            raise self.error
        return self.client


@pytest.fixture
def fake_client() -> FakeKuduClient:
    return FakeKuduClient([
        "presto::sales.orders",
        "presto::sales.customers",
        "presto::hr.employees",
        "presto::broken",
        "presto::a.b.c",
        "impala::sales.orders",
        "metrics",
    ])


@pytest.fixture
def connect(fake_client: FakeKuduClient) -> RecordingConnect:
    return RecordingConnect(fake_client)


@pytest.fixture
def client_factory(connect: RecordingConnect) -> KuduClientFactory:
    return KuduClientFactory(connect)


@pytest.fixture
def plain_config() -> KuduClientConfig:
    return KuduClientConfig(master_addresses=("h1:7051",))


@pytest.fixture
def emulating_config() -> KuduClientConfig:
    return KuduClientConfig(
        master_addresses=("h1:7051", "h2"),
        default_admin_operation_timeout=timedelta(seconds=20),
        default_operation_timeout=timedelta(seconds=15),
        default_socket_read_timeout=timedelta(milliseconds=2500),
        schema_emulation_enabled=True,
        schema_emulation_prefix="presto::",
    )
