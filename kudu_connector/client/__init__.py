"""
Client Module: Kudu Client Construction
=======================================

Provides:
- Protocol definitions for the parts of kudu-python in use
- KuduClientBuilder / KuduClientFactory to build the client once
- KuduClientHandle, the owned and shareable connection

Example:
    >>> from kudu_connector.core.config import KuduClientConfig
    >>> handle = build_client(KuduClientConfig(master_addresses=("kudu-master",)))
"""

from kudu_connector.client.protocols import (
    ConnectFunction,
    KuduClientProtocol,
    TableAltererProtocol,
    TableNameSource,
)
from kudu_connector.client.handle import ClientSettings, KuduClientHandle
from kudu_connector.client.factory import (
    KuduClientBuilder,
    KuduClientFactory,
    build_client,
)

__all__ = [
    "ConnectFunction",
    "KuduClientProtocol",
    "TableAltererProtocol",
    "TableNameSource",
    "ClientSettings",
    "KuduClientHandle",
    "KuduClientBuilder",
    "KuduClientFactory",
    "build_client",
]
