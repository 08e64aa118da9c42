"""
Client Protocol Definitions: Kudu Client Surface

Structural subtyping protocols (PEP 544) describing the parts of the
kudu-python client this package touches:
- KuduClientProtocol: the raw client returned by ``kudu.connect``
- TableAltererProtocol: the alterer used for range partition changes
- TableNameSource: anything that can enumerate physical table names
- ConnectFunction: signature of ``kudu.connect``

Fakes used in tests and embedded host clients satisfy these
protocols without inheriting from anything.
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, Sequence, Union, runtime_checkable


# =============================================================================
# RAW CLIENT
# =============================================================================
@runtime_checkable
class TableAltererProtocol(Protocol):
    """Subset of ``kudu.client.TableAlterer``."""

    def add_range_partition(
        self,
        lower_bound: Any = None,
        upper_bound: Any = None,
        lower_bound_type: str = "inclusive",
        upper_bound_type: str = "exclusive",
    ) -> Any:
        ...

    def drop_range_partition(
        self,
        lower_bound: Any = None,
        upper_bound: Any = None,
        lower_bound_type: str = "inclusive",
        upper_bound_type: str = "exclusive",
    ) -> Any:
        ...

    def alter(self) -> Any:
        ...


@runtime_checkable
class KuduClientProtocol(Protocol):
    """Subset of ``kudu.client.Client``."""

    def list_tables(self, match_substring: Optional[str] = None) -> List[str]:
        ...

    def table_exists(self, table_name: str) -> bool:
        ...

    def table(self, table_name: str) -> Any:
        ...

    def new_table_alterer(self, table: Any) -> TableAltererProtocol:
        ...


class ConnectFunction(Protocol):
    """Signature of ``kudu.connect``."""

    def __call__(
        self,
        host: Union[str, Sequence[str]],
        port: Union[int, Sequence[int]] = ...,
        admin_timeout_ms: Optional[int] = None,
        rpc_timeout_ms: Optional[int] = None,
    ) -> KuduClientProtocol:
        ...


# =============================================================================
# NAME SOURCE
# =============================================================================
@runtime_checkable
class TableNameSource(Protocol):
    """Enumerates the physical table names currently in the cluster."""

    def list_tables(self, match_substring: Optional[str] = None) -> List[str]:
        ...
