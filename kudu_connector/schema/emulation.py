"""
Schema Emulation: Two-Level Names on a Flat Table Namespace
===========================================================

Kudu stores tables under a single flat name. The query engine addresses
tables as ``schema.table``. A SchemaEmulation maps between the two.

Variants:
---------
- NoSchemaEmulation: every table lives in the fixed ``default`` schema
  and the physical name is the table name.
- SchemaEmulationByTableNameConvention: the physical name is
  ``prefix + schema + "." + table``.

The separator ``.`` is reserved: neither schema nor table may contain
it under the naming convention, which keeps the mapping a bijection and
the reverse split unambiguous.

Selection is a pure function of configuration (``select_schema_emulation``).
Enumerating operations fetch table names from the cluster on every call;
nothing is cached.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from kudu_connector.client.protocols import TableNameSource
from kudu_connector.core import constants as C
from kudu_connector.core.config import KuduClientConfig
from kudu_connector.core.errors import (
    InvalidIdentifierError,
    NotConvertibleError,
    UnsupportedSchemaError,
)
from kudu_connector.core.types import Err, Ok, Result, SchemaTableName


class SchemaEmulation(ABC):
    """
    Strategy translating logical (schema, table) names to physical names.

    Implementations are immutable and hold no connection; operations
    that need the cluster take a TableNameSource argument.
    """

    __slots__ = ()

    @abstractmethod
    def to_physical_name(self, schema: str, table: str) -> str:
        """Physical Kudu table name for a logical name."""

    @abstractmethod
    def try_logical_name(
        self, physical_name: str
    ) -> Result[SchemaTableName, NotConvertibleError]:
        """Decompose a physical name without raising."""

    @abstractmethod
    def list_schemas(self, client: TableNameSource) -> List[str]:
        """Schemas visible in the cluster right now."""

    @abstractmethod
    def list_tables(
        self, client: TableNameSource, schema: Optional[str] = None
    ) -> List[SchemaTableName]:
        """Logical names of tables, optionally within one schema."""

    def to_logical_name(self, physical_name: str) -> SchemaTableName:
        """
        Logical name for a physical table name.

        Raises:
            NotConvertibleError: The name does not follow the convention.
        """
        return self.try_logical_name(physical_name).unwrap()

    def schema_exists(self, client: TableNameSource, schema: str) -> bool:
        return schema in self.list_schemas(client)

    @property
    def enabled(self) -> bool:
        return False

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self._key() == other._key()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self._key()))

    def _key(self) -> tuple:
        return ()


# =============================================================================
# DISABLED
# =============================================================================

class NoSchemaEmulation(SchemaEmulation):
    """Identity mapping; only the ``default`` schema exists."""

    __slots__ = ()

    def to_physical_name(self, schema: str, table: str) -> str:
        """
        Raises:
            UnsupportedSchemaError: ``schema`` is not ``default``.
        """
        self._check_schema(schema)
        return table

    def try_logical_name(
        self, physical_name: str
    ) -> Result[SchemaTableName, NotConvertibleError]:
        return Ok(SchemaTableName(C.DEFAULT_SCHEMA, physical_name))

    def list_schemas(self, client: TableNameSource) -> List[str]:
        return [C.DEFAULT_SCHEMA]

    def list_tables(
        self, client: TableNameSource, schema: Optional[str] = None
    ) -> List[SchemaTableName]:
        if schema is not None:
            self._check_schema(schema)
        return [SchemaTableName(C.DEFAULT_SCHEMA, name) for name in client.list_tables()]

    def schema_exists(self, client: TableNameSource, schema: str) -> bool:
        return schema == C.DEFAULT_SCHEMA

    @staticmethod
    def _check_schema(schema: str) -> None:
        if schema != C.DEFAULT_SCHEMA:
            raise UnsupportedSchemaError.for_schema(schema, C.DEFAULT_SCHEMA)

    def __repr__(self) -> str:
        return "NoSchemaEmulation()"


# =============================================================================
# PREFIX CONVENTION
# =============================================================================

class SchemaEmulationByTableNameConvention(SchemaEmulation):
    """
    Physical name = ``prefix + schema + "." + table``.

    An empty prefix is allowed; every table name with exactly one
    separator then belongs to some schema.

    Example:
        >>> emulation = SchemaEmulationByTableNameConvention("presto::")
        >>> emulation.to_physical_name("sales", "orders")
        'presto::sales.orders'
        >>> emulation.to_logical_name("presto::sales.orders")
        SchemaTableName(schema='sales', table='orders')
    """

    __slots__ = ("_prefix",)

    def __init__(self, prefix: str = C.DEFAULT_SCHEMA_EMULATION_PREFIX) -> None:
        self._prefix = prefix or ""

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def enabled(self) -> bool:
        return True

    def to_physical_name(self, schema: str, table: str) -> str:
        """
        Raises:
            InvalidIdentifierError: schema or table is empty or contains
                the reserved separator.
        """
        self._check_identifier("schema", schema)
        self._check_identifier("table", table)
        return f"{self._prefix}{schema}{C.SCHEMA_SEPARATOR}{table}"

    def try_logical_name(
        self, physical_name: str
    ) -> Result[SchemaTableName, NotConvertibleError]:
        if not physical_name.startswith(self._prefix):
            return Err(NotConvertibleError.for_name(
                physical_name, f"missing prefix '{self._prefix}'"
            ))

        rest = physical_name[len(self._prefix):]
        if rest.count(C.SCHEMA_SEPARATOR) != 1:
            return Err(NotConvertibleError.for_name(
                physical_name, f"expected exactly one '{C.SCHEMA_SEPARATOR}' after prefix"
            ))

        schema, _, table = rest.partition(C.SCHEMA_SEPARATOR)
        if not schema or not table:
            return Err(NotConvertibleError.for_name(physical_name, "empty schema or table"))
        return Ok(SchemaTableName(schema, table))

    def list_schemas(self, client: TableNameSource) -> List[str]:
        schemas = {
            result.unwrap().schema
            for result in map(self.try_logical_name, self._candidates(client))
            if result.is_ok()
        }
        return sorted(schemas)

    def list_tables(
        self, client: TableNameSource, schema: Optional[str] = None
    ) -> List[SchemaTableName]:
        if schema is not None:
            self._check_identifier("schema", schema)
            pattern = f"{self._prefix}{schema}{C.SCHEMA_SEPARATOR}"
        else:
            pattern = self._prefix

        names: List[SchemaTableName] = []
        for physical in self._candidates(client, pattern):
            result = self.try_logical_name(physical)
            if result.is_err():
                continue
            logical = result.unwrap()
            if schema is None or logical.schema == schema:
                names.append(logical)
        return sorted(names)

    def _candidates(self, client: TableNameSource, pattern: str = "") -> List[str]:
        # Server-side substring filter narrows the scan; parsing decides.
        if pattern:
            return client.list_tables(pattern)
        return client.list_tables()

    @staticmethod
    def _check_identifier(kind: str, name: str) -> None:
        if not name:
            raise InvalidIdentifierError.for_identifier(kind, name, "must not be empty")
        if C.SCHEMA_SEPARATOR in name:
            raise InvalidIdentifierError.for_identifier(
                kind, name, f"must not contain '{C.SCHEMA_SEPARATOR}'"
            )

    def _key(self) -> tuple:
        return (self._prefix,)

    def __repr__(self) -> str:
        return f"SchemaEmulationByTableNameConvention(prefix={self._prefix!r})"


# =============================================================================
# SELECTION
# =============================================================================

def select_schema_emulation(config: KuduClientConfig) -> SchemaEmulation:
    """Pure selection from configuration; performs no I/O."""
    if config.schema_emulation_enabled:
        return SchemaEmulationByTableNameConvention(config.schema_emulation_prefix)
    return NoSchemaEmulation()
