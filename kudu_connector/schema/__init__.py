"""
Schema Module: namespace emulation strategies.
"""

from kudu_connector.schema.emulation import (
    SchemaEmulation,
    NoSchemaEmulation,
    SchemaEmulationByTableNameConvention,
    select_schema_emulation,
)

__all__ = [
    "SchemaEmulation",
    "NoSchemaEmulation",
    "SchemaEmulationByTableNameConvention",
    "select_schema_emulation",
]
