"""
Procedures Module: storage-cluster metadata mutations exposed to the engine.
"""

from kudu_connector.procedures.range_partitions import (
    RangeBounds,
    add_range_partition,
    drop_range_partition,
    build_procedures,
)

__all__ = [
    "RangeBounds",
    "add_range_partition",
    "drop_range_partition",
    "build_procedures",
]
