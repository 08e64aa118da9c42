"""
Range Partition Procedures
==========================

``system.add_range_partition(schema, table, range_bounds)`` and
``system.drop_range_partition(schema, table, range_bounds)``.

``range_bounds`` is JSON::

    {"lower": <bound>, "upper": <bound>}

where a bound is ``null`` (unbounded), a scalar (single range column),
a list (one value per range column, in order) or an object mapping
column name to value. The lower bound is inclusive, the upper exclusive.

Both procedures resolve the table through the session's schema
emulation and use the session's client; they never build a client of
their own.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from kudu_connector.core import constants as C
from kudu_connector.core.errors import KuduConnectorError, ProcedureError
from kudu_connector.observability.logging import get_logger
from kudu_connector.session.client_session import KuduClientSession

logger = get_logger(__name__)

Bound = Optional[Union[Tuple[Any, ...], Dict[str, Any]]]
ProcedureHandler = Callable[[str, str, str], None]

_BOUND_KEYS = frozenset({"lower", "upper"})
_SCALAR_TYPES = (str, int, float, bool)


@dataclass(frozen=True, slots=True)
class RangeBounds:
    """Parsed range partition bounds; ``None`` means unbounded."""

    lower: Bound = None
    upper: Bound = None

    @classmethod
    def parse(cls, text: str) -> RangeBounds:
        """
        Raises:
            ProcedureError: Not JSON, not an object, unknown keys, or
                an unsupported bound shape.
        """
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as e:
            raise ProcedureError.invalid_range_bounds(str(text), "not valid JSON", cause=e) from e

        if not isinstance(data, dict):
            raise ProcedureError.invalid_range_bounds(text, "expected a JSON object")
        unknown = set(data) - _BOUND_KEYS
        if unknown:
            raise ProcedureError.invalid_range_bounds(
                text, f"unknown keys: {', '.join(sorted(unknown))}"
            )

        return cls(
            lower=cls._bound(text, "lower", data.get("lower")),
            upper=cls._bound(text, "upper", data.get("upper")),
        )

    @staticmethod
    def _bound(text: str, which: str, value: Any) -> Bound:
        if value is None:
            return None
        if isinstance(value, _SCALAR_TYPES):
            return (value,)
        if isinstance(value, list):
            if not value:
                raise ProcedureError.invalid_range_bounds(text, f"{which} bound is empty")
            if not all(isinstance(v, _SCALAR_TYPES) for v in value):
                raise ProcedureError.invalid_range_bounds(
                    text, f"{which} bound values must be scalars"
                )
            return tuple(value)
        if isinstance(value, dict):
            if not value:
                raise ProcedureError.invalid_range_bounds(text, f"{which} bound is empty")
            return dict(value)
        raise ProcedureError.invalid_range_bounds(text, f"unsupported {which} bound")


def add_range_partition(
    session: KuduClientSession,
    schema: str,
    table: str,
    range_bounds: str,
) -> None:
    """Add a range partition to a table."""
    _alter_range_partition(session, C.ADD_RANGE_PARTITION_PROCEDURE, schema, table, range_bounds)


def drop_range_partition(
    session: KuduClientSession,
    schema: str,
    table: str,
    range_bounds: str,
) -> None:
    """Drop a range partition from a table."""
    _alter_range_partition(session, C.DROP_RANGE_PARTITION_PROCEDURE, schema, table, range_bounds)


def _alter_range_partition(
    session: KuduClientSession,
    procedure: str,
    schema: str,
    table: str,
    range_bounds: str,
) -> None:
    bounds = RangeBounds.parse(range_bounds)
    physical_name = session.to_physical_name(schema, table)

    try:
        kudu_table = session.client.table(physical_name)
        alterer = session.client.new_table_alterer(kudu_table)
        if procedure == C.ADD_RANGE_PARTITION_PROCEDURE:
            alterer.add_range_partition(lower_bound=bounds.lower, upper_bound=bounds.upper)
        else:
            alterer.drop_range_partition(lower_bound=bounds.lower, upper_bound=bounds.upper)
        alterer.alter()
    except KuduConnectorError:
        raise
    except Exception as e:
        error = ProcedureError.alter_failed(procedure, physical_name, cause=e)
        logger.error("Range partition change failed", error=error.to_dict())
        raise error from e

    logger.info(
        "Range partition changed",
        procedure=procedure,
        connector_id=session.connector_id,
        table=physical_name,
        lower=bounds.lower,
        upper=bounds.upper,
    )


def build_procedures(session: KuduClientSession) -> Mapping[str, ProcedureHandler]:
    """
    Procedure name -> handler bound to the connector's session.

    Handlers take ``(schema, table, range_bounds)``.
    """
    return {
        C.ADD_RANGE_PARTITION_PROCEDURE: partial(add_range_partition, session),
        C.DROP_RANGE_PARTITION_PROCEDURE: partial(drop_range_partition, session),
    }
