"""
Configuration Management for the Kudu Connector

Provides the client-session configuration with sensible defaults.
Binds the host's string properties and supports environment overrides.

Design:
- Immutable after construction (frozen dataclass)
- Construction normalises, ``validate()`` enforces invariants
- Fail-fast with ConfigValidationError before any network activity
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from kudu_connector.core import constants as C
from kudu_connector.core.errors import ConfigValidationError


# =============================================================================
# VALUE PARSERS
# =============================================================================

_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([a-zA-Z]*)\s*$")

# Unit suffix -> milliseconds per unit
_DURATION_UNITS_MS: Dict[str, float] = {
    "ns": 1e-6,
    "us": 1e-3,
    "ms": 1.0,
    "s": float(C.SECOND_MS),
    "m": float(C.MINUTE_MS),
    "h": float(C.HOUR_MS),
    "d": float(C.DAY_MS),
}

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES = frozenset({"false", "0", "no", "off"})


def parse_duration(value: Union[str, int, float, timedelta], field_name: str = "duration") -> timedelta:
    """
    Parse a duration such as ``500ms``, ``10s``, ``2m`` or ``1.5h``.

    Bare numbers are milliseconds. Negative values are rejected here
    since the grammar has no sign; zero parses and is rejected by
    ``KuduClientConfig.validate()``.

    Raises:
        ConfigValidationError: If the text is not a duration.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _millis_to_timedelta(value, value, field_name)

    match = _DURATION_RE.match(str(value))
    if match is None:
        raise ConfigValidationError.invalid_value(field_name, value, "not a duration")

    amount, unit = match.groups()
    unit = unit.lower() or "ms"
    per_unit = _DURATION_UNITS_MS.get(unit)
    if per_unit is None:
        raise ConfigValidationError.invalid_value(
            field_name, value, f"unknown duration unit '{unit}'"
        )
    return _millis_to_timedelta(float(amount) * per_unit, value, field_name)


def _millis_to_timedelta(millis: float, value: object, field_name: str) -> timedelta:
    # timedelta rejects magnitudes past ~10**9 days and non-finite floats
    try:
        return timedelta(milliseconds=millis)
    except (OverflowError, ValueError) as e:
        raise ConfigValidationError.invalid_value(
            field_name, value, "duration out of range", cause=e
        ) from e


def format_duration(value: timedelta) -> str:
    """Render a duration in the most compact exact unit."""
    millis = to_millis(value)
    for unit, per_unit in (("d", C.DAY_MS), ("h", C.HOUR_MS), ("m", C.MINUTE_MS), ("s", C.SECOND_MS)):
        if millis and millis % per_unit == 0:
            return f"{millis // per_unit}{unit}"
    return f"{millis}ms"


def to_millis(value: timedelta) -> int:
    """Whole milliseconds in a duration (truncating sub-millisecond parts)."""
    return value // timedelta(milliseconds=1)


def parse_bool(value: Union[str, bool], field_name: str = "flag") -> bool:
    """Parse ``true/false/1/0/yes/no/on/off``."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigValidationError.invalid_value(field_name, value, "not a boolean")


def parse_master_address(address: str) -> Tuple[str, int]:
    """
    Split ``host[:port]`` into its parts.

    IPv6 literals must be bracketed (``[::1]:7051``). The port
    defaults to the Kudu master RPC port.

    Raises:
        ConfigValidationError: If the address is malformed.
    """
    text = address.strip()
    if not text:
        raise ConfigValidationError.invalid_address(address, "empty address")

    port_text: Optional[str] = None
    if text.startswith("["):
        host, closed, rest = text[1:].partition("]")
        if not closed:
            raise ConfigValidationError.invalid_address(address, "unterminated '['")
        if rest:
            if not rest.startswith(":"):
                raise ConfigValidationError.invalid_address(address, "expected ':' after ']'")
            port_text = rest[1:]
    elif text.count(":") == 1:
        host, port_text = text.split(":")
    elif ":" in text:
        raise ConfigValidationError.invalid_address(address, "IPv6 hosts must be bracketed")
    else:
        host = text

    if not host or any(ch.isspace() for ch in host):
        raise ConfigValidationError.invalid_address(address, "invalid host")

    if port_text is None:
        return host, C.DEFAULT_MASTER_PORT
    if not port_text.isdigit():
        raise ConfigValidationError.invalid_address(address, f"invalid port '{port_text}'")
    port = int(port_text)
    if not (1 <= port <= 65535):
        raise ConfigValidationError.invalid_address(address, f"port {port} out of range")
    return host, port


def split_list(value: Union[str, Iterable[str]]) -> Tuple[str, ...]:
    """Comma-separated text (or an iterable) to a tuple of trimmed entries."""
    items = value.split(",") if isinstance(value, str) else list(value)
    return tuple(item.strip() for item in items if item and item.strip())


def load_properties_file(path: Union[str, Path]) -> Dict[str, str]:
    """
    Read a ``key=value`` catalog properties file.

    Blank lines and lines starting with ``#`` or ``!`` are ignored.
    """
    properties: Dict[str, str] = {}
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped[0] in "#!":
            continue
        key, sep, value = stripped.partition("=")
        if not sep:
            key, sep, value = stripped.partition(":")
        properties[key.strip()] = value.strip()
    return properties


# =============================================================================
# CLIENT SESSION CONFIGURATION
# =============================================================================

@dataclass(frozen=True, slots=True)
class KuduClientConfig:
    """
    Kudu client and schema-emulation configuration.

    Thread Safety:
    -------------
    Frozen dataclass - immutable after construction.
    Safe for concurrent access without synchronization.

    Attributes:
        master_addresses: Ordered ``host[:port]`` entries. Required.
        default_admin_operation_timeout: Bound for DDL/admin calls. > 0.
        default_operation_timeout: Bound for read/write RPCs. > 0.
        default_socket_read_timeout: Bound for a single socket read. > 0.
        disable_statistics: Turn client statistics collection off.
        schema_emulation_enabled: Map schemas onto table-name prefixes.
        schema_emulation_prefix: Common prefix of emulated tables; may be empty.

    Example:
        >>> config = KuduClientConfig(master_addresses=("kudu-master:7051",))
        >>> config = KuduClientConfig.from_properties({
        ...     "kudu.client.master-addresses": "m1:7051,m2:7051",
        ...     "kudu.schema-emulation.enabled": "true",
        ... })
    """

    master_addresses: Tuple[str, ...] = field(default_factory=tuple)
    default_admin_operation_timeout: timedelta = timedelta(
        milliseconds=C.DEFAULT_ADMIN_OPERATION_TIMEOUT_MS
    )
    default_operation_timeout: timedelta = timedelta(
        milliseconds=C.DEFAULT_OPERATION_TIMEOUT_MS
    )
    default_socket_read_timeout: timedelta = timedelta(
        milliseconds=C.DEFAULT_SOCKET_READ_TIMEOUT_MS
    )
    disable_statistics: bool = False
    schema_emulation_enabled: bool = False
    schema_emulation_prefix: str = C.DEFAULT_SCHEMA_EMULATION_PREFIX

    def __post_init__(self) -> None:
        # Accept a comma-separated string or any iterable of addresses
        if not isinstance(self.master_addresses, tuple):
            object.__setattr__(self, "master_addresses", split_list(self.master_addresses))
        if self.schema_emulation_prefix is None:
            object.__setattr__(self, "schema_emulation_prefix", "")

    # -------------------------------------------------------------------------
    # VALIDATION
    # -------------------------------------------------------------------------

    def validate(self) -> None:
        """
        Enforce configuration invariants.

        Pre-conditions (enforced):
        - master_addresses non-empty and each a valid host[:port]
        - every timeout > 0
        - schema_emulation_prefix is a string (empty allowed)

        Raises:
            ConfigValidationError: On the first violated invariant.
        """
        if not self.master_addresses:
            raise ConfigValidationError.missing_config("master_addresses")
        for address in self.master_addresses:
            parse_master_address(address)

        self.validate_timeouts()

        if not isinstance(self.schema_emulation_prefix, str):
            raise ConfigValidationError.invalid_value(
                "schema_emulation_prefix", self.schema_emulation_prefix, "not a string"
            )

    def validate_timeouts(self) -> None:
        """Reject zero or negative durations."""
        for name, value in self.timeouts().items():
            if not isinstance(value, timedelta):
                raise ConfigValidationError.invalid_value(name, value, "not a duration")
            if value <= timedelta(0):
                raise ConfigValidationError.non_positive_timeout(
                    name, value / timedelta(milliseconds=1)
                )

    def timeouts(self) -> Dict[str, timedelta]:
        return {
            "default_admin_operation_timeout": self.default_admin_operation_timeout,
            "default_operation_timeout": self.default_operation_timeout,
            "default_socket_read_timeout": self.default_socket_read_timeout,
        }

    # -------------------------------------------------------------------------
    # DERIVED VALUES
    # -------------------------------------------------------------------------

    @property
    def default_admin_operation_timeout_ms(self) -> int:
        return to_millis(self.default_admin_operation_timeout)

    @property
    def default_operation_timeout_ms(self) -> int:
        return to_millis(self.default_operation_timeout)

    @property
    def default_socket_read_timeout_ms(self) -> int:
        return to_millis(self.default_socket_read_timeout)

    @property
    def master_host_ports(self) -> List[Tuple[str, int]]:
        """Parsed ``(host, port)`` pairs, in configured order."""
        return [parse_master_address(address) for address in self.master_addresses]

    # -------------------------------------------------------------------------
    # BINDING
    # -------------------------------------------------------------------------

    @classmethod
    def from_properties(cls, properties: Mapping[str, str]) -> KuduClientConfig:
        """
        Bind catalog properties supplied by the host.

        Keys outside the ``kudu.`` namespace belong to the host and
        are ignored; unknown ``kudu.`` keys are rejected.

        Raises:
            ConfigValidationError: Unknown key, unparseable value, or
                violated invariant.
        """
        unknown = [
            key for key in properties
            if key.startswith("kudu.") and key not in C.KNOWN_PROPERTIES
        ]
        if unknown:
            raise ConfigValidationError.unknown_property(unknown)

        kwargs: Dict[str, object] = {}
        if C.PROP_MASTER_ADDRESSES in properties:
            kwargs["master_addresses"] = split_list(properties[C.PROP_MASTER_ADDRESSES])

        durations = (
            (C.PROP_ADMIN_OPERATION_TIMEOUT, "default_admin_operation_timeout"),
            (C.PROP_OPERATION_TIMEOUT, "default_operation_timeout"),
            (C.PROP_SOCKET_READ_TIMEOUT, "default_socket_read_timeout"),
        )
        for prop, attr in durations:
            if prop in properties:
                kwargs[attr] = parse_duration(properties[prop], prop)

        if C.PROP_DISABLE_STATISTICS in properties:
            kwargs["disable_statistics"] = parse_bool(
                properties[C.PROP_DISABLE_STATISTICS], C.PROP_DISABLE_STATISTICS
            )
        if C.PROP_SCHEMA_EMULATION_ENABLED in properties:
            kwargs["schema_emulation_enabled"] = parse_bool(
                properties[C.PROP_SCHEMA_EMULATION_ENABLED], C.PROP_SCHEMA_EMULATION_ENABLED
            )
        if C.PROP_SCHEMA_EMULATION_PREFIX in properties:
            kwargs["schema_emulation_prefix"] = properties[C.PROP_SCHEMA_EMULATION_PREFIX]

        config = cls(**kwargs)  # type: ignore[arg-type]
        config.validate()
        return config

    @classmethod
    def from_env(cls, prefix: str = "KUDU") -> KuduClientConfig:
        """
        Construct configuration from environment variables.

        Environment Variables:
        - {prefix}_MASTER_ADDRESSES: Comma-separated host:port list
        - {prefix}_ADMIN_OPERATION_TIMEOUT: Duration (default: 30s)
        - {prefix}_OPERATION_TIMEOUT: Duration (default: 30s)
        - {prefix}_SOCKET_READ_TIMEOUT: Duration (default: 10s)
        - {prefix}_DISABLE_STATISTICS: Boolean (default: false)
        - {prefix}_SCHEMA_EMULATION_ENABLED: Boolean (default: false)
        - {prefix}_SCHEMA_EMULATION_PREFIX: String (default: empty)
        """
        env_to_property = {
            "MASTER_ADDRESSES": C.PROP_MASTER_ADDRESSES,
            "ADMIN_OPERATION_TIMEOUT": C.PROP_ADMIN_OPERATION_TIMEOUT,
            "OPERATION_TIMEOUT": C.PROP_OPERATION_TIMEOUT,
            "SOCKET_READ_TIMEOUT": C.PROP_SOCKET_READ_TIMEOUT,
            "DISABLE_STATISTICS": C.PROP_DISABLE_STATISTICS,
            "SCHEMA_EMULATION_ENABLED": C.PROP_SCHEMA_EMULATION_ENABLED,
            "SCHEMA_EMULATION_PREFIX": C.PROP_SCHEMA_EMULATION_PREFIX,
        }
        properties = {
            prop: os.environ[f"{prefix}_{key}"]
            for key, prop in env_to_property.items()
            if f"{prefix}_{key}" in os.environ
        }
        return cls.from_properties(properties)

    def to_properties(self) -> Dict[str, str]:
        """Render back to catalog properties (inverse of from_properties)."""
        return {
            C.PROP_MASTER_ADDRESSES: ",".join(self.master_addresses),
            C.PROP_ADMIN_OPERATION_TIMEOUT: format_duration(self.default_admin_operation_timeout),
            C.PROP_OPERATION_TIMEOUT: format_duration(self.default_operation_timeout),
            C.PROP_SOCKET_READ_TIMEOUT: format_duration(self.default_socket_read_timeout),
            C.PROP_DISABLE_STATISTICS: str(self.disable_statistics).lower(),
            C.PROP_SCHEMA_EMULATION_ENABLED: str(self.schema_emulation_enabled).lower(),
            C.PROP_SCHEMA_EMULATION_PREFIX: self.schema_emulation_prefix,
        }
