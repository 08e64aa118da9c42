#!/usr/bin/env python3
"""
Kudu Connector

Command-line entry point for checking a catalog configuration.

Usage:
    # Connect, then list schemas and tables
    python -m kudu_connector check --properties etc/catalog/kudu.properties

    # Configuration from KUDU_* environment variables
    KUDU_MASTER_ADDRESSES=kudu-master:7051 python -m kudu_connector check

    # Physical table name for a logical name, no connection
    python -m kudu_connector resolve sales.orders --properties kudu.properties
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from kudu_connector.core.config import KuduClientConfig, load_properties_file
from kudu_connector.core.errors import KuduConnectorError
from kudu_connector.observability.logging import LogLevel, setup_logging
from kudu_connector.schema.emulation import select_schema_emulation
from kudu_connector.session.client_session import create_session


def _load_config(args: argparse.Namespace) -> KuduClientConfig:
    if args.properties:
        return KuduClientConfig.from_properties(load_properties_file(args.properties))
    return KuduClientConfig.from_env(args.env_prefix)


def cmd_check(args: argparse.Namespace) -> int:
    config = _load_config(args)
    session = create_session(args.connector_id, config)
    try:
        print(f"connected: {','.join(config.master_addresses)}")
        print(f"schema emulation: {session.schema_emulation!r}")
        for schema in session.list_schemas():
            tables = session.list_tables(schema)
            print(f"  {schema} ({len(tables)} tables)")
            if args.tables:
                for name in tables:
                    print(f"    {name.table} -> {session.to_physical_name(name.schema, name.table)}")
    finally:
        session.close()
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    config = _load_config(args)
    schema, sep, table = args.name.partition(".")
    if not sep:
        print(f"expected schema.table, got {args.name!r}", file=sys.stderr)
        return 2
    emulation = select_schema_emulation(config)
    print(emulation.to_physical_name(schema, table))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kudu_connector", description=__doc__.splitlines()[1])
    parser.add_argument("--properties", help="catalog .properties file")
    parser.add_argument("--env-prefix", default="KUDU", help="environment prefix when no file is given")
    parser.add_argument("--log-level", default="WARNING", choices=[level.name for level in LogLevel])
    parser.add_argument("--json-logs", action="store_true", help="emit JSON log lines")
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="connect and list schemas")
    check.add_argument("--connector-id", default="kudu")
    check.add_argument("--tables", action="store_true", help="also list tables")
    check.set_defaults(func=cmd_check)

    resolve = sub.add_parser("resolve", help="physical name for schema.table")
    resolve.add_argument("name")
    resolve.set_defaults(func=cmd_resolve)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(LogLevel[args.log_level], json_output=args.json_logs)
    try:
        return args.func(args)
    except KuduConnectorError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
