"""
Session Module: Client Session Lifecycle

Provides:
- KuduClientSession: connector id + client handle + schema emulation
- create_session: validated, single-shot session construction
- SessionProvider: build-once gate with idempotent shutdown
"""

from kudu_connector.session.client_session import (
    KuduClientSession,
    create_session,
)
from kudu_connector.session.provider import SessionProvider

__all__ = [
    "KuduClientSession",
    "create_session",
    "SessionProvider",
]
