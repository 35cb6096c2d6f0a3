"""
Record Store - a minimal client/server record table over TCP.

Clients open a connection, send one length-prefixed command line and read the
reply. The server keeps name/city/country records in a thread-safe in-memory
table keyed by auto-incremented integer handles and supports:

- INIT: allocate a handle for an empty record
- PUT / GET / DELETE: replace, read one field of, or remove a record
- GETALL: dump every record, guarded by a shared secret
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from recordstore.client import NoReplyError, RecordStoreClient
from recordstore.config import Settings, get_settings
from recordstore.domain.models import Record
from recordstore.protocol import FramingError, ProtocolError
from recordstore.server import ConnectionAcceptor, ConnectionHandler
from recordstore.store import RecordStore
from recordstore.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Store
    "Record",
    "RecordStore",
    # Server / client
    "ConnectionAcceptor",
    "ConnectionHandler",
    "RecordStoreClient",
    # Errors
    "FramingError",
    "NoReplyError",
    "ProtocolError",
    # Logging
    "configure_logging",
    "get_logger",
]
