"""
Server package: the accept loop and the per-connection handler.
"""

from recordstore.server.acceptor import ConnectionAcceptor
from recordstore.server.handler import ConnectionHandler, execute_request

__all__ = [
    "ConnectionAcceptor",
    "ConnectionHandler",
    "execute_request",
]
