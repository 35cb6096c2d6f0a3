"""
Listening endpoint and accept loop.

ConnectionAcceptor binds once at construction time and then hands every
accepted connection to a fresh ConnectionHandler thread, returning to accept()
immediately. A bind failure propagates out of the constructor as OSError; a
failed accept() is logged and the loop carries on.

Usage:
    from recordstore.server import ConnectionAcceptor
    from recordstore.store import RecordStore

    acceptor = ConnectionAcceptor(("0.0.0.0", 8080), RecordStore("s3cr3t"))
    acceptor.serve_forever()
"""

from __future__ import annotations

import socket
import socketserver
from typing import Optional, Tuple, Type

from recordstore.server.handler import ConnectionHandler, _format_peer
from recordstore.store import RecordStore
from recordstore.utils.logging import get_logger

log = get_logger(__name__)


class ConnectionAcceptor(socketserver.ThreadingMixIn, socketserver.TCPServer):
    """
    Thread-per-connection TCP server around a shared RecordStore.

    Parameters
    ----------
    server_address : tuple[str, int]
        Host and port to bind. Port 0 picks an ephemeral port; read the bound
        one back from `address`.
    store : RecordStore
        The shared table every handler thread operates on.
    read_timeout : float | None
        Seconds a handler waits for the request message before dropping the
        connection. None waits indefinitely.
    backlog : int
        Listen queue length.
    """

    allow_reuse_address = True
    daemon_threads = True
    block_on_close = False

    def __init__(
        self,
        server_address: Tuple[str, int],
        store: RecordStore,
        read_timeout: Optional[float] = 10.0,
        backlog: int = 50,
        handler_class: Type[socketserver.BaseRequestHandler] = ConnectionHandler,
    ) -> None:
        self.store = store
        self.read_timeout = read_timeout
        self.request_queue_size = backlog
        super().__init__(server_address, handler_class)

    @property
    def address(self) -> Tuple[str, int]:
        host, port = self.server_address[:2]
        return host, port

    def server_activate(self) -> None:
        super().server_activate()
        host, port = self.address
        log.info("Listening", extra={"host": host, "port": port})

    def get_request(self) -> Tuple[socket.socket, Tuple[str, int]]:
        try:
            conn, addr = super().get_request()
        except OSError as exc:
            # The base loop swallows this and keeps accepting.
            log.warning("Failed to accept connection: %s", exc)
            raise
        log.info("Connection accepted", extra={"peer": _format_peer(addr)})
        return conn, addr

    def handle_error(self, request, client_address) -> None:
        log.exception(
            "Unhandled error while serving connection",
            extra={"peer": _format_peer(client_address)},
        )


__all__ = ["ConnectionAcceptor"]
