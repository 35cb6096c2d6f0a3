"""
Per-connection request handling.

One connection carries exactly one request: the handler reads a single framed
message, dispatches it to the shared RecordStore, writes the reply message(s)
and returns, after which the server closes the socket. Malformed requests,
timeouts and transport failures drop the connection without a reply.
"""

from __future__ import annotations

import socket
import socketserver
from typing import List

from recordstore.protocol import commands
from recordstore.protocol.commands import ProtocolError, Request, parse_request
from recordstore.protocol.framing import FramingError, read_message, write_message
from recordstore.store import RecordStore
from recordstore.utils.logging import get_logger

log = get_logger(__name__)


def execute_request(store: RecordStore, request: Request) -> List[str]:
    """
    Run a parsed request against the store and build the reply messages.

    Returns
    -------
    List[str]
        Messages to send, in order. GETALL yields its summaries followed by
        END, or a lone AUTH_FAILED; every other command yields one message.
    """
    command = request.command

    if command == commands.INIT:
        return [f"{commands.USERCODE} {store.create()}"]

    if command == commands.PUT:
        name, city, country = request.params
        ok = store.update(request.handle, name, city, country)
        return [commands.OK if ok else commands.FAILED]

    if command == commands.GET:
        # Not-found and an empty field both reply with an empty message.
        value = store.read_field(request.handle, request.params[0])
        return [value if value is not None else ""]

    if command == commands.DELETE:
        deleted = store.delete(request.handle)
        return [commands.DELETED if deleted else commands.NOT_FOUND]

    if command == commands.GETALL:
        summaries = store.dump_all(request.params[0])
        if summaries is None:
            return [commands.AUTH_FAILED]
        return [*summaries, commands.END]

    return [commands.UNKNOWN_COMMAND]


class ConnectionHandler(socketserver.BaseRequestHandler):
    """
    Serve one request over an accepted connection.

    Expects the owning server to expose `store` and `read_timeout`.
    """

    request: socket.socket

    def handle(self) -> None:
        peer = _format_peer(self.client_address)
        self.request.settimeout(self.server.read_timeout)

        try:
            line = read_message(self.request)
        except socket.timeout:
            log.warning("Timed out waiting for request", extra={"peer": peer})
            return
        except (FramingError, OSError) as exc:
            log.warning("Failed to read request: %s", exc, extra={"peer": peer})
            return

        if line is None:
            log.info("Peer closed before sending a request", extra={"peer": peer})
            return

        try:
            request = parse_request(line)
        except ProtocolError as exc:
            log.warning("Malformed request dropped: %s", exc, extra={"peer": peer})
            return

        log.info("Request received", extra={"peer": peer, "command": request.command})
        replies = execute_request(self.server.store, request)

        try:
            for reply in replies:
                write_message(self.request, reply)
        except (FramingError, OSError) as exc:
            log.warning("Failed to send reply: %s", exc, extra={"peer": peer})


def _format_peer(address) -> str:
    if isinstance(address, tuple) and len(address) >= 2:
        return f"{address[0]}:{address[1]}"
    return str(address)


__all__ = ["ConnectionHandler", "execute_request"]
