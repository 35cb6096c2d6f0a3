"""
Client for the record store protocol.

Each command opens its own connection, sends one request message and reads
the replies. Every command except GETALL answers with exactly one message;
GETALL answers with summaries terminated by END, or a lone AUTH_FAILED.

Usage:
    from recordstore.client import RecordStoreClient

    client = RecordStoreClient("127.0.0.1", 8080)
    handle = client.init()
    client.put(handle, "Alice", "Paris", "France")
    client.get(handle, "city")  # -> "Paris"
"""

from __future__ import annotations

import socket
from typing import List, Optional

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from recordstore.protocol import commands
from recordstore.protocol.commands import split_tokens
from recordstore.protocol.framing import read_message, write_message
from recordstore.utils.logging import get_logger

log = get_logger(__name__)


class NoReplyError(ConnectionError):
    """The server closed the connection without answering."""


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(OSError),
    reraise=True,
)
def open_connection(host: str, port: int, timeout: float) -> socket.socket:
    """
    Connect to a record store server with automatic retry.

    Retries up to 3 times with exponential backoff on any socket-level
    failure (refused, reset, unreachable, timed out).

    Raises
    ------
    OSError
        If the connection fails after all retry attempts.
    """
    return socket.create_connection((host, port), timeout=timeout)


class RecordStoreClient:
    """
    One-request-per-connection client.

    Parameters
    ----------
    host, port
        Server endpoint.
    connect_timeout : float
        Seconds to wait for the connection to be established.
    read_timeout : float | None
        Seconds to wait for each reply message. None waits indefinitely.
    """

    def __init__(
        self,
        host: str,
        port: int,
        connect_timeout: float = 5.0,
        read_timeout: Optional[float] = 30.0,
    ) -> None:
        self.host = host
        self.port = port
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout

    def send(self, line: str) -> List[str]:
        """
        Send one request line and collect the reply messages.

        For GETALL the END terminator is consumed and not returned, so an
        empty store yields an empty list.

        Raises
        ------
        NoReplyError
            If the server closed the connection before sending any message.
        """
        tokens = split_tokens(line)
        multi = bool(tokens) and tokens[0].upper() == commands.GETALL

        sock = open_connection(self.host, self.port, self.connect_timeout)
        try:
            sock.settimeout(self.read_timeout)
            write_message(sock, " ".join(tokens))
            return self._read_replies(sock, multi)
        finally:
            sock.close()

    @staticmethod
    def _read_replies(sock: socket.socket, multi: bool) -> List[str]:
        replies: List[str] = []
        while True:
            message = read_message(sock)
            if message is None:
                if not replies:
                    raise NoReplyError("server closed the connection without replying")
                if multi:
                    log.warning("GETALL stream ended without terminator")
                return replies
            if not multi:
                return [message]
            if message == commands.END:
                return replies
            replies.append(message)
            if message == commands.AUTH_FAILED and len(replies) == 1:
                return replies

    def _single(self, line: str) -> str:
        return self.send(line)[0]

    def init(self) -> int:
        reply = self._single(commands.INIT)
        word, _, handle = reply.partition(" ")
        if word != commands.USERCODE:
            raise NoReplyError(f"unexpected reply to INIT: {reply!r}")
        return int(handle)

    def put(self, handle: int, name: str, city: str, country: str) -> bool:
        return self._single(f"{commands.PUT} {handle} {name} {city} {country}") == commands.OK

    def get(self, handle: int, field: str) -> str:
        """Empty string when the handle or field is unknown, or the field is empty."""
        return self._single(f"{commands.GET} {handle} {field}")

    def delete(self, handle: int) -> bool:
        return self._single(f"{commands.DELETE} {handle}") == commands.DELETED

    def get_all(self, secret: str) -> Optional[List[str]]:
        """Summary lines, or None when the secret was rejected."""
        replies = self.send(f"{commands.GETALL} {secret}")
        if replies == [commands.AUTH_FAILED]:
            return None
        return replies


__all__ = ["NoReplyError", "RecordStoreClient", "open_connection"]
