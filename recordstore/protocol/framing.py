"""
Length-prefixed message framing.

Every message on the wire is a 2-byte unsigned big-endian byte count followed
by that many bytes of UTF-8 text. A connection carries one request message
from the client and one or more reply messages from the server.

For text without NUL characters and without characters outside the Basic
Multilingual Plane the encoding is byte-identical to Java's
DataOutputStream.writeUTF, so peers built on it interoperate.
"""

from __future__ import annotations

import socket
import struct
from typing import Optional

_HEADER = struct.Struct(">H")
MAX_MESSAGE_BYTES = 0xFFFF


class FramingError(ConnectionError):
    """The byte stream does not hold a well-formed message."""


class IncompleteMessageError(FramingError):
    """The peer closed the stream in the middle of a message."""


class MessageTooLongError(FramingError):
    """The encoded text does not fit the 16-bit length prefix."""


def encode_message(text: str) -> bytes:
    body = text.encode("utf-8")
    if len(body) > MAX_MESSAGE_BYTES:
        raise MessageTooLongError(
            f"message is {len(body)} bytes; the limit is {MAX_MESSAGE_BYTES}"
        )
    return _HEADER.pack(len(body)) + body


def _recv_exactly(sock: socket.socket, size: int) -> bytes:
    chunks = []
    remaining = size
    while remaining:
        chunk = sock.recv(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_message(sock: socket.socket) -> Optional[str]:
    """
    Read one framed message from `sock`.

    Returns
    -------
    str | None
        The decoded text, or None when the peer closed the connection
        before sending any byte of a new message.

    Raises
    ------
    IncompleteMessageError
        If the stream ends inside the header or the body.
    FramingError
        If the body is not valid UTF-8.
    """
    header = _recv_exactly(sock, _HEADER.size)
    if not header:
        return None
    if len(header) < _HEADER.size:
        raise IncompleteMessageError("connection closed inside a message header")
    (length,) = _HEADER.unpack(header)
    body = _recv_exactly(sock, length)
    if len(body) < length:
        raise IncompleteMessageError(
            f"connection closed after {len(body)} of {length} body bytes"
        )
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FramingError(f"message body is not valid UTF-8: {exc}") from exc


def write_message(sock: socket.socket, text: str) -> None:
    """Send `text` as one framed message."""
    sock.sendall(encode_message(text))


__all__ = [
    "MAX_MESSAGE_BYTES",
    "FramingError",
    "IncompleteMessageError",
    "MessageTooLongError",
    "encode_message",
    "read_message",
    "write_message",
]
