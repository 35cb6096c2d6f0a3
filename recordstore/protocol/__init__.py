"""
Wire protocol package: message framing and the request grammar.
"""

from recordstore.protocol.commands import ProtocolError, Request, parse_request
from recordstore.protocol.framing import (
    FramingError,
    IncompleteMessageError,
    MessageTooLongError,
    encode_message,
    read_message,
    write_message,
)

__all__ = [
    "ProtocolError",
    "Request",
    "parse_request",
    "FramingError",
    "IncompleteMessageError",
    "MessageTooLongError",
    "encode_message",
    "read_message",
    "write_message",
]
