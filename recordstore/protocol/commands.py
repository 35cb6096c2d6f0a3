"""
Request line grammar and reply tokens.

    INIT
    PUT    <handle:int> <name> <city> <country>
    GET    <handle:int> <field:name|city|country>
    DELETE <handle:int>
    GETALL <secret>

Tokens are separated by whitespace and the command word is case-insensitive.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

INIT = "INIT"
PUT = "PUT"
GET = "GET"
DELETE = "DELETE"
GETALL = "GETALL"

# Reply tokens
USERCODE = "USERCODE"
OK = "OK"
FAILED = "FAILED"
DELETED = "DELETED"
NOT_FOUND = "NOT_FOUND"
AUTH_FAILED = "AUTH_FAILED"
UNKNOWN_COMMAND = "UNKNOWN_COMMAND"
END = "END"

# Arguments after the command word (handle included).
_ARITY: Dict[str, int] = {
    INIT: 0,
    PUT: 4,
    GET: 2,
    DELETE: 1,
    GETALL: 1,
}
_TAKES_HANDLE = frozenset({PUT, GET, DELETE})
_HANDLE_RE = re.compile(r"[+-]?[0-9]+")
_WHITESPACE_RE = re.compile(r"[ \t\n\x0b\f\r]+")
# Handles travel as signed 32-bit integers.
_HANDLE_MIN = -(2**31)
_HANDLE_MAX = 2**31 - 1


class ProtocolError(ValueError):
    """A known command arrived with the wrong arguments."""


@dataclass(frozen=True)
class Request:
    """
    A parsed request line.

    `handle` is set for PUT/GET/DELETE; `params` holds the remaining arguments
    (name/city/country for PUT, the field for GET, the secret for GETALL).
    """

    command: str
    handle: Optional[int] = None
    params: Tuple[str, ...] = ()

    @property
    def is_known(self) -> bool:
        return self.command in _ARITY


def _parse_handle(token: str) -> int:
    if not _HANDLE_RE.fullmatch(token):
        raise ProtocolError(f"handle must be an integer, got {token!r}")
    handle = int(token)
    if not _HANDLE_MIN <= handle <= _HANDLE_MAX:
        raise ProtocolError(f"handle {token} is outside the 32-bit integer range")
    return handle


def split_tokens(line: str) -> List[str]:
    """
    Split a request line on ASCII whitespace only.

    Other Unicode spaces (e.g. U+00A0) stay inside their token.
    """
    return [token for token in _WHITESPACE_RE.split(line) if token]


def parse_request(line: str) -> Request:
    """
    Parse one request line.

    Unknown command words are not an error here: they come back as a Request
    whose `is_known` is False so the caller can answer UNKNOWN_COMMAND.

    Raises
    ------
    ProtocolError
        If a known command has the wrong number of arguments or a handle
        that is not an integer.
    """
    tokens = split_tokens(line)
    if not tokens:
        return Request(command="")

    command = tokens[0].upper()
    args = tokens[1:]
    expected = _ARITY.get(command)
    if expected is None:
        return Request(command=command)
    if len(args) != expected:
        raise ProtocolError(f"{command} takes {expected} argument(s), got {len(args)}")

    if command in _TAKES_HANDLE:
        return Request(command=command, handle=_parse_handle(args[0]), params=tuple(args[1:]))
    return Request(command=command, params=tuple(args))


__all__ = [
    "INIT",
    "PUT",
    "GET",
    "DELETE",
    "GETALL",
    "USERCODE",
    "OK",
    "FAILED",
    "DELETED",
    "NOT_FOUND",
    "AUTH_FAILED",
    "UNKNOWN_COMMAND",
    "END",
    "ProtocolError",
    "Request",
    "parse_request",
    "split_tokens",
]
