from __future__ import annotations

import logging
import socket
from types import SimpleNamespace
from typing import List, Optional

import pytest

from recordstore.protocol.commands import Request, parse_request
from recordstore.protocol.framing import encode_message, read_message, write_message
from recordstore.server.handler import ConnectionHandler, execute_request
from recordstore.store import RecordStore

SECRET = "s3cr3t"
PEER = ("127.0.0.1", 40000)


@pytest.fixture
def fresh_store() -> RecordStore:
    return RecordStore(dump_secret=SECRET)


def _run(store: RecordStore, line: str) -> List[str]:
    return execute_request(store, parse_request(line))


class TestExecuteRequest:
    """Dispatch table without sockets."""

    def test_init_replies_with_usercode(self, fresh_store: RecordStore) -> None:
        assert _run(fresh_store, "INIT") == ["USERCODE 1"]
        assert _run(fresh_store, "init") == ["USERCODE 2"]

    def test_put_ok_and_failed(self, fresh_store: RecordStore) -> None:
        fresh_store.create()
        assert _run(fresh_store, "PUT 1 Alice Paris France") == ["OK"]
        assert _run(fresh_store, "PUT 2 Bob Lyon France") == ["FAILED"]

    def test_get_value_and_empty_on_not_found(self, fresh_store: RecordStore) -> None:
        fresh_store.create()
        fresh_store.update(1, "Alice", "Paris", "France")
        assert _run(fresh_store, "GET 1 city") == ["Paris"]
        assert _run(fresh_store, "GET 1 COUNTRY") == ["France"]
        assert _run(fresh_store, "GET 1 unknownfield") == [""]
        assert _run(fresh_store, "GET 99 name") == [""]

    def test_delete_then_not_found(self, fresh_store: RecordStore) -> None:
        fresh_store.create()
        assert _run(fresh_store, "DELETE 1") == ["DELETED"]
        assert _run(fresh_store, "DELETE 1") == ["NOT_FOUND"]

    def test_getall_auth_failed_has_no_terminator(self, fresh_store: RecordStore) -> None:
        fresh_store.create()
        assert _run(fresh_store, "GETALL wrongsecret") == ["AUTH_FAILED"]

    def test_getall_lists_summaries_then_end(self, fresh_store: RecordStore) -> None:
        fresh_store.create()
        fresh_store.create()
        fresh_store.update(2, "Bob", "Lyon", "France")

        replies = _run(fresh_store, f"GETALL {SECRET}")

        assert replies[-1] == "END"
        assert sorted(replies[:-1]) == [
            "Usercode: 1, Name: , City: , Country: ",
            "Usercode: 2, Name: Bob, City: Lyon, Country: France",
        ]

    def test_getall_empty_store_is_just_end(self, fresh_store: RecordStore) -> None:
        assert _run(fresh_store, f"GETALL {SECRET}") == ["END"]

    def test_unknown_command(self, fresh_store: RecordStore) -> None:
        assert _run(fresh_store, "FROBNICATE") == ["UNKNOWN_COMMAND"]
        assert execute_request(fresh_store, Request(command="")) == ["UNKNOWN_COMMAND"]


def _serve_one(store: RecordStore, payload: Optional[bytes], read_timeout: float = 2.0) -> List[str]:
    """
    Drive ConnectionHandler over a socketpair and collect every reply.

    `payload` is written raw before the handler runs; None sends nothing.
    """
    server_side, client_side = socket.socketpair()
    client_side.settimeout(2)
    fake_server = SimpleNamespace(store=store, read_timeout=read_timeout)
    try:
        if payload is not None:
            client_side.sendall(payload)
        ConnectionHandler(server_side, PEER, fake_server)
        # Half-close only: closing with unread request bytes would reset the peer.
        server_side.shutdown(socket.SHUT_WR)

        replies = []
        while True:
            message = read_message(client_side)
            if message is None:
                return replies
            replies.append(message)
    finally:
        server_side.close()
        client_side.close()


class TestConnectionHandler:
    """One request per connection over a real socket."""

    def test_single_reply(self, fresh_store: RecordStore) -> None:
        assert _serve_one(fresh_store, encode_message("INIT")) == ["USERCODE 1"]

    def test_multi_reply_stream(self, fresh_store: RecordStore) -> None:
        fresh_store.create()
        replies = _serve_one(fresh_store, encode_message(f"GETALL {SECRET}"))
        assert replies == ["Usercode: 1, Name: , City: , Country: ", "END"]

    def test_only_first_request_is_served(self, fresh_store: RecordStore) -> None:
        payload = encode_message("INIT") + encode_message("INIT")
        assert _serve_one(fresh_store, payload) == ["USERCODE 1"]
        assert len(fresh_store) == 1

    def test_malformed_request_gets_no_reply(
        self, fresh_store: RecordStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        fresh_store.create()
        with caplog.at_level(logging.WARNING, logger="recordstore.server.handler"):
            replies = _serve_one(fresh_store, encode_message("PUT one Alice Paris France"))

        assert replies == []
        assert fresh_store.read_field(1, "name") == ""
        assert "Malformed request dropped" in caplog.text

    def test_peer_closing_early_is_quiet(self, fresh_store: RecordStore) -> None:
        server_side, client_side = socket.socketpair()
        client_side.close()
        try:
            ConnectionHandler(server_side, PEER, SimpleNamespace(store=fresh_store, read_timeout=1))
        finally:
            server_side.close()
        assert len(fresh_store) == 0

    def test_truncated_request_is_dropped(
        self, fresh_store: RecordStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        server_side, client_side = socket.socketpair()
        client_side.sendall(b"\x00\x10INIT")
        client_side.close()
        try:
            with caplog.at_level(logging.WARNING, logger="recordstore.server.handler"):
                ConnectionHandler(
                    server_side, PEER, SimpleNamespace(store=fresh_store, read_timeout=1)
                )
        finally:
            server_side.close()

        assert len(fresh_store) == 0
        assert "Failed to read request" in caplog.text

    def test_idle_peer_times_out(
        self, fresh_store: RecordStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="recordstore.server.handler"):
            replies = _serve_one(fresh_store, None, read_timeout=0.1)

        assert replies == []
        assert "Timed out waiting for request" in caplog.text

    def test_request_log_omits_arguments(
        self, fresh_store: RecordStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="recordstore.server.handler"):
            _serve_one(fresh_store, encode_message(f"GETALL {SECRET}"))

        received = [r for r in caplog.records if r.getMessage() == "Request received"]
        assert len(received) == 1
        assert received[0].command == "GETALL"
        assert SECRET not in caplog.text


def test_write_message_round_trip_through_handler_reply(fresh_store: RecordStore) -> None:
    fresh_store.create()
    fresh_store.update(1, "Zoë", "Zürich", "Schweiz")
    server_side, client_side = socket.socketpair()
    try:
        write_message(client_side, "GET 1 city")
        ConnectionHandler(server_side, PEER, SimpleNamespace(store=fresh_store, read_timeout=1))
        assert read_message(client_side) == "Zürich"
    finally:
        server_side.close()
        client_side.close()
