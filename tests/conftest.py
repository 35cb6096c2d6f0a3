"""
Pytest configuration for the record store.

Provides fixtures for:
- Test settings with a known dump secret
- A fresh RecordStore per test
- An in-process server on an ephemeral loopback port, plus a client for it
"""

from __future__ import annotations

import threading
from typing import Generator

import pytest

from recordstore.client import RecordStoreClient
from recordstore.config import Settings
from recordstore.server import ConnectionAcceptor
from recordstore.store import RecordStore

TEST_SECRET = "test-secret"


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.
    """
    return Settings(
        host="127.0.0.1",
        port=0,
        dump_secret=TEST_SECRET,
        read_timeout_seconds=2.0,
        connect_timeout_seconds=2.0,
        log_level="DEBUG",
    )


@pytest.fixture
def store(test_settings: Settings) -> RecordStore:
    return RecordStore(dump_secret=test_settings.dump_secret)


@pytest.fixture
def running_server(
    store: RecordStore, test_settings: Settings
) -> Generator[ConnectionAcceptor, None, None]:
    """
    Serve `store` on an ephemeral port from a background thread.

    The server is shut down and its socket closed after the test.
    """
    acceptor = ConnectionAcceptor(
        (test_settings.host, test_settings.port),
        store,
        read_timeout=test_settings.read_timeout_seconds,
    )
    thread = threading.Thread(
        target=acceptor.serve_forever,
        kwargs={"poll_interval": 0.05},
        name="test-acceptor",
        daemon=True,
    )
    thread.start()
    try:
        yield acceptor
    finally:
        acceptor.shutdown()
        acceptor.server_close()
        thread.join(timeout=5)


@pytest.fixture
def client(running_server: ConnectionAcceptor, test_settings: Settings) -> RecordStoreClient:
    host, port = running_server.address
    return RecordStoreClient(
        host,
        port,
        connect_timeout=test_settings.connect_timeout_seconds,
        read_timeout=5.0,
    )
