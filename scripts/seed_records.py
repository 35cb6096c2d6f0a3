"""
Seeding script for a running record store server.

Generates deterministic pseudo-random records and creates them over the wire
(INIT then PUT per record) from a thread pool, which doubles as a quick
concurrency smoke test for the server.
"""

from __future__ import annotations

import random
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Tuple

import typer

from recordstore.client import RecordStoreClient
from recordstore.config import get_settings

app = typer.Typer(help="Create synthetic records on a running record store server.")

_NAMES = ["Alice", "Bob", "Chiara", "Dmitri", "Emeka", "Fatima", "Goran", "Hana"]
_PLACES = [
    ("Paris", "France"),
    ("Lyon", "France"),
    ("Milan", "Italy"),
    ("Lagos", "Nigeria"),
    ("Osaka", "Japan"),
    ("Porto", "Portugal"),
    ("Quito", "Ecuador"),
]


def _generate_records(count: int, seed: int) -> List[Tuple[str, str, str]]:
    rng = random.Random(seed)
    records = []
    for _ in range(count):
        city, country = rng.choice(_PLACES)
        records.append((rng.choice(_NAMES), city, country))
    return records


def _create_record(client: RecordStoreClient, record: Tuple[str, str, str]) -> int:
    handle = client.init()
    if not client.put(handle, *record):
        raise RuntimeError(f"PUT failed for freshly created handle {handle}")
    return handle


@app.command()
def main(
    host: str = typer.Option("127.0.0.1", "--host", "-H", help="Server host."),
    port: int = typer.Option(8080, "--port", "-p", help="Server port."),
    count: int = typer.Option(100, "--count", "-n", help="Number of records to create."),
    workers: int = typer.Option(8, "--workers", "-w", help="Concurrent client threads."),
    seed: int = typer.Option(42, "--seed", help="Deterministic RNG seed."),
) -> None:
    """
    Create COUNT records concurrently and report the handles received.
    """
    settings = get_settings()
    client = RecordStoreClient(host, port, connect_timeout=settings.connect_timeout_seconds)
    records = _generate_records(count, seed)

    typer.echo(f"Creating {count:,} records on {host}:{port} with {workers} workers (seed={seed})")
    start = time.perf_counter()
    with ThreadPoolExecutor(max_workers=workers) as pool:
        handles = list(pool.map(lambda rec: _create_record(client, rec), records))
    duration = time.perf_counter() - start

    if len(set(handles)) != len(handles):
        typer.echo("Duplicate handles returned by the server!", err=True)
        raise typer.Exit(code=1)

    rate = count / duration if duration > 0 else 0.0
    span = f"{min(handles)}..{max(handles)}" if handles else "none"
    typer.echo(f"Created {len(handles):,} records in {duration:.2f}s ({rate:,.0f} records/s); handles {span}.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
