from __future__ import annotations

import sys
from typing import List, Optional

import typer

from recordstore.client import RecordStoreClient
from recordstore.config import get_settings
from recordstore.protocol import commands
from recordstore.reporter import print_summaries
from recordstore.server import ConnectionAcceptor
from recordstore.store import RecordStore
from recordstore.utils.logging import configure_logging, get_logger

app = typer.Typer(help="In-memory record store server and client.")
log = get_logger(__name__)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"listen={settings.host}:{settings.port} backlog={settings.listen_backlog} | "
        f"read_timeout={settings.read_timeout_seconds}s "
        f"connect_timeout={settings.connect_timeout_seconds}s | "
        f"dump_secret={'*' * len(settings.dump_secret)} | env={settings.app_env}"
    )


@app.command()
def serve(
    port: Optional[int] = typer.Argument(
        None,
        help="Port to listen on (default from settings, 8080).",
    ),
    host: Optional[str] = typer.Option(
        None,
        "--host",
        "-H",
        help="Interface to bind (default from settings).",
    ),
) -> None:
    """
    Run the record store server until interrupted.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    bind_host = host or settings.host
    bind_port = settings.port if port is None else port

    store = RecordStore(dump_secret=settings.dump_secret)
    try:
        acceptor = ConnectionAcceptor(
            (bind_host, bind_port),
            store,
            read_timeout=settings.read_timeout_seconds,
            backlog=settings.listen_backlog,
        )
    except OSError as exc:
        log.error("Could not bind %s:%s: %s", bind_host, bind_port, exc)
        raise typer.Exit(code=1)

    with acceptor:
        typer.echo(f"Server started on {bind_host}:{acceptor.address[1]}")
        acceptor.serve_forever()


@app.command()
def send(
    host: str = typer.Argument(..., help="Server host."),
    port: int = typer.Argument(..., help="Server port."),
    command: List[str] = typer.Argument(..., help="Command word and its arguments."),
    table: bool = typer.Option(
        False,
        "--table",
        "-t",
        help="Render GETALL output as a table.",
    ),
) -> None:
    """
    Send one command and print the server's reply lines.
    """
    settings = get_settings()
    configure_logging(level="WARNING", json_logs=settings.log_json)
    client = RecordStoreClient(host, port, connect_timeout=settings.connect_timeout_seconds)
    line = " ".join(command)

    try:
        replies = client.send(line)
    except OSError as exc:
        typer.echo(f"Client error: {exc}", err=True)
        raise typer.Exit(code=1)

    is_dump = command[0].upper() == commands.GETALL
    if table and is_dump and replies != [commands.AUTH_FAILED]:
        print_summaries(replies)
        return
    for reply in replies:
        typer.echo(reply)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
