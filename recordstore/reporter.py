from __future__ import annotations

import re
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

_SUMMARY_RE = re.compile(
    r"Usercode: (?P<handle>-?\d+), Name: (?P<name>.*), City: (?P<city>.*), Country: (?P<country>.*)"
)


def print_summaries(summaries: List[str], console: Optional[Console] = None) -> None:
    """
    Render GETALL summary lines as a rich table.

    Lines that do not look like summaries are printed as-is below the table.
    """
    console = console or Console()

    if not summaries:
        console.print("[yellow]No records stored.[/yellow]")
        return

    table = Table(
        title="Record Store Contents",
        box=box.ROUNDED,
        caption=f"{len(summaries)} record(s), sorted by usercode",
    )
    table.add_column("Usercode", justify="right", style="cyan", no_wrap=True)
    table.add_column("Name", style="magenta")
    table.add_column("City", style="green")
    table.add_column("Country", style="yellow")

    parsed = []
    unparsed = []
    for line in summaries:
        match = _SUMMARY_RE.fullmatch(line)
        if match is None:
            unparsed.append(line)
            continue
        parsed.append(match)

    for match in sorted(parsed, key=lambda m: int(m["handle"])):
        table.add_row(match["handle"], match["name"], match["city"], match["country"])

    console.print(table)
    for line in unparsed:
        console.print(line, markup=False)


__all__ = ["print_summaries"]
