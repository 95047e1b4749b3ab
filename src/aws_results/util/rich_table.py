from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Sequence

from rich.console import Console
from rich.table import Table


def render_records_table(
    records: Iterable[Dict[str, Any]],
    *,
    fields: Optional[Sequence[str]] = None,
    title: Optional[str] = None,
    console: Optional[Console] = None,
) -> int:
    """
    Print records as a table. Columns come from ``fields`` or from the first
    record. Returns the number of rows printed.
    """
    table = Table(title=title, show_header=True, header_style="bold")
    columns: Optional[Sequence[str]] = list(fields) if fields else None
    if columns is not None:
        for name in columns:
            table.add_column(name)
    count = 0
    for rec in records:
        if columns is None:
            columns = list(rec.keys())
            for name in columns:
                table.add_column(name)
        table.add_row(*["" if rec.get(c) is None else str(rec.get(c)) for c in columns])
        count += 1
    (console or Console()).print(table)
    return count


def render_summary_table(
    *,
    title: str,
    metrics: Dict[str, Any],
    console: Optional[Console] = None,
) -> None:
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")
    for key, value in metrics.items():
        table.add_row(key, "" if value is None else str(value))
    (console or Console(stderr=True)).print(table)
