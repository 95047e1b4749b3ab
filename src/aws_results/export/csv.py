from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Sequence, TextIO


def write_csv_stream(
    records: Iterable[Dict[str, Any]],
    out: TextIO,
    *,
    fields: Optional[Sequence[str]] = None,
) -> int:
    """
    Write records as CSV. The header comes from ``fields`` or, when omitted,
    from the keys of the first record. Missing values are written empty.
    """
    writer = csv.writer(out)
    header: Optional[Sequence[str]] = list(fields) if fields else None
    if header is not None:
        writer.writerow(header)
    count = 0
    for rec in records:
        if header is None:
            header = list(rec.keys())
            writer.writerow(header)
        writer.writerow(["" if rec.get(f) is None else str(rec.get(f)) for f in header])
        count += 1
    return count


def write_csv(
    records: Iterable[Dict[str, Any]],
    path: Path,
    *,
    fields: Optional[Sequence[str]] = None,
) -> int:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        return write_csv_stream(records, f, fields=fields)
