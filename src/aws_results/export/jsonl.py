from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, TextIO

from ..util.serialization import sanitize_for_json, stable_json_dumps


def write_jsonl_stream(records: Iterable[Dict[str, Any]], out: TextIO) -> int:
    """
    Write records as JSON lines in iteration order. Returns the number of lines.
    Values are written unredacted.
    """
    count = 0
    for rec in records:
        out.write(stable_json_dumps(sanitize_for_json(rec, redact=False)))
        out.write("\n")
        count += 1
    return count


def write_jsonl(records: Iterable[Dict[str, Any]], path: Path) -> int:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        return write_jsonl_stream(records, f)
