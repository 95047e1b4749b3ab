from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..logging import get_logger
from ..util.errors import ExportError

LOG = get_logger(__name__)

Record = Dict[str, Any]


class ParquetNotAvailable(ExportError):
    pass


def _require_pyarrow():
    try:
        import pyarrow as pa  # type: ignore
        import pyarrow.parquet as pq  # type: ignore
    except ImportError as e:  # pragma: no cover
        raise ParquetNotAvailable("pyarrow is required for Parquet export. Install with: pip install .") from e
    return pa, pq


def _record_debug_label(record: Mapping[str, Any], index: int) -> str:
    digest = hashlib.sha1(repr(sorted(record.items())).encode("utf-8")).hexdigest()[:12]
    return f"row={index} sha1={digest}"


def _string_schema(pa, fields: Sequence[str]) -> Any:
    return pa.schema([pa.field(name, pa.string(), nullable=True) for name in fields])


def write_parquet(
    records: Iterable[Record],
    path: Path,
    *,
    fields: Optional[Sequence[str]] = None,
    batch_size: int = 1000,
) -> int:
    """
    Stream records into a Parquet file in batches. With ``fields`` every column
    is a nullable string (query result cells); otherwise the schema is inferred
    from the first batch and reused for the rest.
    """
    pa, pq = _require_pyarrow()
    path.parent.mkdir(parents=True, exist_ok=True)
    if batch_size < 1:
        batch_size = 1000

    schema: Optional[Any] = _string_schema(pa, fields) if fields else None
    writer: Optional[Any] = None
    rows: List[Record] = []
    row_meta: List[Tuple[int, str]] = []
    count = 0

    def _flush_rows() -> None:
        nonlocal writer, rows, row_meta, schema
        if not rows:
            return
        try:
            table = pa.Table.from_pylist(rows, schema=schema)
        except Exception as exc:
            LOG.error(
                "Parquet batch write failed; attempting to isolate invalid record",
                extra={"step": "export", "phase": "error", "artifact": "parquet", "error": str(exc)},
            )
            for row, (idx, label) in zip(rows, row_meta):
                try:
                    pa.Table.from_pylist([row], schema=schema)
                except Exception as row_exc:
                    LOG.error(
                        "Parquet record failed schema coercion",
                        extra={
                            "step": "export",
                            "phase": "error",
                            "artifact": "parquet",
                            "record_index": idx,
                            "record_hint": label,
                            "error": str(row_exc),
                        },
                    )
                    raise ExportError(f"Parquet export failed at record {idx}: {row_exc}") from row_exc
            raise ExportError(f"Parquet export failed: {exc}") from exc
        if writer is None:
            schema = table.schema
            writer = pq.ParquetWriter(path, schema)
        writer.write_table(table)
        rows = []
        row_meta = []

    try:
        for rec in records:
            count += 1
            rows.append(rec)
            row_meta.append((count, _record_debug_label(rec, count)))
            if len(rows) >= batch_size:
                _flush_rows()
        if rows:
            _flush_rows()
        elif writer is None:
            table = schema.empty_table() if schema is not None else pa.Table.from_pylist([])
            pq.write_table(table, path)
    finally:
        if writer is not None:
            writer.close()
    return count
