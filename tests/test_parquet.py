from __future__ import annotations

import pytest

from aws_results.export import parquet as parquet_mod
from aws_results.util.errors import ExportError


def test_write_parquet_raises_when_pyarrow_missing(monkeypatch, tmp_path) -> None:
    def _raise():
        raise parquet_mod.ParquetNotAvailable("pyarrow is required for Parquet export.")

    monkeypatch.setattr(parquet_mod, "_require_pyarrow", _raise)

    with pytest.raises(parquet_mod.ParquetNotAvailable):
        parquet_mod.write_parquet([{"id": "1"}], tmp_path / "rows.parquet")


def test_record_debug_label_hides_values() -> None:
    label = parquet_mod._record_debug_label({"email": "someone@example.com"}, 7)
    assert label.startswith("row=7 sha1=")
    assert "example.com" not in label


def test_write_parquet_round_trip(tmp_path) -> None:
    pq = pytest.importorskip("pyarrow.parquet")
    path = tmp_path / "rows.parquet"

    count = parquet_mod.write_parquet(
        ({"id": str(i), "name": None if i % 2 else f"n{i}"} for i in range(5)),
        path,
        fields=["id", "name"],
        batch_size=2,
    )

    table = pq.read_table(path)
    assert count == 5
    assert table.column_names == ["id", "name"]
    assert table.column("id").to_pylist() == ["0", "1", "2", "3", "4"]
    assert table.column("name").to_pylist() == ["n0", None, "n2", None, "n4"]


def test_write_parquet_empty_keeps_schema(tmp_path) -> None:
    pq = pytest.importorskip("pyarrow.parquet")
    path = tmp_path / "empty.parquet"

    assert parquet_mod.write_parquet([], path, fields=["id"]) == 0
    assert pq.read_table(path).column_names == ["id"]


def test_write_parquet_isolates_bad_record(tmp_path, monkeypatch) -> None:
    class _FakeTable:
        def __init__(self, rows):
            self.rows = rows
            self.schema = "schema"

    class _FakePA:
        class Table:
            @staticmethod
            def from_pylist(rows, schema=None):
                if any(row.get("bad") for row in rows):
                    raise ValueError("Invalid null value")
                return _FakeTable(rows)

    class _FakePQ:
        last_writer = None

        class ParquetWriter:
            def __init__(self, path, schema):
                self.schema = schema
                self.tables = []
                self.closed = False
                _FakePQ.last_writer = self

            def write_table(self, table):
                self.tables.append(table)

            def close(self):
                self.closed = True

    monkeypatch.setattr(parquet_mod, "_require_pyarrow", lambda: (_FakePA, _FakePQ))

    with pytest.raises(ExportError) as excinfo:
        parquet_mod.write_parquet(
            [{"id": "ok"}, {"id": "bad", "bad": True}],
            tmp_path / "rows.parquet",
            batch_size=1,
        )

    assert "record 2" in str(excinfo.value)
    assert _FakePQ.last_writer is not None
    assert len(_FakePQ.last_writer.tables) == 1
    assert _FakePQ.last_writer.closed
