from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Datum:
    var_char_value: Optional[str] = None


@dataclass(frozen=True)
class Row:
    data: Optional[List[Datum]] = None

    def values(self) -> List[Optional[str]]:
        return [d.var_char_value for d in self.data or []]


@dataclass(frozen=True)
class ColumnInfo:
    name: str
    type: str
    catalog_name: Optional[str] = None
    schema_name: Optional[str] = None
    table_name: Optional[str] = None
    label: Optional[str] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    nullable: Optional[str] = None
    case_sensitive: Optional[bool] = None


@dataclass(frozen=True)
class ResultSetMetadata:
    column_info: Optional[List[ColumnInfo]] = None


@dataclass(frozen=True)
class ResultSet:
    rows: Optional[List[Row]] = None
    result_set_metadata: Optional[ResultSetMetadata] = None

    def column_names(self) -> List[str]:
        meta = self.result_set_metadata
        if meta is None or not meta.column_info:
            return []
        return [c.name for c in meta.column_info]


def _opt_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    return None if value is None else str(value)


def _opt_int(data: Dict[str, Any], key: str) -> Optional[int]:
    value = data.get(key)
    return None if value is None else int(value)


def _opt_bool(data: Dict[str, Any], key: str) -> Optional[bool]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def parse_column_info(data: Dict[str, Any]) -> ColumnInfo:
    return ColumnInfo(
        name=str(data["Name"]),
        type=str(data["Type"]),
        catalog_name=_opt_str(data, "CatalogName"),
        schema_name=_opt_str(data, "SchemaName"),
        table_name=_opt_str(data, "TableName"),
        label=_opt_str(data, "Label"),
        precision=_opt_int(data, "Precision"),
        scale=_opt_int(data, "Scale"),
        nullable=_opt_str(data, "Nullable"),
        case_sensitive=_opt_bool(data, "CaseSensitive"),
    )


def parse_row(data: Dict[str, Any]) -> Row:
    raw = data.get("Data")
    if raw is None:
        return Row()
    return Row(data=[Datum(var_char_value=_opt_str(d, "VarCharValue")) for d in raw])


def parse_result_set(data: Dict[str, Any]) -> ResultSet:
    rows = data.get("Rows")
    meta = data.get("ResultSetMetadata")
    metadata = None
    if meta:
        columns = meta.get("ColumnInfo")
        metadata = ResultSetMetadata(
            column_info=None if columns is None else [parse_column_info(c) for c in columns]
        )
    return ResultSet(
        rows=None if rows is None else [parse_row(r) for r in rows],
        result_set_metadata=metadata,
    )
