from __future__ import annotations

from .client import AthenaClient
from .input import GetQueryResultsInput
from .models import ColumnInfo, Datum, ResultSet, ResultSetMetadata, Row
from .result import GetQueryResultsOutput

__all__ = [
    "AthenaClient",
    "ColumnInfo",
    "Datum",
    "GetQueryResultsInput",
    "GetQueryResultsOutput",
    "ResultSet",
    "ResultSetMetadata",
    "Row",
]
