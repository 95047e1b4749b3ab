from __future__ import annotations

import dataclasses
import json
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from ..athena.models import Row
from ..ssm.models import Parameter

REDACTED_VALUE = "<redacted>"
SENSITIVE_KEY_SUBSTRINGS = (
    "private_key",
    "passphrase",
    "password",
    "secret",
    "token",
)


def _is_sensitive_key(key: Any) -> bool:
    if not isinstance(key, str):
        return False
    lowered = key.lower()
    return any(token in lowered for token in SENSITIVE_KEY_SUBSTRINGS)


def sanitize_for_json(value: Any, *, redact: bool = True) -> Any:
    """
    Convert common non-JSON types to serializable forms. With ``redact``,
    values under sensitive-looking keys are replaced.
    """
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.decode("utf-8", "replace")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return sanitize_for_json({f.name: getattr(value, f.name) for f in dataclasses.fields(value)}, redact=redact)
    if isinstance(value, dict):
        out = {}
        for k, v in value.items():
            if redact and _is_sensitive_key(k):
                out[k] = REDACTED_VALUE
            else:
                out[k] = sanitize_for_json(v, redact=redact)
        return out
    if isinstance(value, (list, tuple, set)):
        return [sanitize_for_json(v, redact=redact) for v in value]
    return value


def stable_json_dumps(obj: Any) -> str:
    return json.dumps(obj, sort_keys=True, ensure_ascii=False, separators=(",", ":"))


def row_to_record(row: Row, columns: Sequence[str]) -> Dict[str, Optional[str]]:
    """
    Map a row onto column names. Extra values get positional names
    (``col_<n>``); missing trailing values are None.
    """
    values = row.values()
    record: Dict[str, Optional[str]] = {}
    for idx in range(max(len(columns), len(values))):
        name = columns[idx] if idx < len(columns) else f"col_{idx}"
        record[name] = values[idx] if idx < len(values) else None
    return record


def parameter_to_record(parameter: Parameter, *, reveal_secure: bool = False) -> Dict[str, Any]:
    record = sanitize_for_json(parameter)
    if parameter.is_secure and not reveal_secure:
        record["value"] = REDACTED_VALUE
    return record


def parameters_to_records(parameters: Sequence[Parameter], *, reveal_secure: bool = False) -> List[Dict[str, Any]]:
    return [parameter_to_record(p, reveal_secure=reveal_secure) for p in parameters]
