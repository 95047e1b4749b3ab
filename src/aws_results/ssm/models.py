from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

@dataclass(frozen=True)
class Parameter:
    name: str
    type: str
    value: str
    version: Optional[int] = None
    selector: Optional[str] = None
    source_result: Optional[str] = None
    last_modified_date: Optional[datetime] = None
    arn: Optional[str] = None
    data_type: Optional[str] = None

    @property
    def is_secure(self) -> bool:
        return self.type == "SecureString"


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(float(value), timezone.utc)
    text = str(value)
    try:
        return datetime.fromtimestamp(float(text), timezone.utc)
    except ValueError:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))


def parse_parameter(data: Dict[str, Any]) -> Parameter:
    version = data.get("Version")
    return Parameter(
        name=str(data["Name"]),
        type=str(data["Type"]),
        value=str(data["Value"]),
        version=None if version is None else int(version),
        selector=None if data.get("Selector") is None else str(data["Selector"]),
        source_result=None if data.get("SourceResult") is None else str(data["SourceResult"]),
        last_modified_date=_parse_timestamp(data.get("LastModifiedDate")),
        arn=None if data.get("ARN") is None else str(data["ARN"]),
        data_type=None if data.get("DataType") is None else str(data["DataType"]),
    )
