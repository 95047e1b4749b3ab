from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class Request:
    """
    Wire-level description of a single call: what the transport sends.
    The uri is relative to the service endpoint.
    """

    method: str
    uri: str
    query: Dict[str, str] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
