from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, runtime_checkable

from ..core.request import Request


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)


@runtime_checkable
class Transport(Protocol):
    """
    Performs one network call. Implementations must be safe to call from worker
    threads; retries, timeouts and signing are their own concern.
    """

    def send(self, request: Request, *, service: str, region: Optional[str]) -> TransportResponse:
        ...
