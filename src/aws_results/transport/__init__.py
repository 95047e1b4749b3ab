from __future__ import annotations

from .base import Transport, TransportResponse
from .http import HttpTransport

__all__ = ["HttpTransport", "Transport", "TransportResponse"]
