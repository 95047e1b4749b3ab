from __future__ import annotations

from .client import ApiClient
from .input import Input
from .request import Request
from .response import Response
from .result import Page, PaginatedResult, Result

__all__ = ["ApiClient", "Input", "Page", "PaginatedResult", "Request", "Response", "Result"]
