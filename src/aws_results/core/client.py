from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, ClassVar, Optional

from ..logging import get_logger
from ..transport.base import Transport
from .input import Input
from .response import Response

LOG = get_logger(__name__)

DEFAULT_MAX_WORKERS = 4


class ApiClient:
    """
    Base for service clients. Calls are handed to a small worker pool as soon
    as they are made, so a result can be returned before its response arrives.
    """

    service: ClassVar[str] = ""

    def __init__(
        self,
        transport: Transport,
        *,
        region: Optional[str] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        timeout: Optional[float] = None,
    ) -> None:
        self._transport = transport
        self._region = region
        self._max_workers = max(1, int(max_workers))
        self._timeout = timeout
        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.Lock()

    @property
    def region(self) -> Optional[str]:
        return self._region

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix=f"{self.service or 'api'}-client",
                )
            return self._executor

    def dispatch(self, input: Input) -> Response:
        """
        Build the request for ``input`` and start sending it. Request building
        errors (missing required fields) raise here, synchronously.
        """
        request = input.request()
        region = input.region or self._region
        LOG.debug(
            "Dispatching call",
            extra={"service": self.service, "operation": input.operation, "region": region},
        )
        future = self._get_executor().submit(self._transport.send, request, service=self.service, region=region)
        return Response(future, operation=input.operation, timeout=self._timeout)

    def close(self) -> None:
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=False, cancel_futures=True)
        close = getattr(self._transport, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()
