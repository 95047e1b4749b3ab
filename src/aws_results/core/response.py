from __future__ import annotations

import json
from concurrent.futures import CancelledError, Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Dict, Optional

from ..logging import get_logger
from ..transport.base import TransportResponse
from ..util.errors import ResultsError, TransportError, map_transport_error

LOG = get_logger(__name__)


def _error_details(raw: TransportResponse) -> tuple[Optional[str], str]:
    """
    Extract (error_code, message) from an AWS JSON error body, falling back to
    the x-amzn-ErrorType header and the raw text.
    """
    code: Optional[str] = None
    message = ""
    try:
        data = json.loads(raw.body or b"{}")
    except ValueError:
        data = None
    if isinstance(data, dict):
        code = data.get("__type") or data.get("code")
        message = str(data.get("message") or data.get("Message") or "")
    if not code:
        code = raw.headers.get("x-amzn-ErrorType") or raw.headers.get("X-Amzn-ErrorType")
    if code:
        # "com.amazonaws.athena#InvalidRequestException" and "Code:http://..." forms
        code = code.split("#")[-1].split(":")[0]
    if not message and data is None:
        message = raw.body.decode("utf-8", "replace")[:200]
    return code, message


class Response:
    """
    Deferred result of a transport call running on a worker thread.

    The outcome is read once and kept: a failed call raises the same
    TransportError on every access, a successful one is decoded at most once.
    """

    def __init__(self, future: "Future[TransportResponse]", *, operation: str, timeout: Optional[float] = None) -> None:
        self._future = future
        self._operation = operation
        self._timeout = timeout
        self._raw: Optional[TransportResponse] = None
        self._data: Optional[Dict[str, Any]] = None
        self._error: Optional[ResultsError] = None

    @property
    def operation(self) -> str:
        return self._operation

    def resolve(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the call finished. Returns True on success, raises
        TransportError otherwise.
        """
        if self._raw is not None:
            return True
        if self._error is not None:
            raise self._error
        wait = timeout if timeout is not None else self._timeout
        try:
            raw = self._future.result(timeout=wait)
        except FutureTimeoutError as e:
            if not self._future.done():
                # not cached: a later resolve() may still succeed
                raise TransportError(
                    f"Timed out after {wait}s waiting for {self._operation}", operation=self._operation
                ) from e
            self._error = map_transport_error(e, f"Transport error while calling {self._operation}", operation=self._operation)
            raise self._error from e
        except CancelledError as e:
            self._error = TransportError(f"{self._operation} was cancelled", operation=self._operation)
            raise self._error from e
        except ResultsError as e:
            self._error = e
            raise
        except Exception as e:
            self._error = map_transport_error(e, f"Transport error while calling {self._operation}", operation=self._operation)
            raise self._error from e

        if raw.status_code >= 300:
            code, message = _error_details(raw)
            self._error = TransportError(
                f"{self._operation} failed with HTTP {raw.status_code}"
                + (f" {code}" if code else "")
                + (f": {message}" if message else ""),
                status_code=raw.status_code,
                error_code=code,
                operation=self._operation,
            )
            raise self._error
        self._raw = raw
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Decoded JSON body of a successful call."""
        if self._data is not None:
            return self._data
        self.resolve()
        assert self._raw is not None
        body = self._raw.body
        if not body or not body.strip():
            self._data = {}
            return self._data
        try:
            data = json.loads(body)
        except ValueError as e:
            self._error = TransportError(
                f"Malformed response body for {self._operation}: {e}",
                status_code=self._raw.status_code,
                operation=self._operation,
            )
            self._raw = None
            raise self._error from e
        if not isinstance(data, dict):
            self._error = TransportError(
                f"Unexpected response body for {self._operation}: top-level value is not an object",
                status_code=self._raw.status_code,
                operation=self._operation,
            )
            self._raw = None
            raise self._error
        self._data = data
        return data

    @property
    def status_code(self) -> int:
        self.resolve()
        assert self._raw is not None
        return self._raw.status_code

    @property
    def headers(self) -> Dict[str, str]:
        self.resolve()
        assert self._raw is not None
        return dict(self._raw.headers)

    def cancel(self) -> None:
        """
        Abandon the call. A call that already ran keeps its outcome unread; an
        error it produced is logged at DEBUG and otherwise dropped.
        """
        if self._future.cancel():
            return
        self._future.add_done_callback(self._discard)

    def _discard(self, future: "Future[TransportResponse]") -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            LOG.debug(
                "Discarding error from abandoned call",
                extra={"operation": self._operation, "error": str(exc)},
            )
