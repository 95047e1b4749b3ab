from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Dict, Generic, Iterator, Optional, Sequence, Tuple, TypeVar

from ..logging import get_logger, log_event
from ..util.errors import ConfigurationError
from .input import Input
from .response import Response

if TYPE_CHECKING:
    from .client import ApiClient

LOG = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """Snapshot of one response: its items, continuation token and summary value."""

    items: Tuple[T, ...]
    continuation_token: Optional[str] = None
    summary: Optional[Any] = None


class Result:
    """
    Lazily decoded outcome of one call.

    The call itself may still be running when the result is handed out; the
    body is decoded on first access and kept. Results also track prefetched
    results that hang off them so that abandoning one cancels the others.
    """

    def __init__(
        self,
        response: Optional[Response] = None,
        client: Optional["ApiClient"] = None,
        input: Optional[Input] = None,
    ) -> None:
        self._response = response
        self._client = client
        self._input = input
        self._initialized = False
        self._prefetch: Dict[int, Result] = {}

    def materialize(self) -> None:
        """
        Decode the response once. Dispatches the call first when the result
        was built from a client and input only. Repeated calls are no-ops.
        """
        if self._initialized:
            return
        if self._response is None:
            if self._client is None or self._input is None:
                raise ConfigurationError(f"{type(self).__name__} has no response and no client/input to fetch one")
            self._response = self._client.dispatch(self._input)
        self.populate_result(self._response.to_dict())
        self._initialized = True

    def resolve(self, timeout: Optional[float] = None) -> bool:
        """Wait for the underlying call; True on success, TransportError otherwise."""
        if self._response is None:
            self.materialize()
            return True
        return self._response.resolve(timeout)

    def populate_result(self, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    def register_prefetch(self, result: Result) -> None:
        self._prefetch[id(result)] = result

    def unregister_prefetch(self, result: Result) -> None:
        self._prefetch.pop(id(result), None)

    def cancel(self) -> None:
        """Abandon this result and every prefetch registered on it."""
        while self._prefetch:
            _, pending = self._prefetch.popitem()
            pending.cancel()
        if self._response is not None and not self._initialized:
            self._response.cancel()


class PaginatedResult(Result, Generic[T]):
    """
    Result of an operation whose output spans several responses.

    Iterating walks every page, starting from this one. While the items of a
    page are handed out, the request for the following page is already in
    flight; no more than one page is fetched ahead.

    Subclasses name the input attribute carrying the continuation token in
    ``token_field`` and implement the ``_page_*`` accessors plus ``_fetch_next``.
    """

    token_field = "next_token"

    def _page_items(self) -> Sequence[T]:
        raise NotImplementedError

    def _page_token(self) -> Optional[str]:
        raise NotImplementedError

    def _page_summary(self) -> Optional[Any]:
        return None

    def _fetch_next(self, client: "ApiClient", input: Input) -> "PaginatedResult[T]":
        raise NotImplementedError

    def materialize(self) -> None:
        if self._client is None or self._input is None:
            raise ConfigurationError(f"{type(self).__name__} needs a client and its originating input to page")
        super().materialize()

    def continuation_token(self) -> Optional[str]:
        self.materialize()
        return self._page_token()

    def summary(self) -> Optional[Any]:
        self.materialize()
        return self._page_summary()

    def page(self) -> Page[T]:
        self.materialize()
        return Page(tuple(self._page_items()), self._page_token(), self._page_summary())

    def __iter__(self) -> Iterator[T]:
        return self.items()

    def items(self) -> Iterator[T]:
        """
        Lazily yield the items of this page and every following one, in order.
        Each call starts a new traversal from this page. A page that fails to
        load raises once its items are due; items already yielded stay valid.
        """
        client = self._client
        if client is None:
            raise ConfigurationError("missing client injected in paginated result")
        if self._input is None:
            raise ConfigurationError("missing last request injected in paginated result")
        base_input = self._input

        page: PaginatedResult[T] = self
        pending: Optional[PaginatedResult[T]] = None
        number = 1
        try:
            while True:
                page.materialize()
                token = page.continuation_token()
                if token:
                    next_input = replace(base_input, **{self.token_field: token})  # type: ignore[type-var]
                    pending = self._fetch_next(client, next_input)
                    page.register_prefetch(pending)
                    log_event(LOG, logging.DEBUG, "Prefetching next page", step="paginate", phase="prefetch", page=number + 1)
                else:
                    pending = None

                yield from page._page_items()

                if pending is None:
                    log_event(LOG, logging.DEBUG, "Last page reached", step="paginate", phase="complete", pages=number)
                    return
                page.unregister_prefetch(pending)
                page, pending = pending, None
                number += 1
                log_event(LOG, logging.DEBUG, "Advancing to next page", step="paginate", phase="advance", page=number)
        finally:
            if pending is not None:
                page.unregister_prefetch(pending)
                pending.cancel()
                log_event(LOG, logging.DEBUG, "Abandoning prefetched page", step="paginate", phase="abandon", page=number + 1)
