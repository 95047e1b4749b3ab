from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from ..core.input import Input
from ..core.result import PaginatedResult
from ..util.errors import ConfigurationError
from .models import ResultSet, Row, parse_result_set

if TYPE_CHECKING:
    from ..core.client import ApiClient


class GetQueryResultsOutput(PaginatedResult[Row]):
    """
    One page of query results. Iterating yields the rows of this page and of
    every following page.
    """

    _update_count: Optional[int] = None
    _result_set: Optional[ResultSet] = None
    _next_token: Optional[str] = None

    def populate_result(self, data: Dict[str, Any]) -> None:
        update_count = data.get("UpdateCount")
        self._update_count = None if update_count is None else int(update_count)
        result_set = data.get("ResultSet")
        self._result_set = parse_result_set(result_set) if result_set else None
        token = data.get("NextToken")
        self._next_token = None if token is None else str(token)

    @property
    def update_count(self) -> Optional[int]:
        """Rows inserted by a CREATE TABLE AS SELECT statement."""
        self.materialize()
        return self._update_count

    @property
    def result_set(self) -> Optional[ResultSet]:
        self.materialize()
        return self._result_set

    @property
    def next_token(self) -> Optional[str]:
        self.materialize()
        return self._next_token

    def column_names(self) -> List[str]:
        result_set = self.result_set
        return result_set.column_names() if result_set else []

    def _page_items(self) -> Sequence[Row]:
        if self._result_set is None:
            return []
        return self._result_set.rows or []

    def _page_token(self) -> Optional[str]:
        return self._next_token

    def _page_summary(self) -> Optional[Any]:
        return self._update_count

    def _fetch_next(self, client: "ApiClient", input: Input) -> "GetQueryResultsOutput":
        from .client import AthenaClient

        if not isinstance(client, AthenaClient):
            raise ConfigurationError(f"query results cannot be paged with {type(client).__name__}")
        return client.get_query_results(input)
