from __future__ import annotations

from typing import Any, Mapping, Union

from ..core.client import ApiClient
from .input import GetQueryResultsInput
from .result import GetQueryResultsOutput


class AthenaClient(ApiClient):
    service = "athena"

    def get_query_results(self, input: Union[GetQueryResultsInput, Mapping[str, Any]]) -> GetQueryResultsOutput:
        """
        Stream the results of a query execution. The first page is requested
        right away; iterate the returned object to walk every page.
        """
        parsed = GetQueryResultsInput.create(input)
        return GetQueryResultsOutput(self.dispatch(parsed), self, parsed)
