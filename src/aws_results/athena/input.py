from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional

from ..core.input import Input
from ..util.errors import InvalidArgument

QUERY_RESULT_TYPES = {"DATA_ROWS", "DATA_MANIFEST"}


@dataclass
class GetQueryResultsInput(Input):
    """
    Input of Athena GetQueryResults. ``next_token`` resumes a previous,
    truncated call; ``max_results`` caps the rows of a single page.
    """

    operation: ClassVar[str] = "GetQueryResults"
    target: ClassVar[str] = "AmazonAthena.GetQueryResults"
    wire_names: ClassVar[Dict[str, str]] = {
        "QueryExecutionId": "query_execution_id",
        "NextToken": "next_token",
        "MaxResults": "max_results",
        "QueryResultType": "query_result_type",
    }

    query_execution_id: Optional[str] = None
    next_token: Optional[str] = None
    max_results: Optional[int] = None
    query_result_type: Optional[str] = None
    region: Optional[str] = None

    def request_body(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.query_execution_id is None:
            raise self._missing("QueryExecutionId")
        payload["QueryExecutionId"] = self.query_execution_id
        if self.next_token is not None:
            payload["NextToken"] = self.next_token
        if self.max_results is not None:
            payload["MaxResults"] = int(self.max_results)
        if self.query_result_type is not None:
            if self.query_result_type not in QUERY_RESULT_TYPES:
                raise InvalidArgument(
                    f'Invalid parameter "QueryResultType" for "{type(self).__name__}". '
                    f'The value "{self.query_result_type}" is not a valid "QueryResultType".'
                )
            payload["QueryResultType"] = self.query_result_type
        return payload
