"""
Client for Athena query results and SSM parameters.

Query results that span several responses are exposed as one lazy sequence:

    with AthenaClient(HttpTransport(), region="eu-west-1") as athena:
        for row in athena.get_query_results({"QueryExecutionId": qid}):
            ...
"""

from __future__ import annotations

from .athena import AthenaClient, GetQueryResultsInput, GetQueryResultsOutput
from .core import Page, PaginatedResult
from .ssm import GetParametersRequest, GetParametersResult, SsmClient, fetch_parameters
from .transport import HttpTransport, Transport, TransportResponse
from .util.errors import ConfigurationError, InvalidArgument, ResultsError, TransportError

__version__ = "0.1.0"

__all__ = [
    "AthenaClient",
    "ConfigurationError",
    "GetParametersRequest",
    "GetParametersResult",
    "GetQueryResultsInput",
    "GetQueryResultsOutput",
    "HttpTransport",
    "InvalidArgument",
    "Page",
    "PaginatedResult",
    "ResultsError",
    "SsmClient",
    "Transport",
    "TransportError",
    "TransportResponse",
    "fetch_parameters",
]
