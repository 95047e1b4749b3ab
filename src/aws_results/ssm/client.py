from __future__ import annotations

from typing import Any, Mapping, Union

from ..core.client import ApiClient
from .input import GetParametersRequest
from .result import GetParametersResult


class SsmClient(ApiClient):
    service = "ssm"

    def get_parameters(self, input: Union[GetParametersRequest, Mapping[str, Any]]) -> GetParametersResult:
        parsed = GetParametersRequest.create(input)
        return GetParametersResult(self.dispatch(parsed), self, parsed)
