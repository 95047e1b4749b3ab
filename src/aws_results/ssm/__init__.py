from __future__ import annotations

from .client import SsmClient
from .input import GetParametersRequest
from .models import Parameter
from .parameters import ParameterLookup, fetch_parameters
from .result import GetParametersResult

__all__ = [
    "GetParametersRequest",
    "GetParametersResult",
    "Parameter",
    "ParameterLookup",
    "SsmClient",
    "fetch_parameters",
]
