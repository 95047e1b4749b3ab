from __future__ import annotations

from typing import Any, Dict, List

from ..core.result import Result
from .models import Parameter, parse_parameter


class GetParametersResult(Result):
    _parameters: List[Parameter]
    _invalid_parameters: List[str]

    def populate_result(self, data: Dict[str, Any]) -> None:
        self._parameters = [parse_parameter(p) for p in data.get("Parameters") or []]
        self._invalid_parameters = [str(n) for n in data.get("InvalidParameters") or []]

    @property
    def parameters(self) -> List[Parameter]:
        self.materialize()
        return list(self._parameters)

    @property
    def invalid_parameters(self) -> List[str]:
        """Names that could not be resolved (missing or not accessible)."""
        self.materialize()
        return list(self._invalid_parameters)
