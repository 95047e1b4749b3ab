from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional

from ..core.input import Input

MAX_NAMES_PER_CALL = 10


@dataclass
class GetParametersRequest(Input):
    """
    Input of SSM GetParameters. ``names`` are parameter names or ARNs, with an
    optional ``:label`` or ``:version`` selector.
    """

    operation: ClassVar[str] = "GetParameters"
    target: ClassVar[str] = "AmazonSSM.GetParameters"
    wire_names: ClassVar[Dict[str, str]] = {
        "Names": "names",
        "WithDecryption": "with_decryption",
    }

    names: Optional[List[str]] = None
    with_decryption: Optional[bool] = None
    region: Optional[str] = None

    def request_body(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.names is None:
            raise self._missing("Names")
        payload["Names"] = [str(n) for n in self.names]
        if self.with_decryption is not None:
            payload["WithDecryption"] = bool(self.with_decryption)
        return payload
