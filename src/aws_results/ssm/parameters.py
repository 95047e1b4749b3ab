from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..logging import get_logger
from .client import SsmClient
from .input import MAX_NAMES_PER_CALL, GetParametersRequest
from .models import Parameter

LOG = get_logger(__name__)


@dataclass(frozen=True)
class ParameterLookup:
    parameters: List[Parameter]
    invalid_parameters: List[str]


def _chunks(names: Sequence[str], size: int) -> List[List[str]]:
    return [list(names[i : i + size]) for i in range(0, len(names), size)]


def fetch_parameters(
    client: SsmClient,
    names: Sequence[str],
    *,
    with_decryption: Optional[bool] = None,
    region: Optional[str] = None,
) -> ParameterLookup:
    """
    Look up any number of parameters. Names are split into batches the service
    accepts; all batches are sent at once and merged in input order.
    Duplicate names are looked up once.
    """
    unique = list(dict.fromkeys(n for n in names if n))
    if not unique:
        return ParameterLookup(parameters=[], invalid_parameters=[])

    results = [
        client.get_parameters(GetParametersRequest(names=batch, with_decryption=with_decryption, region=region))
        for batch in _chunks(unique, MAX_NAMES_PER_CALL)
    ]
    LOG.debug("Fetching parameters", extra={"names": len(unique), "batches": len(results)})

    parameters: List[Parameter] = []
    invalid: List[str] = []
    for idx, result in enumerate(results):
        try:
            parameters.extend(result.parameters)
        except BaseException:
            for pending in results[idx + 1 :]:
                pending.cancel()
            raise
        invalid.extend(result.invalid_parameters)
    return ParameterLookup(parameters=parameters, invalid_parameters=invalid)
