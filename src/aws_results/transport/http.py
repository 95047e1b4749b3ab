from __future__ import annotations

import os
from typing import Dict, Mapping, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter

from ..core.request import Request
from ..logging import get_logger
from ..util.errors import ConfigError, map_transport_error
from .base import TransportResponse

LOG = get_logger(__name__)

DEFAULT_ENDPOINT_TEMPLATE = "https://{service}.{region}.amazonaws.com"
DEFAULT_TIMEOUT: Tuple[float, float] = (5.0, 60.0)


def _detect_region() -> Optional[str]:
    return os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION")


def _apply_connection_pool_size(session: requests.Session, pool_size: Optional[int]) -> None:
    if pool_size is None or pool_size < 1:
        return
    adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
    session.mount("https://", adapter)
    session.mount("http://", adapter)


class HttpTransport:
    """
    Transport that posts requests over HTTP(S) with a shared requests.Session.

    Endpoints are resolved per service: an explicit entry in ``endpoints`` wins,
    otherwise ``endpoint_template`` is formatted with the service and region.
    Requests are sent unsigned; put a signing proxy or a local emulator behind
    the endpoint when the target requires credentials.
    """

    def __init__(
        self,
        *,
        endpoints: Optional[Mapping[str, str]] = None,
        endpoint_template: str = DEFAULT_ENDPOINT_TEMPLATE,
        timeout: Tuple[float, float] = DEFAULT_TIMEOUT,
        connection_pool_size: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._endpoints: Dict[str, str] = dict(endpoints or {})
        self._endpoint_template = endpoint_template
        self._timeout = timeout
        self._session = session or requests.Session()
        _apply_connection_pool_size(self._session, connection_pool_size)

    def endpoint_for(self, service: str, region: Optional[str]) -> str:
        explicit = self._endpoints.get(service)
        if explicit:
            return explicit.rstrip("/")
        resolved = region or _detect_region()
        if not resolved:
            raise ConfigError(
                f"Region is required to reach {service}. Set AWS_REGION or pass an explicit region or endpoint."
            )
        return self._endpoint_template.format(service=service, region=resolved).rstrip("/")

    def send(self, request: Request, *, service: str, region: Optional[str]) -> TransportResponse:
        url = f"{self.endpoint_for(service, region)}{request.uri}"
        target = request.headers.get("X-Amz-Target")
        LOG.debug("Sending request", extra={"url": url, "target": target})
        try:
            resp = self._session.request(
                request.method,
                url,
                params=request.query or None,
                headers=request.headers,
                data=request.body,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise map_transport_error(e, f"HTTP error while calling {target or url}", operation=target) from e
        return TransportResponse(status_code=resp.status_code, body=resp.content, headers=dict(resp.headers))

    def close(self) -> None:
        self._session.close()
