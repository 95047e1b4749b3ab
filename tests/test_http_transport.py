from __future__ import annotations

import types

import pytest
import requests

from aws_results.core.request import Request
from aws_results.transport.http import HttpTransport
from aws_results.util.errors import ConfigError, TransportError


class _FakeSession:
    def __init__(self, *, raise_exc=None) -> None:
        self.calls = []
        self.mounted = {}
        self.raise_exc = raise_exc
        self.closed = False

    def mount(self, prefix, adapter):
        self.mounted[prefix] = adapter

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.raise_exc is not None:
            raise self.raise_exc
        return types.SimpleNamespace(status_code=200, content=b'{"ok": true}', headers={"x-amzn-RequestId": "r1"})

    def close(self):
        self.closed = True


def _request() -> Request:
    return Request("POST", "/", {}, {"X-Amz-Target": "AmazonSSM.GetParameters"}, b"{}")


def test_endpoint_from_template_and_region() -> None:
    transport = HttpTransport(session=_FakeSession())
    assert transport.endpoint_for("athena", "eu-west-1") == "https://athena.eu-west-1.amazonaws.com"


def test_explicit_endpoint_wins(monkeypatch) -> None:
    monkeypatch.delenv("AWS_REGION", raising=False)
    monkeypatch.delenv("AWS_DEFAULT_REGION", raising=False)
    transport = HttpTransport(endpoints={"ssm": "http://localhost:4566/"}, session=_FakeSession())
    assert transport.endpoint_for("ssm", None) == "http://localhost:4566"


def test_missing_region_is_config_error(monkeypatch) -> None:
    monkeypatch.delenv("AWS_REGION", raising=False)
    monkeypatch.delenv("AWS_DEFAULT_REGION", raising=False)
    transport = HttpTransport(session=_FakeSession())
    with pytest.raises(ConfigError):
        transport.endpoint_for("athena", None)


def test_region_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("AWS_REGION", "ap-south-1")
    transport = HttpTransport(session=_FakeSession())
    assert transport.endpoint_for("athena", None) == "https://athena.ap-south-1.amazonaws.com"


def test_send_posts_request_and_returns_raw_response() -> None:
    session = _FakeSession()
    transport = HttpTransport(session=session, timeout=(1.0, 2.0))

    raw = transport.send(_request(), service="ssm", region="us-east-1")

    assert raw.status_code == 200
    assert raw.body == b'{"ok": true}'
    assert raw.headers["x-amzn-RequestId"] == "r1"
    method, url, kwargs = session.calls[0]
    assert method == "POST"
    assert url == "https://ssm.us-east-1.amazonaws.com/"
    assert kwargs["timeout"] == (1.0, 2.0)
    assert kwargs["headers"]["X-Amz-Target"] == "AmazonSSM.GetParameters"
    assert kwargs["data"] == b"{}"


def test_request_exceptions_are_mapped() -> None:
    session = _FakeSession(raise_exc=requests.ConnectionError("refused"))
    transport = HttpTransport(session=session)

    with pytest.raises(TransportError) as excinfo:
        transport.send(_request(), service="ssm", region="us-east-1")
    assert "refused" in str(excinfo.value)
    assert excinfo.value.operation == "AmazonSSM.GetParameters"


def test_connection_pool_size_mounts_adapters() -> None:
    session = _FakeSession()
    HttpTransport(session=session, connection_pool_size=16)

    assert set(session.mounted) == {"https://", "http://"}
    assert session.mounted["https://"]._pool_maxsize == 16


def test_close_closes_session() -> None:
    session = _FakeSession()
    HttpTransport(session=session).close()
    assert session.closed
