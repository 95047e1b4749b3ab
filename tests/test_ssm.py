from __future__ import annotations

import json
import threading
from datetime import datetime, timezone

import pytest

from aws_results.ssm.client import SsmClient
from aws_results.ssm.parameters import fetch_parameters
from aws_results.ssm.result import GetParametersResult
from aws_results.transport.base import TransportResponse
from aws_results.util.errors import TransportError


class ParameterStoreTransport:
    def __init__(self, known, *, fail_on=None) -> None:
        self.known = known
        self.fail_on = fail_on
        self.calls = []
        self._lock = threading.Lock()

    def send(self, request, *, service, region):
        body = json.loads(request.body)
        with self._lock:
            self.calls.append(body)
        if self.fail_on and self.fail_on in body["Names"]:
            return TransportResponse(status_code=500, body=b'{"__type":"InternalServerError","message":"boom"}')
        params = []
        invalid = []
        for name in body["Names"]:
            if name in self.known:
                params.append(
                    {
                        "Name": name,
                        "Type": self.known[name][0],
                        "Value": self.known[name][1],
                        "Version": 3,
                        "LastModifiedDate": 1704067200.0,
                        "ARN": f"arn:aws:ssm:us-east-1:123456789012:parameter{name}",
                        "DataType": "text",
                    }
                )
            else:
                invalid.append(name)
        payload = {"Parameters": params, "InvalidParameters": invalid}
        return TransportResponse(status_code=200, body=json.dumps(payload).encode("utf-8"))


def test_get_parameters_decodes_parameters() -> None:
    transport = ParameterStoreTransport({"/app/db": ("SecureString", "s3cr3t")})
    with SsmClient(transport, region="us-east-1") as client:
        result = client.get_parameters({"Names": ["/app/db", "/app/missing"], "WithDecryption": True})
        params = result.parameters
        invalid = result.invalid_parameters

    assert invalid == ["/app/missing"]
    assert len(params) == 1
    param = params[0]
    assert param.name == "/app/db"
    assert param.is_secure
    assert param.value == "s3cr3t"
    assert param.version == 3
    assert param.last_modified_date == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert transport.calls == [{"Names": ["/app/db", "/app/missing"], "WithDecryption": True}]


def test_fetch_parameters_batches_and_keeps_order() -> None:
    names = [f"/p/{i:02d}" for i in range(23)]
    known = {n: ("String", n.upper()) for n in names if n != "/p/05"}
    transport = ParameterStoreTransport(known)
    with SsmClient(transport, region="us-east-1", max_workers=3) as client:
        lookup = fetch_parameters(client, names + ["/p/00"])

    assert sorted(len(c["Names"]) for c in transport.calls) == [3, 10, 10]
    assert [p.name for p in lookup.parameters] == [n for n in names if n != "/p/05"]
    assert lookup.invalid_parameters == ["/p/05"]


def test_fetch_parameters_without_names_makes_no_call() -> None:
    transport = ParameterStoreTransport({})
    with SsmClient(transport, region="us-east-1") as client:
        lookup = fetch_parameters(client, [])

    assert lookup.parameters == []
    assert transport.calls == []


def test_fetch_parameters_propagates_batch_failure() -> None:
    names = [f"/p/{i:02d}" for i in range(12)]
    transport = ParameterStoreTransport({n: ("String", "v") for n in names}, fail_on="/p/01")
    with SsmClient(transport, region="us-east-1") as client:
        with pytest.raises(TransportError) as excinfo:
            fetch_parameters(client, names)

    assert excinfo.value.status_code == 500
    assert excinfo.value.error_code == "InternalServerError"


def test_results_do_not_share_parameter_lists() -> None:
    transport = ParameterStoreTransport({"/a": ("String", "1"), "/b": ("String", "2")})
    with SsmClient(transport, region="us-east-1") as client:
        first = client.get_parameters({"Names": ["/a"]})
        second = client.get_parameters({"Names": ["/b", "/c"]})

        assert [p.name for p in first.parameters] == ["/a"]
        assert first.invalid_parameters == []
        assert [p.name for p in second.parameters] == ["/b"]
        assert second.invalid_parameters == ["/c"]
    assert "_parameters" not in vars(GetParametersResult)
