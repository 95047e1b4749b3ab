from __future__ import annotations

import json
from typing import Any, ClassVar, Dict, Mapping, Type, TypeVar, Union

from ..util.errors import InvalidArgument
from .request import Request

I = TypeVar("I", bound="Input")

JSON_CONTENT_TYPE = "application/x-amz-json-1.1"


class Input:
    """
    Base for operation inputs. Subclasses are dataclasses declaring their
    fields plus a trailing ``region`` override, and map wire names to
    attribute names in ``wire_names``.
    """

    operation: ClassVar[str] = ""
    target: ClassVar[str] = ""
    wire_names: ClassVar[Dict[str, str]] = {}

    region: Any

    @classmethod
    def create(cls: Type[I], value: Union[I, Mapping[str, Any]]) -> I:
        """
        Accept an input instance as-is or build one from a wire-shaped mapping,
        e.g. ``{"QueryExecutionId": "...", "@region": "eu-west-1"}``.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, Mapping):
            raise InvalidArgument(f"Expected {cls.__name__} or mapping, got {type(value).__name__}")
        kwargs: Dict[str, Any] = {}
        for key, item in value.items():
            if key == "@region":
                kwargs["region"] = item
                continue
            attr = cls.wire_names.get(key)
            if attr is None:
                raise InvalidArgument(f'Invalid parameter "{key}" provided to "{cls.__name__}".')
            kwargs[attr] = item
        return cls(**kwargs)  # type: ignore[call-arg]

    def request_body(self) -> Dict[str, Any]:
        raise NotImplementedError

    def request(self) -> Request:
        payload = self.request_body()
        body = json.dumps(payload, separators=(",", ":")) if payload else "{}"
        headers = {
            "Content-Type": JSON_CONTENT_TYPE,
            "X-Amz-Target": self.target,
        }
        return Request("POST", "/", {}, headers, body.encode("utf-8"))

    def _missing(self, wire_name: str) -> InvalidArgument:
        return InvalidArgument(
            f'Missing parameter "{wire_name}" for "{type(self).__name__}". The value cannot be null.'
        )
