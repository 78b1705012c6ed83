"""
fluent_http/utils/json_codec.py

WHAT THIS FILE IS FOR
---------------------
JSON text <-> Python value conversion for request and response bodies.

- encode_json(): compact JSON text, unicode and "/" left unescaped
- decode_json(): strict parse into a generic JSON value
- JsonObject:    read-only mapping whose keys are also attributes

GENERIC JSON VALUE
------------------
A decoded value is one of:

    None | bool | int | float | str | list[JsonValue] | JsonObject

JSON objects become JsonObject at every nesting level, so callers can
write `resp.to_object().user.name` as well as `["user"]["name"]`.

Parse failures raise DecodingError, never a partial result.
"""

from __future__ import annotations

import json
from typing import Any, Iterator, List, Mapping, Union

from fluent_http.utils.errors import DecodingError, EncodingError


class JsonObject(Mapping[str, Any]):
    """Immutable JSON object with attribute access to its keys."""

    __slots__ = ("_data",)

    def __init__(self, pairs: Union[Mapping[str, Any], List[tuple]] = ()):
        object.__setattr__(self, "_data", dict(pairs))

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(name) from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("JsonObject is read-only")

    def __eq__(self, other: object) -> bool:
        if isinstance(other, JsonObject):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self._data == dict(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"JsonObject({self._data!r})"

    def to_dict(self) -> dict[str, Any]:
        """Plain dict copy, converting nested JsonObjects too."""
        return {k: _plain(v) for k, v in self._data.items()}


JsonValue = Union[None, bool, int, float, str, List[Any], JsonObject]


def _plain(value: Any) -> Any:
    if isinstance(value, JsonObject):
        return value.to_dict()
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def _reject_constant(name: str) -> Any:
    # NaN / Infinity are not JSON
    raise ValueError(f"Invalid JSON constant: {name}")


def encode_json(data: Any) -> str:
    """Serialize `data` to compact JSON text; raises EncodingError."""
    try:
        return json.dumps(data, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError, RecursionError) as exc:
        raise EncodingError(f"Body cannot be encoded as JSON: {exc}") from exc


def decode_json(text: str, *, as_object: bool = False) -> Any:
    """
    Parse JSON text strictly.

    as_object=False -> JSON objects become plain dicts
    as_object=True  -> JSON objects become JsonObject
    """
    try:
        if as_object:
            return json.loads(text, object_pairs_hook=JsonObject, parse_constant=_reject_constant)
        return json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        raise DecodingError(f"Body is not valid JSON: {exc}", body=text) from exc
