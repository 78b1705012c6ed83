"""
fluent_http/messages/response.py

WHAT THIS FILE IS FOR
---------------------
The immutable Response value returned by HttpClient.send().

It exposes:
- status_code   whatever the server returned, no range validation
- body          raw text, possibly empty
- headers       response headers as a read-only mapping; lookups ignore
                the case of the header name

JSON VIEWS
----------
- to_dict():   {}   for an empty body, else the parsed JSON object
- to_object(): None for an empty body, else a generic JSON value whose
               objects allow attribute access (see utils/json_codec.py)

Both views re-parse on every call; they are pure and repeatable.
Malformed JSON raises DecodingError at the accessor, never at send().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping

from requests.structures import CaseInsensitiveDict

from fluent_http.utils.errors import DecodingError
from fluent_http.utils.json_codec import JsonValue, decode_json


@dataclass(frozen=True)
class Response:
    status_code: int
    body: str
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(CaseInsensitiveDict(self.headers)))

    def __str__(self) -> str:
        return self.body

    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def to_dict(self) -> Dict[str, Any]:
        if not self.body:
            return {}

        data = decode_json(self.body)
        if not isinstance(data, dict):
            raise DecodingError(
                f"Expected a JSON object, got {type(data).__name__}",
                body=self.body,
            )
        return data

    def to_object(self) -> JsonValue:
        if not self.body:
            return None
        return decode_json(self.body, as_object=True)
