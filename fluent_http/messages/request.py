"""
fluent_http/messages/request.py

WHAT THIS FILE IS FOR
---------------------
The immutable Request value produced by RequestBuilder.build() and
consumed by HttpClient.send().

A Request holds:
- method   upper-case HTTP method token
- url      target URL, not parsed or validated
- headers  read-only mapping, keys case-sensitive as stored
- body     one Body variant (see messages/body.py)
- options  TransportOptions (see schemas/transport_options.py)

Construct it with Request.from_builder(). Inputs are copied, so later
changes to the caller's dicts or to the builder never reach an existing
Request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional

from fluent_http.messages.body import Body, MappingBody, MultipartBody, TextBody
from fluent_http.schemas.transport_options import TransportOptions
from fluent_http.utils.errors import EncodingError
from fluent_http.utils.json_codec import encode_json


@dataclass(frozen=True)
class Request:
    """
    One immutable HTTP request.

    Build it with RequestBuilder.build() or Request.from_builder(). Those
    are the only supported entry points; the dataclass constructor is an
    implementation detail and may change.
    """

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Body = field(default_factory=MappingBody)
    options: TransportOptions = field(default_factory=TransportOptions)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @classmethod
    def from_builder(
        cls,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Body,
        options: Optional[TransportOptions] = None,
    ) -> "Request":
        return cls(
            method=method,
            url=url,
            headers=headers,
            body=body,
            options=options or TransportOptions(),
        )

    def header_lines(self) -> List[str]:
        """Headers rendered as "Name: value" lines, in insertion order."""
        return [f"{name}: {value}" for name, value in self.headers.items()]

    def to_json(self) -> str:
        """
        Render the body as JSON text.

        - MappingBody   -> JSON object of its fields
        - TextBody      -> JSON string literal of its text
        - MultipartBody -> EncodingError (file parts are not serializable)
        """
        if isinstance(self.body, MultipartBody):
            raise EncodingError("Multipart bodies with file parts cannot be encoded as JSON")
        if isinstance(self.body, TextBody):
            return encode_json(self.body.text)
        return encode_json(dict(self.body.fields))
