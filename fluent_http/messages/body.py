"""
fluent_http/messages/body.py

WHAT THIS FILE IS FOR
---------------------
Tagged request body variants. A Request carries exactly one of:

- MappingBody    key/value pairs, form-encoded on the wire
- TextBody       pre-encoded text (JSON, XML, form text), sent verbatim
- MultipartBody  plain fields + named file parts, sent as multipart/form-data

The variant decides how HttpClient puts the body on the wire, so a
string body is never re-encoded and file parts are real uploads.

All variants are frozen and hold read-only copies of their mappings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union


def _frozen(mapping: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class FilePart:
    """A file on disk, opened only while the request is being sent."""

    path: str
    filename: Optional[str] = None
    content_type: Optional[str] = None


@dataclass(frozen=True)
class MappingBody:
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", _frozen(self.fields))

    def is_empty(self) -> bool:
        return not self.fields


@dataclass(frozen=True)
class TextBody:
    text: str

    def is_empty(self) -> bool:
        return self.text == ""


@dataclass(frozen=True)
class MultipartBody:
    fields: Mapping[str, Any] = field(default_factory=dict)
    files: Mapping[str, FilePart] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", _frozen(self.fields))
        object.__setattr__(self, "files", _frozen(self.files))

    def is_empty(self) -> bool:
        return not self.fields and not self.files

    def with_file(self, name: str, part: FilePart) -> "MultipartBody":
        return MultipartBody(fields=self.fields, files={**self.files, name: part})


Body = Union[MappingBody, TextBody, MultipartBody]
