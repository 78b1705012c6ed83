"""
fluent_http/transport/body_encoder.py

WHAT THIS FILE IS FOR
---------------------
Translate a Request body variant into the keyword arguments that
`requests.Session.request()` expects, and decide which headers go out
with it.

WIRE RULES
----------
- GET                -> no body, whatever the variant
- TextBody           -> data=<utf-8 bytes>, sent verbatim
- MappingBody        -> data=<form-encoded text> (utils/query_string.py)
- MultipartBody      -> data=<fields>, files=<opened file parts>
- empty body         -> nothing sent

A non-empty MappingBody without a caller-set Content-Type goes out with
"application/x-www-form-urlencoded", since requests adds none for
pre-encoded text.

For multipart bodies a bare "multipart/form-data" Content-Type (as set
by RequestBuilder.add_file) is dropped so the encoder can emit the
header with its boundary.

File parts are opened inside the caller's ExitStack and closed when the
stack unwinds, on success or failure.
"""

from __future__ import annotations

import mimetypes
import os
from contextlib import ExitStack
from typing import Any, Dict, Mapping

from fluent_http.messages.body import Body, FilePart, MappingBody, MultipartBody, TextBody
from fluent_http.utils.query_string import build_query, flatten_params

CONTENT_TYPE = "content-type"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def outgoing_headers(method: str, headers: Mapping[str, str], body: Body) -> Dict[str, str]:
    """Headers to put on the wire for this method/body combination."""
    out = dict(headers)
    if method != "GET" and isinstance(body, MultipartBody) and not body.is_empty():
        for name in [n for n in out if n.lower() == CONTENT_TYPE]:
            if out[name].strip().lower().startswith("multipart/form-data") and "boundary=" not in out[name]:
                del out[name]
    elif method != "GET" and isinstance(body, MappingBody) and not body.is_empty():
        if not any(n.lower() == CONTENT_TYPE for n in out):
            out["Content-Type"] = FORM_CONTENT_TYPE
    return out


def _open_part(part: FilePart, stack: ExitStack) -> tuple:
    handle = stack.enter_context(open(part.path, "rb"))
    filename = part.filename or os.path.basename(part.path)
    content_type = part.content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"
    return (filename, handle, content_type)


def body_kwargs(method: str, body: Body, stack: ExitStack) -> Dict[str, Any]:
    """
    Keyword arguments for requests carrying `body`.

    Raises OSError if a file part cannot be opened.
    """
    if method == "GET" or body.is_empty():
        return {}

    if isinstance(body, TextBody):
        return {"data": body.text.encode("utf-8")}

    if isinstance(body, MappingBody):
        return {"data": build_query(body.fields)}

    if isinstance(body, MultipartBody):
        files = {name: _open_part(part, stack) for name, part in body.files.items()}
        kwargs: Dict[str, Any] = {"data": flatten_params(body.fields)}
        if files:
            kwargs["files"] = files
        else:
            # requests only emits multipart when files are present
            kwargs["files"] = {name: (None, value) for name, value in kwargs.pop("data")}
        return kwargs

    raise TypeError(f"Unsupported body type: {type(body).__name__}")
