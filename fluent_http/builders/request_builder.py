"""
fluent_http/builders/request_builder.py

WHAT THIS FILE IS FOR
---------------------
RequestBuilder accumulates method, URL, headers, body and transport
options through chained calls, then freezes them into a Request:

    request = (
        RequestBuilder()
        .set_method("post")
        .set_url("https://api.example.com/users")
        .set_bearer_auth(token)
        .set_json_body({"name": "John"})
        .set_timeout(5)
        .build()
    )

OWNERSHIP CONTRACT
------------------
A builder is a plain mutable object with NO locking:
- one owner, sequential calls
- never share an instance between threads

build() returns a snapshot. The builder keeps its state and can be
reused; later changes never reach requests already built.

HEADERS VS OPTIONS
------------------
Real HTTP semantics (auth, content type, cookies, user agent,
Connection) are headers. Transport behavior (timeout, retries, TLS
verification, proxy, redirects, accepted statuses, dry run, async)
is recorded in TransportOptions and is never sent to the server.

BODY RULES
----------
- set_body()                       -> MappingBody (replaces any body)
- set_json_body / set_xml_body /
  set_form_data                    -> TextBody    (replaces any body)
- add_file()                       -> MultipartBody; fields of a
                                      MappingBody are kept, a TextBody
                                      is discarded (last call wins)
"""

from __future__ import annotations

import base64
from typing import Any, Dict, Iterable, Mapping, Optional

import structlog

from fluent_http.messages.body import Body, FilePart, MappingBody, MultipartBody, TextBody
from fluent_http.messages.request import Request
from fluent_http.schemas.transport_options import TransportOptions
from fluent_http.utils.errors import EncodingError
from fluent_http.utils.json_codec import encode_json
from fluent_http.utils.query_string import append_query, build_query

logger = structlog.get_logger(__name__)


def _wire_header_value(key: str, value: str) -> str:
    # http.client writes header lines as latin-1
    try:
        value.encode("latin-1")
    except UnicodeEncodeError as exc:
        raise EncodingError(f"Header {key!r} has a value that cannot be sent as latin-1") from exc
    return value


class RequestBuilder:
    """
    Fluent, single-owner builder for Request values.

    Every setter mutates one field and returns the builder itself.
    Not safe for concurrent use.
    """

    def __init__(self) -> None:
        self._method: str = "GET"
        self._url: str = ""
        self._headers: Dict[str, str] = {}
        self._body: Body = MappingBody()
        self._options: TransportOptions = TransportOptions()

    # ------------------------------------------------------------------ #
    # Target
    # ------------------------------------------------------------------ #
    def set_method(self, method: str) -> "RequestBuilder":
        self._method = method.upper()
        return self

    def set_url(self, url: str) -> "RequestBuilder":
        self._url = url
        return self

    def add_query_params(self, params: Mapping[str, Any]) -> "RequestBuilder":
        """Append encoded params with "?" or "&"; existing params are left as-is."""
        self._url = append_query(self._url, params)
        return self

    # ------------------------------------------------------------------ #
    # Headers
    # ------------------------------------------------------------------ #
    def add_header(self, key: str, value: str) -> "RequestBuilder":
        """Raises EncodingError if `value` cannot go on the wire as latin-1."""
        self._headers[key] = _wire_header_value(key, value)
        return self

    def set_headers(self, headers: Mapping[str, str]) -> "RequestBuilder":
        self._headers = {key: _wire_header_value(key, value) for key, value in headers.items()}
        return self

    def add_custom_header(self, key: str, value: str) -> "RequestBuilder":
        return self.add_header(key, value)

    def set_content_type(self, content_type: str) -> "RequestBuilder":
        return self.add_header("Content-Type", content_type)

    def set_user_agent(self, user_agent: str) -> "RequestBuilder":
        return self.add_header("User-Agent", user_agent)

    def set_basic_auth(self, username: str, password: str) -> "RequestBuilder":
        credentials = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
        return self.add_header("Authorization", f"Basic {credentials}")

    def set_bearer_auth(self, token: str) -> "RequestBuilder":
        return self.add_header("Authorization", f"Bearer {token}")

    def add_cookie(self, name: str, value: str) -> "RequestBuilder":
        """Append `name=value` to the Cookie header."""
        cookie = f"{name}={value}"
        existing = self._headers.get("Cookie")
        return self.add_header("Cookie", f"{existing}; {cookie}" if existing else cookie)

    def set_cookies(self, cookies: Mapping[str, str]) -> "RequestBuilder":
        for name, value in cookies.items():
            self.add_cookie(name, value)
        return self

    def set_keep_alive(self, keep_alive: bool = True) -> "RequestBuilder":
        return self.add_header("Connection", "keep-alive" if keep_alive else "close")

    # ------------------------------------------------------------------ #
    # Body
    # ------------------------------------------------------------------ #
    def set_body(self, body: Mapping[str, Any]) -> "RequestBuilder":
        self._body = MappingBody(body)
        return self

    def set_json_body(self, data: Any) -> "RequestBuilder":
        """
        Serialize `data` as the JSON body.

        Raises EncodingError before touching any state, so a failed call
        leaves headers and body as they were.
        """
        text = encode_json(data)
        self.set_content_type("application/json")
        self._body = TextBody(text)
        return self

    def set_xml_body(self, xml: str) -> "RequestBuilder":
        self.set_content_type("application/xml")
        self._body = TextBody(xml)
        return self

    def set_form_data(self, data: Mapping[str, Any]) -> "RequestBuilder":
        self.set_content_type("application/x-www-form-urlencoded")
        self._body = TextBody(build_query(data))
        return self

    def add_file(
        self,
        field: str,
        file_path: str,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> "RequestBuilder":
        self.add_header("Content-Type", "multipart/form-data")
        part = FilePart(path=file_path, filename=filename, content_type=content_type)

        body = self._body
        if isinstance(body, MultipartBody):
            self._body = body.with_file(field, part)
        elif isinstance(body, MappingBody):
            self._body = MultipartBody(fields=body.fields, files={field: part})
        else:
            logger.warning("text_body_replaced_by_file", field=field)
            self._body = MultipartBody(files={field: part})
        return self

    # ------------------------------------------------------------------ #
    # Transport options (never sent as headers)
    # ------------------------------------------------------------------ #
    def _set_option(self, **changes: Any) -> "RequestBuilder":
        self._options = self._options.with_changes(**changes)
        return self

    def set_timeout(self, timeout: float) -> "RequestBuilder":
        return self._set_option(timeout_seconds=timeout)

    def set_retries(self, retries: int) -> "RequestBuilder":
        return self._set_option(retries=retries)

    def set_accepted_status_codes(self, status_codes: Iterable[int]) -> "RequestBuilder":
        return self._set_option(accepted_status_codes=frozenset(status_codes))

    def set_follow_redirects(self, follow_redirects: bool) -> "RequestBuilder":
        return self._set_option(follow_redirects=follow_redirects)

    def disable_ssl_verification(self) -> "RequestBuilder":
        return self._set_option(verify_tls=False)

    def set_proxy(self, proxy: str) -> "RequestBuilder":
        return self._set_option(proxy=proxy)

    def simulate_request(self, simulate: bool = True) -> "RequestBuilder":
        return self._set_option(simulate=simulate)

    def set_async_request(self) -> "RequestBuilder":
        return self._set_option(asynchronous=True)

    # ------------------------------------------------------------------ #
    # Terminal
    # ------------------------------------------------------------------ #
    def build(self) -> Request:
        request = Request.from_builder(
            self._method,
            self._url,
            self._headers,
            self._body,
            self._options,
        )
        logger.debug(
            "request_built",
            method=request.method,
            header_names=list(request.headers.keys()),
            body_kind=type(request.body).__name__,
        )
        return request
