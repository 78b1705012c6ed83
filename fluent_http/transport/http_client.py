"""
fluent_http/transport/http_client.py

WHAT THIS FILE IS FOR
---------------------
This module executes one Request synchronously and returns a Response.

It exists to:
- Put method, URL, headers and body on the wire (via `requests`)
- Honor the transport options recorded on the Request
- Map transport-level failure into a single TransportError
- Wrap the status code, decoded text and headers into an immutable Response

CALL FLOW
---------
RequestBuilder.build()
  → HttpClient.send(request)
      → requests.Session (opened and closed inside this call)
          → Response

WHAT THIS FILE IS NOT FOR
-------------------------
This module is NOT responsible for:
- Building headers or bodies (see builders/request_builder.py)
- Decoding response JSON (see messages/response.py)
- Connection pooling across calls
- Backoff between retries

ERROR HANDLING RULES
--------------------
- Connection / DNS / TLS / timeout failures → TransportError
- Unreadable file parts                     → TransportError
- Header values that are not latin-1        → EncodingError
- HTTP status >= 400                        → returned normally
- Status outside an explicitly accepted set → StatusCodeError

Only transport failures are retried, and only as many times as the
request (or Settings.max_retries) asks. Default is zero.

CONCURRENCY
-----------
HttpClient keeps no per-call state. Each send() owns its own session,
so one client may be shared across threads.
"""

from __future__ import annotations

from contextlib import ExitStack
from typing import Any, Dict, Optional

import requests
import structlog

from fluent_http.messages.request import Request
from fluent_http.messages.response import Response
from fluent_http.transport.body_encoder import body_kwargs, outgoing_headers
from fluent_http.transport.status_policy import is_accepted_status
from fluent_http.utils.errors import EncodingError, StatusCodeError, TransportError
from fluent_http.utils.settings import Settings, get_settings

logger = structlog.get_logger(__name__)


class HttpClient:
    """
    Minimal synchronous HTTP client.

    PURPOSE
    -------
    A thin layer over `requests` that sends fully built Request values.

    It intentionally:
    - Does NOT pool connections between calls
    - Does NOT treat 4xx/5xx as errors unless asked to
    - Does NOT interpret response payloads

    OPTION RESOLUTION
    -----------------
    Every option left unset on the Request falls back to Settings:

        timeout_seconds   -> settings.default_timeout_seconds
        retries           -> settings.max_retries
        verify_tls        -> settings.verify_tls
        proxy             -> settings.proxy
        follow_redirects  -> settings.follow_redirects
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def send(self, request: Request) -> Response:
        """
        Send `request` and return the server's response.

        Raises:
            TransportError:
                No HTTP response was obtained (after any retries).
            StatusCodeError:
                accepted_status_codes was set and the status is not in it.
            EncodingError:
                A header value cannot be encoded for the wire. Not retried.
        """
        options = request.options
        ctx = {"method": request.method, "url": request.url}

        if options.simulate:
            logger.info("http_request_simulated", **ctx)
            return Response(self.settings.simulated_status_code, "")

        if options.asynchronous:
            logger.warning("http_request_async_not_supported", **ctx)

        retries = options.retries if options.retries is not None else self.settings.max_retries

        attempt = 0
        while True:
            attempt += 1
            try:
                return self._checked(request, self._send_once(request), ctx)
            except TransportError as exc:
                logger.warning(
                    "http_request_attempt_failed",
                    attempt=attempt,
                    retries=retries,
                    error=exc.reason,
                    **ctx,
                )
                if attempt >= retries + 1:
                    logger.error(
                        "http_request_exhausted_retries",
                        attempts=attempt,
                        error=exc.reason,
                        **ctx,
                    )
                    raise

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _checked(self, request: Request, response: Response, ctx: Dict[str, Any]) -> Response:
        logger.info("http_request_sent", status_code=response.status_code, **ctx)

        accepted = request.options.accepted_status_codes
        if not is_accepted_status(response.status_code, accepted):
            logger.warning(
                "http_status_not_accepted",
                status_code=response.status_code,
                accepted=sorted(accepted or ()),
                **ctx,
            )
            raise StatusCodeError(response, accepted or frozenset())

        return response

    def _transport_kwargs(self, request: Request) -> Dict[str, Any]:
        options = request.options
        settings = self.settings

        proxy = options.proxy if options.proxy is not None else settings.proxy
        kwargs: Dict[str, Any] = {
            "timeout": options.timeout_seconds if options.timeout_seconds is not None else settings.default_timeout_seconds,
            "verify": options.verify_tls if options.verify_tls is not None else settings.verify_tls,
            "allow_redirects": (
                options.follow_redirects if options.follow_redirects is not None else settings.follow_redirects
            ),
        }
        if proxy:
            kwargs["proxies"] = {"http": proxy, "https": proxy}
        return kwargs

    def _send_once(self, request: Request) -> Response:
        """One network round-trip on a session scoped to this call."""
        try:
            with ExitStack() as stack:
                session = stack.enter_context(requests.Session())
                resp = session.request(
                    request.method,
                    request.url,
                    headers=outgoing_headers(request.method, request.headers, request.body),
                    **body_kwargs(request.method, request.body, stack),
                    **self._transport_kwargs(request),
                )
                return Response(resp.status_code, decode_body(resp), resp.headers)
        except UnicodeEncodeError as exc:
            # http.client puts header lines on the wire as latin-1
            raise EncodingError(f"Header value cannot be sent as latin-1: {exc}") from exc
        except (requests.RequestException, OSError) as exc:
            raise TransportError(str(exc), method=request.method, url=request.url) from exc


def decode_body(resp: requests.Response) -> str:
    """
    Response text: the charset the server declared, else UTF-8.

    `resp.text` is avoided because requests assumes ISO-8859-1 for any
    text/* reply without a charset. Undecodable bytes become U+FFFD.
    """
    encoding = "utf-8"
    if "charset=" in resp.headers.get("Content-Type", "").lower():
        encoding = requests.utils.get_encoding_from_headers(resp.headers) or encoding
    try:
        return resp.content.decode(encoding, errors="replace")
    except LookupError:
        return resp.content.decode("utf-8", errors="replace")
