# -------------------------------------------------------------------
# fluent_http/schemas/transport_options.py
#
# WHAT THIS FILE IS FOR
# --------------------
# This module defines the **per-request transport options** that a
# RequestBuilder records and HttpClient honors:
#
#   - timeout_seconds        read/connect timeout for the call
#   - retries                extra attempts after a transport failure
#   - verify_tls             TLS certificate verification
#   - proxy                  proxy URL for both http and https
#   - accepted_status_codes  opt-in set of statuses send() accepts
#   - follow_redirects       follow 3xx responses automatically
#   - simulate               dry run, no network activity
#   - asynchronous           caller asked for non-blocking dispatch
#
# KEY DESIGN DECISION
# -------------------
# These values travel on the Request as a typed model, NOT as HTTP
# headers. Nothing here is ever sent to the remote server.
#
# Every field except the two flags defaults to None, meaning
# "use the client's configured default" (see utils/settings.py).
#
# WHAT THIS FILE IS NOT FOR
# ------------------------
# This module does NOT:
# - Send requests
# - Hold headers or bodies
# - Read environment variables or YAML
#
# It strictly defines **option validation and typing**.
# -------------------------------------------------------------------

from __future__ import annotations

from typing import Any, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TransportOptions(BaseModel):
    """
    Transport options recorded by RequestBuilder.

    Immutable: use `with_changes()` to derive an updated copy.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "timeout_seconds": 5.0,
                "retries": 2,
                "verify_tls": True,
                "proxy": "http://proxy.example.com:8080",
                "accepted_status_codes": [200, 201],
                "follow_redirects": True,
            }
        },
    )

    timeout_seconds: Optional[float] = Field(
        None,
        gt=0,
        description="Timeout in seconds. None uses the client default.",
    )

    retries: Optional[int] = Field(
        None,
        ge=0,
        description="Extra attempts after a transport failure. HTTP statuses are never retried.",
    )

    verify_tls: Optional[bool] = Field(
        None,
        description="Verify TLS certificates. None uses the client default.",
    )

    proxy: Optional[str] = Field(
        None,
        min_length=1,
        description="Proxy URL applied to both http and https targets.",
    )

    accepted_status_codes: Optional[FrozenSet[int]] = Field(
        None,
        description=(
            "If set, send() raises StatusCodeError for any status outside this set. "
            "If omitted, every status is returned normally."
        ),
    )

    follow_redirects: Optional[bool] = Field(
        None,
        description="Follow redirects automatically. None uses the client default.",
    )

    simulate: bool = Field(
        False,
        description="Dry run: send() returns a synthetic response without network activity.",
    )

    asynchronous: bool = Field(
        False,
        description="Caller asked for non-blocking dispatch. send() still blocks.",
    )

    @field_validator("accepted_status_codes")
    @classmethod
    def _status_codes_in_range(cls, value: Optional[FrozenSet[int]]) -> Optional[FrozenSet[int]]:
        if value is None:
            return value
        bad = sorted(code for code in value if not 100 <= code <= 599)
        if bad:
            raise ValueError(f"Status codes must be between 100 and 599, got {bad}")
        return value

    def with_changes(self, **changes: Any) -> "TransportOptions":
        """Return a validated copy with `changes` applied."""
        return TransportOptions.model_validate({**self.model_dump(), **changes})
