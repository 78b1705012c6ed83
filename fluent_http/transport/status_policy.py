"""
fluent_http/transport/status_policy.py

WHAT THIS FILE IS FOR
---------------------
This module defines the *single canonical rule* deciding whether
HttpClient.send() returns a response normally or raises
StatusCodeError.

CONTRACT RULE
-------------
- No accepted set configured (None or empty) -> every status is accepted
- Accepted set configured                    -> status must be a member

4xx/5xx are NOT failures by default. Callers opt in to enforcement
per request with RequestBuilder.set_accepted_status_codes().

WHAT THIS FILE IS NOT FOR
-------------------------
This module MUST NOT:
- Inspect response bodies
- Log, raise, or retry

It performs **pure, deterministic mapping only**.
"""

from __future__ import annotations

from typing import AbstractSet, Optional


def is_accepted_status(
    status_code: int,
    accepted: Optional[AbstractSet[int]] = None,
) -> bool:
    if not accepted:
        return True
    return status_code in accepted
