"""
fluent_http/utils/query_string.py

WHAT THIS FILE IS FOR
---------------------
URL-encoding of key/value data, used for:
- query strings appended by RequestBuilder.add_query_params()
- form bodies produced by RequestBuilder.set_form_data()
- mapping bodies sent by HttpClient for non-GET requests

ENCODING RULES
--------------
Matches the widely deployed `http_build_query` convention so servers
that parse bracketed keys see the structure they expect:

- nested mappings      {"a": {"b": 1}}   -> a%5Bb%5D=1
- sequences            {"a": [1, 2]}     -> a%5B0%5D=1&a%5B1%5D=2
- booleans             True / False      -> 1 / 0
- None values          skipped entirely
- spaces               "+" (application/x-www-form-urlencoded)

Pure functions only. No I/O, no logging.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Sequence, Tuple
from urllib.parse import quote_plus


def _scalar(value: Any) -> str:
    if value is True:
        return "1"
    if value is False:
        return "0"
    return str(value)


def _flatten(prefix: str, value: Any, out: List[Tuple[str, str]]) -> None:
    if value is None:
        return

    if isinstance(value, Mapping):
        for key, inner in value.items():
            _flatten(f"{prefix}[{key}]", inner, out)
        return

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        for index, inner in enumerate(value):
            _flatten(f"{prefix}[{index}]", inner, out)
        return

    out.append((prefix, _scalar(value)))


def flatten_params(params: Mapping[str, Any]) -> List[Tuple[str, str]]:
    """Flatten nested params into ordered (key, value) string pairs."""
    pairs: List[Tuple[str, str]] = []
    for key, value in params.items():
        _flatten(str(key), value, pairs)
    return pairs


def encode_pairs(pairs: Iterable[Tuple[str, str]]) -> str:
    return "&".join(f"{quote_plus(k)}={quote_plus(v)}" for k, v in pairs)


def build_query(params: Mapping[str, Any]) -> str:
    """
    Encode `params` as an application/x-www-form-urlencoded string.

    Example:
        build_query({"q": "a b", "tags": ["x", "y"]})
        -> "q=a+b&tags%5B0%5D=x&tags%5B1%5D=y"
    """
    return encode_pairs(flatten_params(params))


def append_query(url: str, params: Mapping[str, Any]) -> str:
    """
    Append encoded params to `url`.

    Uses "?" when the URL has no query string yet, "&" otherwise.
    Existing parameters are neither merged nor deduplicated.
    """
    separator = "&" if "?" in url else "?"
    return url + separator + build_query(params)
