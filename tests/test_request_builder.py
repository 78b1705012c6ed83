# tests/test_request_builder.py
from __future__ import annotations

import base64
import json

import pytest
from pydantic import ValidationError

from fluent_http.builders.request_builder import RequestBuilder
from fluent_http.messages.body import FilePart, MappingBody, MultipartBody, TextBody
from fluent_http.messages.request import Request
from fluent_http.utils.errors import EncodingError


def test_build_request_with_method_url_header_and_body() -> None:
    request = (
        RequestBuilder()
        .set_method("POST")
        .set_url("https://example.com")
        .add_header("Content-Type", "application/json")
        .set_body({"key": "value"})
        .build()
    )

    assert isinstance(request, Request)
    assert request.method == "POST"
    assert request.url == "https://example.com"
    assert request.headers == {"Content-Type": "application/json"}
    assert request.body == MappingBody({"key": "value"})


def test_defaults_are_get_empty_url_no_headers_empty_mapping_body() -> None:
    request = RequestBuilder().build()

    assert request.method == "GET"
    assert request.url == ""
    assert dict(request.headers) == {}
    assert isinstance(request.body, MappingBody)
    assert request.body.is_empty()


def test_set_method_normalizes_to_upper_case() -> None:
    assert RequestBuilder().set_method("post").build().method == "POST"
    assert RequestBuilder().set_method("Patch").build().method == "PATCH"


def test_every_setter_returns_the_same_builder() -> None:
    builder = RequestBuilder()

    assert builder.set_method("get") is builder
    assert builder.set_url("https://example.com") is builder
    assert builder.add_header("X-A", "1") is builder
    assert builder.add_custom_header("X-B", "2") is builder
    assert builder.set_user_agent("ua") is builder
    assert builder.set_bearer_auth("t") is builder
    assert builder.add_cookie("a", "1") is builder
    assert builder.set_keep_alive() is builder
    assert builder.set_timeout(3) is builder
    assert builder.set_retries(1) is builder
    assert builder.set_proxy("http://proxy:8080") is builder
    assert builder.disable_ssl_verification() is builder
    assert builder.set_follow_redirects(True) is builder
    assert builder.set_accepted_status_codes([200]) is builder
    assert builder.simulate_request() is builder
    assert builder.set_async_request() is builder
    assert builder.add_query_params({"q": "x"}) is builder
    assert builder.set_xml_body("<a/>") is builder


def test_add_header_twice_last_write_wins() -> None:
    request = RequestBuilder().add_header("X-Trace", "first").add_header("X-Trace", "second").build()
    assert request.headers["X-Trace"] == "second"


def test_header_keys_are_case_sensitive_as_stored() -> None:
    request = RequestBuilder().add_header("x-token", "a").add_header("X-Token", "b").build()
    assert request.headers == {"x-token": "a", "X-Token": "b"}


def test_set_headers_replaces_all_headers() -> None:
    request = (
        RequestBuilder()
        .add_header("X-Old", "1")
        .set_headers({"X-New": "2"})
        .build()
    )
    assert request.headers == {"X-New": "2"}


def test_header_value_outside_latin1_raises_and_keeps_state() -> None:
    builder = RequestBuilder().add_header("X-Old", "1")

    with pytest.raises(EncodingError):
        builder.set_bearer_auth("t\u20ack")
    with pytest.raises(EncodingError):
        builder.set_headers({"X-New": "ok", "X-Name": "\u5f20"})

    assert builder.build().headers == {"X-Old": "1"}
    # latin-1 text is still accepted
    assert builder.add_header("X-Name", "Zo\u00eb").build().headers["X-Name"] == "Zo\u00eb"


def test_add_query_params_uses_question_mark_then_ampersand() -> None:
    request = (
        RequestBuilder()
        .set_url("https://example.com/search")
        .add_query_params({"k": "v"})
        .add_query_params({"page": 2})
        .build()
    )
    assert request.url == "https://example.com/search?k=v&page=2"


def test_add_query_params_on_url_with_existing_query_appends_ampersand_without_dedupe() -> None:
    request = (
        RequestBuilder()
        .set_url("https://example.com/search?k=v")
        .add_query_params({"k": "w"})
        .build()
    )
    assert request.url == "https://example.com/search?k=v&k=w"


def test_set_basic_auth_sets_base64_authorization_header() -> None:
    request = RequestBuilder().set_basic_auth("user", "p@ss").build()

    expected = base64.b64encode(b"user:p@ss").decode("ascii")
    assert request.headers["Authorization"] == f"Basic {expected}"


def test_set_bearer_auth_sets_authorization_header() -> None:
    request = RequestBuilder().set_bearer_auth("abc.def").build()
    assert request.headers["Authorization"] == "Bearer abc.def"


def test_set_json_body_sets_content_type_and_serialized_body() -> None:
    data = {"name": "John", "age": 30}
    request = RequestBuilder().set_json_body(data).build()

    assert request.headers["Content-Type"] == "application/json"
    assert isinstance(request.body, TextBody)
    assert json.loads(request.body.text) == data


def test_set_json_body_leaves_unicode_and_slashes_unescaped() -> None:
    request = RequestBuilder().set_json_body({"city": "Zürich", "path": "/a/b"}).build()

    assert isinstance(request.body, TextBody)
    assert request.body.text == '{"city":"Zürich","path":"/a/b"}'


def test_set_json_body_with_unserializable_value_raises_and_keeps_state() -> None:
    builder = RequestBuilder().set_body({"keep": "me"})

    with pytest.raises(EncodingError):
        builder.set_json_body({"bad": object()})

    request = builder.build()
    assert "Content-Type" not in request.headers
    assert request.body == MappingBody({"keep": "me"})


def test_set_xml_body_keeps_text_exactly() -> None:
    xml = "<user><name>John</name><age>30</age></user>"
    request = RequestBuilder().set_xml_body(xml).build()

    assert request.headers["Content-Type"] == "application/xml"
    assert request.body == TextBody(xml)


def test_set_form_data_url_encodes_mapping() -> None:
    request = RequestBuilder().set_form_data({"username": "john", "password": "secret"}).build()

    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert request.body == TextBody("username=john&password=secret")


def test_add_file_sets_multipart_content_type_and_file_part() -> None:
    request = RequestBuilder().add_file("avatar", "/tmp/avatar.png").build()

    assert request.headers["Content-Type"] == "multipart/form-data"
    assert isinstance(request.body, MultipartBody)
    assert request.body.files["avatar"] == FilePart(path="/tmp/avatar.png")


def test_add_file_keeps_mapping_fields_and_accumulates_files() -> None:
    request = (
        RequestBuilder()
        .set_body({"title": "holiday"})
        .add_file("first", "/tmp/1.jpg")
        .add_file("second", "/tmp/2.jpg", filename="two.jpg", content_type="image/jpeg")
        .build()
    )

    assert isinstance(request.body, MultipartBody)
    assert dict(request.body.fields) == {"title": "holiday"}
    assert set(request.body.files) == {"first", "second"}
    assert request.body.files["second"].filename == "two.jpg"
    assert request.body.files["second"].content_type == "image/jpeg"


def test_add_file_after_text_body_discards_text() -> None:
    request = RequestBuilder().set_xml_body("<a/>").add_file("doc", "/tmp/doc.pdf").build()

    assert isinstance(request.body, MultipartBody)
    assert dict(request.body.fields) == {}
    assert "doc" in request.body.files


def test_text_body_after_add_file_replaces_multipart() -> None:
    request = RequestBuilder().add_file("doc", "/tmp/doc.pdf").set_json_body({"a": 1}).build()

    assert request.headers["Content-Type"] == "application/json"
    assert request.body == TextBody('{"a":1}')


def test_cookies_accumulate_in_single_header() -> None:
    request = RequestBuilder().set_cookies({"session": "abc", "theme": "dark"}).add_cookie("lang", "en").build()
    assert request.headers["Cookie"] == "session=abc; theme=dark; lang=en"


def test_keep_alive_is_a_real_connection_header() -> None:
    assert RequestBuilder().set_keep_alive().build().headers["Connection"] == "keep-alive"
    assert RequestBuilder().set_keep_alive(False).build().headers["Connection"] == "close"


def test_user_agent_and_content_type_headers() -> None:
    request = RequestBuilder().set_user_agent("my-app/1.0").set_content_type("text/plain").build()
    assert request.headers["User-Agent"] == "my-app/1.0"
    assert request.headers["Content-Type"] == "text/plain"


def test_transport_options_are_recorded_and_never_sent_as_headers() -> None:
    request = (
        RequestBuilder()
        .set_timeout(5)
        .set_retries(2)
        .set_accepted_status_codes([200, 201])
        .simulate_request()
        .disable_ssl_verification()
        .set_async_request()
        .set_proxy("http://proxy.example.com:8080")
        .set_follow_redirects(True)
        .build()
    )

    options = request.options
    assert options.timeout_seconds == 5
    assert options.retries == 2
    assert options.accepted_status_codes == frozenset({200, 201})
    assert options.simulate is True
    assert options.verify_tls is False
    assert options.asynchronous is True
    assert options.proxy == "http://proxy.example.com:8080"
    assert options.follow_redirects is True

    assert dict(request.headers) == {}


def test_simulate_request_false_clears_flag() -> None:
    request = RequestBuilder().simulate_request().simulate_request(False).build()
    assert request.options.simulate is False


@pytest.mark.parametrize(
    "configure",
    [
        lambda b: b.set_timeout(0),
        lambda b: b.set_retries(-1),
        lambda b: b.set_accepted_status_codes([200, 999]),
    ],
)
def test_invalid_option_values_raise_validation_error(configure) -> None:
    with pytest.raises(ValidationError):
        configure(RequestBuilder())


def test_build_returns_snapshot_and_builder_stays_reusable() -> None:
    builder = RequestBuilder().set_url("https://example.com").add_header("X-A", "1").set_body({"k": "v"})

    first = builder.build()
    builder.add_header("X-B", "2").set_body({"k": "changed"}).set_method("delete").set_timeout(9)
    second = builder.build()

    assert first.method == "GET"
    assert first.headers == {"X-A": "1"}
    assert first.body == MappingBody({"k": "v"})
    assert first.options.timeout_seconds is None

    assert second.method == "DELETE"
    assert second.headers == {"X-A": "1", "X-B": "2"}
    assert second.body == MappingBody({"k": "changed"})
    assert second.options.timeout_seconds == 9
