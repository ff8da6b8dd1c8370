"""
Unit tests for the CGI transport.
"""

import io

import pytest

from flightdeck.errors import RequestError
from flightdeck.http.response import Response
from flightdeck.transport import (
    CGIProvider,
    build_request,
    parse_cgi_headers,
    read_body,
    send_response,
)
from flightdeck.transport.cgi import header_name


class TestHeaderNames:
    """Tests for CGI variable → header name mapping."""

    @pytest.mark.parametrize("env_key,expected", [
        ("HTTP_USER_AGENT", "user-agent"),
        ("HTTP_X_CSRF_TOKEN", "x-csrf-token"),
        ("HTTP_COOKIE", "cookie"),
        ("CONTENT_TYPE", "content-type"),
        ("CONTENT_LENGTH", "content-length"),
        ("PATH_INFO", None),
        ("REMOTE_ADDR", None),
        ("HTTP_", None),
    ])
    def test_mapping(self, env_key, expected):
        assert header_name(env_key) == expected

    def test_parse_cgi_headers(self, make_provider):
        provider = make_provider({
            "HTTP_HOST": "example.com",
            "HTTP_ACCEPT_LANGUAGE": "en",
            "CONTENT_TYPE": "text/plain",
            "SERVER_SOFTWARE": "Apache",
        })
        headers = parse_cgi_headers(provider)

        assert headers.get("Host") == "example.com"
        assert headers.get("accept-language") == "en"
        assert headers.get("content-type") == "text/plain"
        assert len(headers) == 3


class TestReadBody:
    """Tests for reading the request body from stdin."""

    def test_no_content_length(self, make_provider):
        assert read_body(make_provider({}, b"ignored"), 1024) == b""

    def test_reads_exactly_content_length(self, make_provider):
        provider = make_provider({"CONTENT_LENGTH": "5"}, b"hello world")
        assert read_body(provider, 1024) == b"hello"

    def test_short_stdin_keeps_what_arrived(self, make_provider):
        provider = make_provider({"CONTENT_LENGTH": "50"}, b"short")
        assert read_body(provider, 1024) == b"short"

    def test_invalid_length(self, make_provider):
        with pytest.raises(RequestError) as exc_info:
            read_body(make_provider({"CONTENT_LENGTH": "abc"}), 1024)
        assert exc_info.value.status_code == 400

        with pytest.raises(RequestError):
            read_body(make_provider({"CONTENT_LENGTH": "-1"}), 1024)

    def test_over_limit(self, make_provider):
        with pytest.raises(RequestError) as exc_info:
            read_body(make_provider({"CONTENT_LENGTH": "2048"}, b"x" * 2048), 1024)
        assert exc_info.value.status_code == 413


class TestBuildRequest:
    """Tests for build_request()."""

    def test_get_with_query_and_cookie(self, make_provider):
        provider = make_provider({
            "REQUEST_METHOD": "GET",
            "PATH_INFO": "/user/alice",
            "QUERY_STRING": "foo=bar",
            "HTTP_COOKIE": "session_id=abc; theme=dark",
            "REMOTE_ADDR": "203.0.113.7",
        })
        request = build_request(provider)

        assert request.method == "GET"
        assert request.path == "/user/alice"
        assert request.query_params == {"foo": "bar"}
        assert request.cookies == {"session_id": "abc", "theme": "dark"}
        assert request.remote_addr == "203.0.113.7"

    def test_defaults_when_environment_empty(self, make_provider):
        request = build_request(make_provider({}))

        assert request.method == "GET"
        assert request.path == "/"
        assert request.query_params == {}

    def test_form_post(self, make_provider):
        body = b"email=alice%40example.com&password=wonderland"
        provider = make_provider({
            "REQUEST_METHOD": "POST",
            "PATH_INFO": "/auth/login",
            "CONTENT_TYPE": "application/x-www-form-urlencoded",
            "CONTENT_LENGTH": str(len(body)),
        }, body)
        request = build_request(provider)

        assert request.form == {"email": "alice@example.com", "password": "wonderland"}
        assert request.body == body


class TestSendResponse:
    """Tests for send_response()."""

    def test_writes_cgi_framing(self, make_provider):
        provider = make_provider({})
        response = Response()
        response.write("About Page\n")

        send_response(provider, response)

        assert provider.stdout.getvalue() == response.to_cgi_bytes()
        assert provider.stdout.getvalue().startswith(b"Status: 200 OK\r\n")

    def test_finish_flushes(self):
        class Recorder(io.BytesIO):
            flushed = False

            def flush(self):
                self.flushed = True
                super().flush()

        out = Recorder()
        provider = CGIProvider(environ={}, stdin=io.BytesIO(), stdout=out)
        send_response(provider, Response())

        assert out.flushed is True

    def test_provider_defaults_to_process_environment(self, monkeypatch):
        monkeypatch.setenv("PATH_INFO", "/from-env")
        provider = CGIProvider(stdin=io.BytesIO(), stdout=io.BytesIO())

        assert provider.get_env("PATH_INFO") == "/from-env"
