"""
Unit tests for the Response model and its CGI serialization.
"""

import json

import pytest

from flightdeck.http.cookies import SetCookie
from flightdeck.http.response import (
    Response,
    forbidden,
    internal_error,
    not_found,
    unauthorized,
    write_error,
)
from flightdeck.http.status_codes import HTTPStatus


class TestResponse:
    """Tests for building a response."""

    def test_defaults(self):
        response = Response()
        assert response.status == HTTPStatus.OK
        assert response.content_type == "text/plain; charset=utf-8"
        assert response.body == b""

    def test_write_appends_text_and_bytes(self):
        response = Response()
        assert response.write("héllo ") == len("héllo ".encode("utf-8"))
        response.write(b"world")

        assert response.text == "héllo world"

    def test_html_and_json(self):
        response = Response().html("<p>hi</p>")
        assert response.content_type == "text/html; charset=utf-8"

        response = Response().json({"ok": True})
        assert response.content_type == "application/json"
        assert json.loads(response.text) == {"ok": True}

    def test_redirect_defaults_to_307(self):
        response = Response()
        response.redirect("/about")

        assert response.status == HTTPStatus.TEMPORARY_REDIRECT
        assert response.headers.get("location") == "/about"

    def test_redirect_replaces_location(self):
        response = Response()
        response.redirect("/a").redirect("/b", HTTPStatus.FOUND)

        assert response.headers.get_all("Location") == ["/b"]
        assert response.status == 302

    def test_set_header_appends(self):
        response = Response()
        response.set_header("X-A", "1").set_header("X-A", "2")
        assert response.headers.get_all("x-a") == ["1", "2"]

    def test_multiple_cookies(self):
        response = Response()
        response.set_cookie(SetCookie("a", "1"))
        response.set_cookie(SetCookie("b", "2"))

        assert len(response.headers.get_all("Set-Cookie")) == 2

    def test_set_status_accepts_int(self):
        response = Response().set_status(404)
        assert response.status is HTTPStatus.NOT_FOUND

    def test_set_status_outside_enum_kept_as_int(self):
        response = Response().set_status(410)
        assert response.status == 410

    def test_set_status_out_of_range(self):
        with pytest.raises(ValueError):
            Response().set_status(42)


class TestCgiSerialization:
    """Tests for to_cgi_bytes()."""

    def test_framing(self):
        response = Response()
        response.set_header("X-Trace", "abc")
        response.write("About Page\n")

        assert response.to_cgi_bytes() == (
            b"Status: 200 OK\r\n"
            b"X-Trace: abc\r\n"
            b"Content-Type: text/plain; charset=utf-8\r\n"
            b"Content-Length: 11\r\n"
            b"\r\n"
            b"About Page\n"
        )

    def test_redirect_framing(self):
        response = Response()
        response.redirect("/dashboard", HTTPStatus.FOUND)
        raw = response.to_cgi_bytes()

        assert raw.startswith(b"Status: 302 Found\r\nLocation: /dashboard\r\n")
        assert raw.endswith(b"Content-Length: 0\r\n\r\n")

    def test_plain_int_status(self):
        response = Response()
        response.status = 201

        assert response.to_cgi_bytes().startswith(b"Status: 201 Created\r\n")

    def test_status_missing_from_enum(self):
        response = Response()
        response.status = 418

        assert response.to_cgi_bytes().startswith(b"Status: 418 Unknown\r\n")

    def test_content_headers_not_duplicated(self):
        response = Response()
        response.set_header("Content-Type", "text/html")
        response.set_header("Content-Length", "999")
        response.write("x")
        head = response.to_cgi_bytes().split(b"\r\n\r\n")[0]

        assert head.count(b"Content-Type") == 1
        assert b"Content-Length: 1" in head


class TestErrorWriters:
    """Tests for the convenience error writers."""

    def test_not_found_message(self):
        response = Response()
        response.write("partial")
        not_found(response, "/missing")

        assert response.status == 404
        assert response.text == "404 Not Found: /missing"

    def test_status_writers(self):
        assert unauthorized(Response()).status == 401
        assert forbidden(Response()).status == 403
        assert internal_error(Response()).text == "Internal Server Error"

    def test_write_error_uses_phrase_by_default(self):
        response = write_error(Response(), HTTPStatus.PAYLOAD_TOO_LARGE)
        assert response.text == "Payload Too Large"

    def test_write_error_with_unlisted_code(self):
        response = write_error(Response(), 451)
        assert response.status == 451
        assert response.text == "Unknown"
