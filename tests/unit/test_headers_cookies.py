"""
Unit tests for header lists and cookies.
"""

from flightdeck.http.cookies import SetCookie, parse_cookies
from flightdeck.http.headers import Headers


class TestHeaders:
    """Tests for the ordered multi-valued header list."""

    def test_get_is_case_insensitive(self):
        headers = Headers([("Content-Type", "text/html")])
        assert headers.get("content-type") == "text/html"
        assert headers.get("CONTENT-TYPE") == "text/html"
        assert "content-type" in headers

    def test_get_missing_returns_default(self):
        headers = Headers()
        assert headers.get("x-missing") is None
        assert headers.get("x-missing", "fallback") == "fallback"
        assert "x-missing" not in headers

    def test_add_keeps_duplicates_in_order(self):
        headers = Headers()
        headers.add("Set-Cookie", "a=1").add("Set-Cookie", "b=2")

        assert headers.get("set-cookie") == "a=1"
        assert headers.get_all("Set-Cookie") == ["a=1", "b=2"]
        assert len(headers) == 2

    def test_set_replaces_all_values(self):
        headers = Headers([("Location", "/a"), ("location", "/b"), ("X-Other", "1")])
        headers.set("Location", "/c")

        assert headers.get_all("location") == ["/c"]
        assert list(headers) == [("X-Other", "1"), ("Location", "/c")]

    def test_remove(self):
        headers = Headers([("A", "1"), ("B", "2"), ("a", "3")])
        headers.remove("a")
        assert headers.items() == [("B", "2")]

    def test_equality(self):
        assert Headers([("A", "1")]) == Headers([("A", "1")])
        assert Headers([("A", "1")]) != Headers([("A", "2")])


class TestParseCookies:
    """Tests for Cookie header parsing."""

    def test_basic_pairs(self):
        assert parse_cookies("session_id=abc; theme=dark") == {
            "session_id": "abc",
            "theme": "dark",
        }

    def test_empty_and_missing(self):
        assert parse_cookies(None) == {}
        assert parse_cookies("") == {}

    def test_pairs_without_equals_skipped(self):
        assert parse_cookies("flag; a=1;;") == {"a": "1"}

    def test_last_duplicate_wins(self):
        assert parse_cookies("a=1; a=2") == {"a": "2"}

    def test_value_may_contain_equals(self):
        assert parse_cookies("token=abc==") == {"token": "abc=="}


class TestSetCookie:
    """Tests for Set-Cookie serialization."""

    def test_session_cookie_attributes(self):
        cookie = SetCookie("session_id", "abc", max_age=86400)
        assert cookie.to_header_value() == (
            "session_id=abc; Path=/; HttpOnly; SameSite=Lax; Max-Age=86400"
        )

    def test_secure_and_domain(self):
        cookie = SetCookie("a", "1", domain="example.com", secure=True, samesite=None)
        assert cookie.to_header_value() == "a=1; Path=/; Domain=example.com; HttpOnly; Secure"

    def test_expired_copy(self):
        cookie = SetCookie("session_id", "abc", max_age=86400)
        expired = cookie.expired()

        assert expired.value == ""
        assert expired.max_age == 0
        assert expired.to_header_value().endswith("Max-Age=0")
        assert cookie.value == "abc"
