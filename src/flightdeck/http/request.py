"""
=============================================================================
HTTP REQUEST
=============================================================================

Plain data carrier for one request cycle. The transport fills it in, the
router adds path parameters, flights and handlers read it.

=============================================================================
WHERE EACH FIELD COMES FROM
=============================================================================

    GET /user/alice?foo=bar          (PATH_INFO + QUERY_STRING)
    Cookie: session_id=4f1c...       (HTTP_COOKIE)

        method        "GET"
        path          "/user/alice"
        headers       Headers([("cookie", "session_id=4f1c...")])
        cookies       {"session_id": "4f1c..."}
        query_params  {"foo": "bar"}              ← transport
        path_params   {"username": "alice"}       ← router, on match
        params        {"foo": "bar",              ← merged view
                       "username": "alice"}
        form          {}                          ← urlencoded POST body
        body          b""

=============================================================================
PATH VS QUERY PARAMETERS
=============================================================================

The two are stored separately, so ``/user/:username?username=mallory``
cannot overwrite the bound segment. ``params`` merges them for handlers
that don't care where a value came from; a path parameter wins over a
query parameter of the same name.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Optional
from urllib.parse import parse_qsl

from .headers import Headers
from .cookies import parse_cookies


FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def parse_query(query: str) -> Dict[str, str]:
    """
    Decode a query string (or urlencoded form body) into a flat dict.

    ``+`` becomes a space, percent escapes are decoded, a key without ``=``
    maps to ``""``, and the last occurrence of a repeated key wins.

        >>> parse_query("a=1&b=hello+world&flag")
        {'a': '1', 'b': 'hello world', 'flag': ''}
    """
    if not query:
        return {}
    return dict(parse_qsl(query, keep_blank_values=True))


@dataclass
class Request:
    """
    One parsed request.

    Lives for one dispatch and is owned by it. Header names are matched
    case-insensitively through ``Headers``.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    cookies: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, str] = field(default_factory=dict)
    path_params: Dict[str, str] = field(default_factory=dict)
    form: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    remote_addr: str = ""
    query_string: str = ""

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        query_string: str = "",
        headers: Optional[Headers] = None,
        body: bytes = b"",
        remote_addr: str = "",
    ) -> "Request":
        """
        Assemble a Request from raw parts, decoding everything derivable.

        The transport uses this; tests do too, since it is far shorter than
        spelling out every field.

            Request.build("GET", "/user/alice", "foo=bar")
        """
        headers = headers or Headers()
        request = cls(
            method=method.upper(),
            path=path or "/",
            headers=headers,
            cookies=parse_cookies(headers.get("cookie")),
            query_params=parse_query(query_string),
            body=body,
            remote_addr=remote_addr,
            query_string=query_string or "",
        )
        if body and request.content_type == FORM_CONTENT_TYPE:
            request.form = parse_query(body.decode("utf-8", errors="replace"))
        return request

    @property
    def params(self) -> Dict[str, str]:
        """Query and path parameters in one dict; path parameters win."""
        merged = dict(self.query_params)
        merged.update(self.path_params)
        return merged

    @property
    def content_type(self) -> Optional[str]:
        """Content-Type without parameters, lowercased. ``None`` if absent."""
        ct = self.headers.get("content-type", "")
        return ct.split(";")[0].strip().lower() or None

    @property
    def content_length(self) -> int:
        try:
            return int(self.headers.get("content-length") or 0)
        except ValueError:
            return 0

    @property
    def is_form(self) -> bool:
        return self.content_type == FORM_CONTENT_TYPE

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

    def get_header(self, name: str, default: str = "") -> str:
        return self.headers.get(name, default)

    def get_param(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Look up ``name`` in ``params``."""
        return self.params.get(name, default)
