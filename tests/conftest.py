"""
pytest configuration and fixtures.
"""

import io
from typing import Callable, Dict, Optional
from urllib.parse import urlencode
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from flightdeck import AppConfig, Application
from flightdeck.context import RequestContext
from flightdeck.http import Request, Response
from flightdeck.http.headers import Headers
from flightdeck.sessions import SessionConfig, SessionStore
from flightdeck.transport import CGIProvider


@pytest.fixture
def session_dir(tmp_path: Path) -> Path:
    """Session directory that does not exist yet (save() must create it)."""
    return tmp_path / "sessions"


@pytest.fixture
def session_config(session_dir: Path) -> SessionConfig:
    return SessionConfig(session_dir=session_dir)


@pytest.fixture
def store(session_config: SessionConfig) -> SessionStore:
    return SessionStore(session_config)


@pytest.fixture
def context(store: SessionStore) -> RequestContext:
    return RequestContext(sessions=store)


@pytest.fixture
def make_request() -> Callable[..., Request]:
    """
    Request factory:

        make_request("GET", "/user/alice?foo=bar", cookies={"session_id": sid})
    """
    def factory(
        method: str = "GET",
        target: str = "/",
        headers: Optional[Dict[str, str]] = None,
        cookies: Optional[Dict[str, str]] = None,
        form: Optional[Dict[str, str]] = None,
    ) -> Request:
        path, _, query = target.partition("?")
        header_list = Headers()
        for name, value in (headers or {}).items():
            header_list.add(name, value)
        if cookies:
            header_list.add("cookie", "; ".join(f"{k}={v}" for k, v in cookies.items()))

        body = b""
        if form is not None:
            body = urlencode(form).encode()
            header_list.set("content-type", "application/x-www-form-urlencoded")
            header_list.set("content-length", str(len(body)))

        return Request.build(method, path, query, header_list, body)
    return factory


@pytest.fixture
def response() -> Response:
    return Response()


@pytest.fixture
def app_config(session_dir: Path) -> AppConfig:
    return AppConfig(session_dir=str(session_dir), log_level="WARNING")


@pytest.fixture
def app(app_config: AppConfig) -> Application:
    return Application(app_config)


def cgi_provider(environ: Dict[str, str], body: bytes = b"") -> CGIProvider:
    """CGIProvider over in-memory streams."""
    return CGIProvider(environ=environ, stdin=io.BytesIO(body), stdout=io.BytesIO())


@pytest.fixture
def make_provider() -> Callable[..., CGIProvider]:
    return cgi_provider
