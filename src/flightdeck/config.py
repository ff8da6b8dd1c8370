"""
=============================================================================
APPLICATION CONFIGURATION
=============================================================================

One dataclass holding every knob the application reads at startup.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION SOURCES                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   Priority (highest to lowest):                                     │
    │                                                                     │
    │   1. Command-line arguments                                         │
    │      └── python -m flightdeck app:app --session-dir /var/sessions   │
    │                                                                     │
    │   2. Environment variables                                          │
    │      └── FLIGHTDECK_SESSION_DIR=/var/sessions                       │
    │                                                                     │
    │   3. Defaults in AppConfig                                          │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

A CGI program is started fresh for every request, so the environment is
the natural place for deployment settings: the web server's CGI
configuration (SetEnv, fastcgi_param, ...) passes them through.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, TypeVar

from .errors import ConfigError
from .sessions import SessionConfig


ENV_PREFIX = "FLIGHTDECK_"

LOG_FORMATS = ("text", "json")

T = TypeVar("T")


@dataclass
class AppConfig:
    """
    Configuration for an Application.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    SESSIONS
    - session_dir, session_cookie_name, session_max_age,
      session_cookie_path, session_cookie_secure

    REQUESTS
    - max_body_size

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # SESSIONS
    # ─────────────────────────────────────────────────────────────────────

    session_dir: str = "./sessions"
    """
    Directory holding one <id>.json file per session. Created on the
    first save. Must be writable by the CGI user.
    """

    session_cookie_name: str = "session_id"

    session_max_age: int = 86400
    """Max-Age of the session cookie in seconds (one day)."""

    session_cookie_path: str = "/"

    session_cookie_secure: bool = False
    """Add the Secure attribute. Turn on when the site is served over HTTPS."""

    # ─────────────────────────────────────────────────────────────────────
    # REQUESTS
    # ─────────────────────────────────────────────────────────────────────

    max_body_size: int = 1024 * 1024  # 1 MB
    """
    Largest request body read from stdin. A bigger CONTENT_LENGTH is
    answered with 413 before the body is read.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"

    log_format: str = "text"
    """Access log format: 'text' or 'json'."""

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "AppConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        FLIGHTDECK_SESSION_DIR      Session directory (default: ./sessions)
        FLIGHTDECK_COOKIE_NAME      Session cookie name (default: session_id)
        FLIGHTDECK_SESSION_MAX_AGE  Cookie Max-Age seconds (default: 86400)
        FLIGHTDECK_COOKIE_SECURE    "1"/"true"/"yes" adds Secure
        FLIGHTDECK_MAX_BODY_SIZE    Request body limit (default: 1048576)
        FLIGHTDECK_LOG_LEVEL        Logging level (default: INFO)
        FLIGHTDECK_LOG_FORMAT       text | json (default: text)

        =====================================================================

        Raises:
            ConfigError: a numeric variable is not an integer.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        def read(name: str, default: T, convert: Callable[[str], T]) -> T:
            raw = env.get(ENV_PREFIX + name)
            if raw is None or raw == "":
                return default
            try:
                return convert(raw)
            except ValueError:
                raise ConfigError(f"{ENV_PREFIX}{name}: invalid value {raw!r}") from None

        return cls(
            session_dir=read("SESSION_DIR", defaults.session_dir, str),
            session_cookie_name=read("COOKIE_NAME", defaults.session_cookie_name, str),
            session_max_age=read("SESSION_MAX_AGE", defaults.session_max_age, int),
            session_cookie_secure=read("COOKIE_SECURE", defaults.session_cookie_secure, _to_bool),
            max_body_size=read("MAX_BODY_SIZE", defaults.max_body_size, int),
            log_level=read("LOG_LEVEL", defaults.log_level, str).upper(),
            log_format=read("LOG_FORMAT", defaults.log_format, str).lower(),
        )

    def validate(self) -> None:
        """
        Check values at startup and fail fast.

        Raises:
            ConfigError: with a message naming the bad setting.
        """
        if not self.session_dir:
            raise ConfigError("session_dir must not be empty")

        if not self.session_cookie_name or any(c in self.session_cookie_name for c in ";=, \t"):
            raise ConfigError(f"Invalid session_cookie_name: {self.session_cookie_name!r}")

        if self.session_max_age < 0:
            raise ConfigError("session_max_age must be >= 0")

        if not self.session_cookie_path.startswith("/"):
            raise ConfigError("session_cookie_path must start with '/'")

        if self.max_body_size < 0:
            raise ConfigError("max_body_size must be >= 0")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigError(f"Unknown log_level: {self.log_level!r}")

        if self.log_format not in LOG_FORMATS:
            raise ConfigError(f"log_format must be one of {', '.join(LOG_FORMATS)}")

    def session_config(self) -> SessionConfig:
        """The SessionConfig handed to the application's SessionStore."""
        return SessionConfig(
            session_dir=Path(self.session_dir),
            cookie_name=self.session_cookie_name,
            max_age=self.session_max_age,
            cookie_path=self.session_cookie_path,
            secure=self.session_cookie_secure,
        )


def _to_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(value)
