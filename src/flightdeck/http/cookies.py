"""
=============================================================================
COOKIES
=============================================================================

Both directions of the cookie exchange:

    Browser → us:   Cookie: session_id=4f1c...; theme=dark
                    └──────── parse_cookies() → {"session_id": "4f1c...",
                                                  "theme": "dark"}

    Us → browser:   Set-Cookie: session_id=4f1c...; Max-Age=86400; Path=/;
                                HttpOnly; SameSite=Lax
                    └──────── SetCookie(...).to_header_value()

=============================================================================
"""

from dataclasses import dataclass
from typing import Dict, Optional


def parse_cookies(header: Optional[str]) -> Dict[str, str]:
    """
    Parse a ``Cookie`` header value into a name → value dict.

    Pairs without ``=`` are skipped. When a name repeats, the last
    occurrence wins. Names are case-sensitive.
    """
    if not header:
        return {}

    cookies: Dict[str, str] = {}
    for pair in header.split(";"):
        pair = pair.strip()
        if "=" not in pair:
            continue
        name, _, value = pair.partition("=")
        name = name.strip()
        if name:
            cookies[name] = value.strip()
    return cookies


@dataclass(frozen=True)
class SetCookie:
    """A ``Set-Cookie`` directive to attach to a Response."""

    name: str
    value: str
    max_age: Optional[int] = None
    path: Optional[str] = "/"
    domain: Optional[str] = None
    secure: bool = False
    httponly: bool = True
    samesite: Optional[str] = "Lax"

    def to_header_value(self) -> str:
        parts = [f"{self.name}={self.value}"]
        if self.path:
            parts.append(f"Path={self.path}")
        if self.domain:
            parts.append(f"Domain={self.domain}")
        if self.httponly:
            parts.append("HttpOnly")
        if self.secure:
            parts.append("Secure")
        if self.samesite:
            parts.append(f"SameSite={self.samesite}")
        if self.max_age is not None:
            parts.append(f"Max-Age={self.max_age}")
        return "; ".join(parts)

    def expired(self) -> "SetCookie":
        """Copy of this cookie that tells the browser to drop it."""
        return SetCookie(
            name=self.name,
            value="",
            max_age=0,
            path=self.path,
            domain=self.domain,
            secure=self.secure,
            httponly=self.httponly,
            samesite=self.samesite,
        )
