"""
Transports move a request in and a response out. Only CGI ships.
"""

from .cgi import (
    CGIProvider,
    TransportProvider,
    build_request,
    parse_cgi_headers,
    read_body,
    send_response,
)

__all__ = [
    "CGIProvider",
    "TransportProvider",
    "build_request",
    "parse_cgi_headers",
    "read_body",
    "send_response",
]
