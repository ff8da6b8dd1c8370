"""
=============================================================================
LOGGING
=============================================================================

Two pieces:

    setup_logging(config)    root logger → stderr, level from AppConfig
    log_request(...)         one access line per request on
                             the "flightdeck.access" logger

=============================================================================
WHY STDERR?
=============================================================================

Under CGI, stdout IS the HTTP response. Anything printed there ends up in
front of the Status line and corrupts it. Web servers collect a CGI
program's stderr into their error log, so that is where log records go.

=============================================================================
ACCESS LOG FORMATS
=============================================================================

    text:
    203.0.113.7 - - [18/Oct/2026:10:14:03 +0000] "GET /user/alice" 200 17 0.84ms

    json:
    {"request_id": "9b1f03c2", "method": "GET", "path": "/user/alice", ...}

The access logger can be routed separately:

    logging.getLogger("flightdeck.access").addHandler(file_handler)

=============================================================================
"""

import json
import logging
import sys
import time
import uuid
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Optional

from .http.request import Request
from .http.response import Response

if TYPE_CHECKING:
    from .config import AppConfig


ACCESS_LOGGER_NAME = "flightdeck.access"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

access_logger = logging.getLogger(ACCESS_LOGGER_NAME)


@dataclass
class RequestLog:
    """
    Structured access-log entry for one request.

    request_id:     short random id, ties the access line to error records
    query:          raw query string as the gateway passed it
    client_ip:      REMOTE_ADDR, "-" when the gateway didn't set it
    duration_ms:    time spent in dispatch
    """

    request_id: str
    method: str
    path: str
    query: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        data = asdict(self)
        data["duration_ms"] = round(self.duration_ms, 2)
        return data

    def to_text(self) -> str:
        """Apache-style line."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def log_request(
    request: Request,
    response: Response,
    started: float,
    log_format: str = "text",
    request_id: Optional[str] = None,
) -> RequestLog:
    """
    Emit the access line for a finished request and return the entry.

    Args:
        started: ``time.time()`` taken when dispatch began.
    """
    entry = RequestLog(
        request_id=request_id or new_request_id(),
        method=request.method,
        path=request.path,
        query=request.query_string,
        client_ip=request.remote_addr or "-",
        user_agent=request.user_agent or "-",
        status_code=int(response.status),
        content_length=len(response.buffer),
        duration_ms=(time.time() - started) * 1000,
        timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
    )

    if log_format == "json":
        access_logger.info(json.dumps(entry.to_dict()))
    else:
        access_logger.info(entry.to_text())
    return entry


def setup_logging(config: "AppConfig") -> None:
    """Configure the root logger from ``config``. Output goes to stderr."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stderr,
    )

    logging.getLogger("flightdeck").setLevel(level)
