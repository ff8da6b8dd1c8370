"""
Unit tests for access logging.
"""

import json
import logging
import time

from flightdeck.config import AppConfig
from flightdeck.http.response import Response
from flightdeck.log import (
    ACCESS_LOGGER_NAME,
    RequestLog,
    log_request,
    new_request_id,
    setup_logging,
)


def sample_entry(**changes) -> RequestLog:
    values = dict(
        request_id="9b1f03c2",
        method="GET",
        path="/user/alice",
        query="foo=bar",
        client_ip="203.0.113.7",
        user_agent="curl/8.0",
        status_code=200,
        content_length=17,
        duration_ms=0.8449,
        timestamp="18/Oct/2026:10:14:03 +0000",
    )
    values.update(changes)
    return RequestLog(**values)


class TestRequestLog:
    """Tests for RequestLog formatting."""

    def test_to_text(self):
        assert sample_entry().to_text() == (
            '203.0.113.7 - - [18/Oct/2026:10:14:03 +0000] "GET /user/alice" 200 17 0.84ms'
        )

    def test_to_dict_rounds_duration(self):
        data = sample_entry().to_dict()

        assert data["duration_ms"] == 0.84
        assert data["query"] == "foo=bar"
        assert data["request_id"] == "9b1f03c2"

    def test_request_ids(self):
        first, second = new_request_id(), new_request_id()
        assert len(first) == 8
        assert first != second


class TestLogRequest:
    """Tests for log_request()."""

    def test_text_line(self, make_request, caplog):
        request = make_request("GET", "/about?x=1", headers={"User-Agent": "curl/8.0"})
        request.remote_addr = "198.51.100.2"
        response = Response()
        response.write("About Page\n")

        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER_NAME):
            entry = log_request(request, response, time.time(), request_id="abc")

        assert entry.request_id == "abc"
        assert entry.client_ip == "198.51.100.2"
        assert entry.user_agent == "curl/8.0"
        assert entry.query == "x=1"
        assert entry.content_length == 11
        assert caplog.records[-1].getMessage() == entry.to_text()

    def test_missing_client_fields_become_dash(self, make_request, caplog):
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER_NAME):
            entry = log_request(make_request(), Response(), time.time())

        assert entry.client_ip == "-"
        assert entry.user_agent == "-"

    def test_json_line(self, make_request, caplog):
        response = Response().set_status(404)

        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER_NAME):
            log_request(make_request("POST", "/x"), response, time.time(), log_format="json")

        data = json.loads(caplog.records[-1].getMessage())
        assert data["method"] == "POST"
        assert data["path"] == "/x"
        assert data["status_code"] == 404


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_sets_package_level(self):
        package_logger = logging.getLogger("flightdeck")
        try:
            setup_logging(AppConfig(log_level="ERROR"))
            assert package_logger.level == logging.ERROR

            setup_logging(AppConfig(log_level="debug"))
            assert package_logger.level == logging.DEBUG
        finally:
            package_logger.setLevel(logging.NOTSET)
