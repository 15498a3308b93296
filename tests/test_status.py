"""Tests for failure description and classification."""

import pytest

from dex_quoter.core.models import ErrorClassification
from dex_quoter.core.status import (
    HTTP_STATUS_DESCRIPTIONS,
    classify_failure,
    describe_failure,
    describe_http_status,
    format_failure_message,
    status_tag,
)


@pytest.mark.parametrize(
    ("code", "phrase"),
    [
        (301, "Moved Permanently"),
        (400, "Bad Request"),
        (401, "Unauthorized"),
        (403, "Forbidden"),
        (404, "Not Found"),
        (422, "Unprocessable Entity"),
        (429, "Too Many Requests"),
        (500, "Internal Server Error"),
        (502, "Bad Gateway"),
        (503, "Service Unavailable"),
        (504, "Gateway Timeout"),
    ],
)
def test_describe_known_status(code, phrase):
    """Test standard codes map to their reason phrase."""
    assert phrase in describe_http_status(code)


def test_describe_unknown_status():
    """Test unmapped codes fall back to a description of their status class."""
    assert describe_http_status(599) == "HTTP 599 - Server error"
    assert describe_http_status(418) == "HTTP 418 - Client error"
    assert describe_http_status(399) == "HTTP 399 - Redirect"
    assert describe_http_status(299) == "HTTP 299 - Unexpected success status"
    assert describe_http_status(999) == "HTTP 999 - Unexpected status"
    assert 599 not in HTTP_STATUS_DESCRIPTIONS
    assert 418 not in HTTP_STATUS_DESCRIPTIONS


def test_empty_2xx_body_is_a_parse_error():
    """Test any 2xx with an unreadable body is reported like the 200 case."""
    assert describe_failure(204, "parsererror") == "Parser Error (204)"
    assert status_tag(204) == "[ERROR 204]"
    assert classify_failure(204, "parsererror") == ErrorClassification.PARSE_ERROR
    assert format_failure_message("K", 204, "parsererror") == "K: [ERROR 204] Parser Error (204)"


def test_describe_failure_distinguishes_200_variants():
    """Test that a 200 with a broken body is not reported as success."""
    assert describe_failure(200, "parsererror") == "Parser Error (200)"
    assert describe_failure(200, "error") == "Transport Error (200)"
    assert describe_failure(200, None) == "Transport Error (200)"


def test_describe_failure_timeout_and_unknown():
    """Test timeouts and status-less failures."""
    assert describe_failure(0, "timeout") == "Request Timeout"
    assert describe_failure(None, "TIMEOUT") == "Request Timeout"
    assert describe_failure(0, "network error") == "Error: network error"
    assert describe_failure(None, None) == "Error: unknown"


def test_status_tag():
    """Test the bracketed tag in failure messages."""
    assert status_tag(404) == "[HTTP 404]"
    assert status_tag(200) == "[ERROR 200]"
    assert status_tag(0) == ""
    assert status_tag(None) == ""


def test_format_failure_message():
    """Test full failure messages."""
    assert format_failure_message("KYBER", 404, "error") == "KYBER: [HTTP 404] Not Found - Resource does not exist"
    assert format_failure_message("ODOS", 200, "parsererror") == "ODOS: [ERROR 200] Parser Error (200)"
    assert format_failure_message("0X", 0, "timeout") == "0X: Request Timeout"


def test_classify_failure():
    """Test the failure taxonomy."""
    assert classify_failure(0, "timeout") == ErrorClassification.TIMEOUT
    assert classify_failure(200, "parsererror") == ErrorClassification.PARSE_ERROR
    assert classify_failure(200, "error") == ErrorClassification.HTTP_ERROR
    assert classify_failure(429, "error") == ErrorClassification.HTTP_ERROR
    assert classify_failure(0, "network error") == ErrorClassification.HTTP_ERROR
