"""Tests for HTTP status classification."""

import pytest

from kushrouter.errors import (
    AuthenticationError,
    ErrorKind,
    InsufficientCreditsError,
    KushRouterError,
    RateLimitError,
    classify,
)

BODIES = [
    None,
    {},
    "not a dict",
    {"error": "plain string"},
    {"error": {"message": "custom", "type": "provider_type"}},
]


@pytest.mark.parametrize("body", BODIES)
@pytest.mark.parametrize(
    "status,kind,cls",
    [
        (401, ErrorKind.AUTHENTICATION, AuthenticationError),
        (402, ErrorKind.INSUFFICIENT_CREDITS, InsufficientCreditsError),
        (429, ErrorKind.RATE_LIMIT, RateLimitError),
    ],
)
def test_fixed_statuses_ignore_body(status, kind, cls, body):
    err = classify(status, body)
    assert err.kind == kind
    assert isinstance(err, cls)
    assert err.status == status


@pytest.mark.parametrize("status", [400, 403, 404, 408, 422, 500, 502, 503])
def test_other_statuses_are_generic(status):
    err = classify(status, {})
    assert err.kind == ErrorKind.GENERIC
    assert type(err) is KushRouterError
    assert err.status == status
    assert err.message == f"HTTP {status}"


def test_default_messages():
    assert classify(401, {}).message == "Invalid API key"
    assert classify(402, {}).message == "Insufficient credits"
    assert classify(429, {}).message == "Rate limit exceeded"


def test_nested_message_and_type():
    err = classify(500, {"error": {"message": "upstream exploded", "type": "server_error"}})
    assert err.message == "upstream exploded"
    assert err.code == "server_error"


def test_code_omitted_without_type():
    assert classify(401, {}).code is None
    assert classify(503, {"error": {"message": "down"}}).code is None


def test_insufficient_credits_details():
    details = {"balance": 0, "top_up_url": "https://kushrouter.com/billing"}
    err = classify(402, {"error": {"message": "Out of credits", "details": details}})
    assert err.message == "Out of credits"
    assert err.details == details


def test_plain_string_error_body():
    err = classify(400, {"error": "bad model"})
    assert err.message == "bad model"


def test_retryable_by_kind():
    assert not classify(401).retryable
    assert not classify(402).retryable
    assert classify(429).retryable
    assert classify(500).retryable
