"""Unit tests for signing requests on behalf of an X-User-Id identity."""
import time

import pytest

from app.auth.hmac_auth import (
    TIMESTAMP_TOLERANCE_SECONDS,
    sign_request,
    signed_headers,
    verify_request_signature,
)


SECRET = "test-secret"
OWNER = "user-1"
ADMIN = "admin-1"


def _verify(headers: dict, user_id: str, secret: str = SECRET) -> bool:
    return verify_request_signature(
        secret,
        user_id,
        headers["X-Request-Timestamp"],
        headers["X-Nonce"],
        headers["X-Signature"],
    )


def test_signed_headers_carry_identity_and_verify():
    headers = signed_headers(SECRET, OWNER)
    assert headers["X-User-Id"] == OWNER
    assert _verify(headers, OWNER) is True


def test_signature_is_bound_to_user_id():
    """Headers signed for an owner cannot be replayed as an admin."""
    headers = signed_headers(SECRET, OWNER)
    assert _verify(headers, ADMIN) is False


def test_signature_differs_per_user():
    ts, nonce = "1700000000", "nonce-1"
    assert sign_request(SECRET, OWNER, ts, nonce) != sign_request(SECRET, ADMIN, ts, nonce)


def test_deployment_secret_required():
    headers = signed_headers("other-deployment", OWNER)
    assert _verify(headers, OWNER) is False


def test_each_call_uses_a_fresh_nonce():
    first = signed_headers(SECRET, OWNER, now=1_700_000_000)
    second = signed_headers(SECRET, OWNER, now=1_700_000_000)
    assert first["X-Request-Timestamp"] == "1700000000"
    assert first["X-Nonce"] != second["X-Nonce"]
    assert first["X-Signature"] != second["X-Signature"]


def test_stale_headers_rejected():
    stale = int(time.time()) - TIMESTAMP_TOLERANCE_SECONDS - 1
    assert _verify(signed_headers(SECRET, OWNER, now=stale), OWNER) is False


def test_tampered_signature_rejected():
    headers = signed_headers(SECRET, OWNER)
    headers["X-Signature"] = "0" * 64
    assert _verify(headers, OWNER) is False


@pytest.mark.parametrize(
    "timestamp,nonce,signature",
    [
        (None, "nonce", "sig"),
        ("123", None, "sig"),
        ("123", "nonce", None),
        ("not-a-number", "nonce", "sig"),
    ],
)
def test_incomplete_headers_rejected(timestamp, nonce, signature):
    assert verify_request_signature(SECRET, OWNER, timestamp, nonce, signature) is False
