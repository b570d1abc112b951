"""HMAC-SHA256 request signing for callers that identify with X-User-Id.

The signed message is ``"{timestamp}:{nonce}:{user_id}"``. A signed request carries:

  X-Request-Timestamp  – unix epoch seconds
  X-Nonce              – any unique string (uuid4 recommended)
  X-Signature          – hex digest of the message

Replay protection is a ±300 s timestamp window only; nonces are not stored.
"""
import hashlib
import hmac
import time
import uuid
from typing import Optional


TIMESTAMP_TOLERANCE_SECONDS = 300


def sign_request(secret: str, user_id: str, timestamp: str, nonce: str) -> str:
    message = f"{timestamp}:{nonce}:{user_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def signed_headers(secret: str, user_id: str, now: Optional[int] = None) -> dict[str, str]:
    """Headers a client sends so that ``HmacMiddleware`` accepts the request."""
    timestamp = str(int(time.time()) if now is None else now)
    nonce = str(uuid.uuid4())
    return {
        "X-User-Id": user_id,
        "X-Request-Timestamp": timestamp,
        "X-Nonce": nonce,
        "X-Signature": sign_request(secret, user_id, timestamp, nonce),
    }


def verify_request_signature(
    secret: str,
    user_id: str,
    timestamp: Optional[str],
    nonce: Optional[str],
    signature: Optional[str],
) -> bool:
    """True when the signature matches and the timestamp is inside the window.

    Never raises, the middleware turns False into a 401.
    """
    if not (timestamp and nonce and signature):
        return False

    try:
        ts = int(timestamp)
    except ValueError:
        return False

    if abs(int(time.time()) - ts) > TIMESTAMP_TOLERANCE_SECONDS:
        return False

    return hmac.compare_digest(sign_request(secret, user_id, timestamp, nonce), signature)
