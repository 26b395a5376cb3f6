# fundytrack/core/security.py
import hmac
import hashlib
import logging
from urllib.parse import parse_qsl
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)

IDENTITY_FIELDS = ("sub", "email", "name", "picture")
MAX_CLOCK_SKEW_SECONDS = 300


def _secret_key(secret: str, c_str: str) -> bytes:
    return hmac.new(c_str.encode(), secret.encode(), hashlib.sha256).digest()


def _data_check_string(fields: Dict[str, str]) -> str:
    # Every key=value pair except 'hash', sorted by key, joined with \n
    return "\n".join(f"{k}={v}" for k, v in sorted(fields.items()))


def sign_identity(fields: Dict[str, str], secret: str, c_str: str = "IdentityAssertion") -> str:
    """
    Compute the hash the identity gateway attaches to an assertion.
    Used by the gateway side and by tests.
    """
    key = _secret_key(secret, c_str)
    return hmac.new(key, _data_check_string(fields).encode(), hashlib.sha256).hexdigest()


def parse_and_validate_identity(
    token: str,
    secret: str,
    c_str: str = "IdentityAssertion",
    expiration_hours: int = 24 * 7,
    max_clock_skew_seconds: int = MAX_CLOCK_SKEW_SECONDS,
    now: Optional[datetime] = None,
) -> Optional[Dict[str, Any]]:
    """
    Parse and verify the identity assertion forwarded by the login gateway.

    The gateway completes the identity-provider handshake and forwards the
    provider profile as a URL-encoded string:
    sub=...&email=...&name=...&picture=...&auth_date=...&hash=...

    Args:
        token: raw value of the X-Identity-Token header.
        secret: shared secret between the gateway and this service.
        c_str: constant used to derive the HMAC key.
        expiration_hours: maximum age of the assertion.
        max_clock_skew_seconds: how far auth_date may lie in the future.
        now: current instant, defaults to the UTC clock.

    Returns:
        Dict with the verified profile fields, or None if the token is
        malformed, expired or carries a wrong signature.
    """
    try:
        # Blank fields (no avatar, no email) are part of the signed string too
        parsed_data = dict(parse_qsl(token, keep_blank_values=True, strict_parsing=True))
    except ValueError:
        logger.info("Identity token rejected: not a query string")
        return None

    received_hash = parsed_data.pop("hash", None)
    if not received_hash:
        logger.info("Identity token rejected: missing hash")
        return None

    if not parsed_data.get("sub"):
        logger.info("Identity token rejected: missing subject")
        return None

    try:
        auth_date = datetime.fromtimestamp(int(parsed_data.get("auth_date", 0)), tz=timezone.utc)
    except (ValueError, TypeError, OverflowError):
        logger.info("Identity token rejected: bad auth_date")
        return None

    now = now or datetime.now(tz=timezone.utc)
    if now - auth_date > timedelta(hours=expiration_hours):
        logger.info("Identity token rejected: expired (auth_date=%s)", auth_date.isoformat())
        return None
    if auth_date - now > timedelta(seconds=max_clock_skew_seconds):
        logger.info("Identity token rejected: auth_date in the future (auth_date=%s)", auth_date.isoformat())
        return None

    calculated_hash = sign_identity(parsed_data, secret, c_str)
    if not hmac.compare_digest(calculated_hash, received_hash):
        logger.warning("Identity token rejected: hash mismatch for sub=%s", parsed_data.get("sub"))
        return None

    identity: Dict[str, Any] = {field: parsed_data.get(field) or None for field in IDENTITY_FIELDS}
    identity["auth_date"] = auth_date
    return identity
