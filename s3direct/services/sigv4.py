"""AWS Signature Version 4 helpers for S3 POST policies.

Only the pieces a browser-style POST upload needs: the four-step signing
key derivation and the hex HMAC over the base64 policy document.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import TYPE_CHECKING

from s3direct.errors import SigningError

if TYPE_CHECKING:
    from s3direct.services.post_policy import PostPolicy

SIGNING_ALGORITHM = "AWS4-HMAC-SHA256"
S3_SERVICE = "s3"
SCOPE_TERMINATOR = "aws4_request"


def _hmac_sha256(key: bytes, msg: str | bytes) -> bytes:
    if isinstance(msg, str):
        msg = msg.encode("utf-8")
    return hmac.new(key, msg, hashlib.sha256).digest()


def _scope_date(date: str) -> str:
    # Accepts YYYYMMDD or the full YYYYMMDDTHHMMSSZ stamp.
    date8 = (date or "")[:8]
    if len(date8) != 8 or not date8.isdigit():
        raise SigningError(f"signing date must start with YYYYMMDD, got {date!r}")
    return date8


def derive_signing_key(secret_key: str, date: str, region: str, service: str = S3_SERVICE) -> bytes:
    """Derive the SigV4 signing key scoped to one day, region and service.

    Args:
        secret_key: AWS secret access key.
        date: ``YYYYMMDD`` or an ``X-Amz-Date`` stamp; only the date part is used.
        region: AWS region, e.g. ``us-east-1``.
        service: Service name, ``s3`` for uploads.

    Returns:
        32-byte signing key.
    """
    if not secret_key:
        raise SigningError("secret_key must not be empty")
    if not region:
        raise SigningError("region must not be empty")
    if not service:
        raise SigningError("service must not be empty")

    k_date = _hmac_sha256(("AWS4" + secret_key).encode("utf-8"), _scope_date(date))
    k_region = _hmac_sha256(k_date, region)
    k_service = _hmac_sha256(k_region, service)
    return _hmac_sha256(k_service, SCOPE_TERMINATOR)


def calculate_signature(signing_key: bytes, string_to_sign: str) -> str:
    return hmac.new(signing_key, string_to_sign.encode("utf-8"), hashlib.sha256).hexdigest()


def credential_scope(access_key: str, date: str, region: str, service: str = S3_SERVICE) -> str:
    return f"{access_key}/{_scope_date(date)}/{region}/{service}/{SCOPE_TERMINATOR}"


def sign_policy(secret_key: str, policy: PostPolicy) -> str:
    """Sign the base64 policy document exactly as it is submitted in the form."""
    signing_key = derive_signing_key(secret_key, policy.amz_date, policy.region, S3_SERVICE)
    return calculate_signature(signing_key, policy.encode())
