from __future__ import annotations

import base64
import json
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from s3direct.errors import UploadValidationError
from s3direct.services.sigv4 import S3_SERVICE, SIGNING_ALGORITHM, credential_scope

DEFAULT_EXPIRY_MINUTES = 45

_AMZ_DATE_FORMAT = "%Y%m%dT%H%M%SZ"
_SCOPE_DATE_FORMAT = "%Y%m%d"
_EXPIRATION_FORMAT = "%Y-%m-%dT%H:%M:%S.000Z"


@dataclass(frozen=True)
class PostPolicy:
    key: str
    bucket: str
    region: str
    access_key: str
    issued_at: datetime
    expires_at: datetime
    max_content_length: int
    acl: str
    metadata: tuple[tuple[str, str], ...] = ()
    content_type: str | None = None
    security_token: str | None = None

    @property
    def amz_date(self) -> str:
        """``X-Amz-Date`` value, e.g. ``20240131T235959Z``."""
        return self.issued_at.strftime(_AMZ_DATE_FORMAT)

    @property
    def date(self) -> str:
        return self.issued_at.strftime(_SCOPE_DATE_FORMAT)

    @property
    def expiration(self) -> str:
        return self.expires_at.strftime(_EXPIRATION_FORMAT)

    @property
    def credential(self) -> str:
        return credential_scope(self.access_key, self.date, self.region, S3_SERVICE)

    def conditions(self) -> list:
        conditions: list = [
            {"key": self.key},
            {"bucket": self.bucket},
            {"acl": self.acl},
            # Exact length: a resend with any other body size fails the policy.
            ["content-length-range", self.max_content_length, self.max_content_length],
            {"x-amz-credential": self.credential},
            {"x-amz-algorithm": SIGNING_ALGORITHM},
            {"x-amz-date": self.amz_date},
        ]
        if self.content_type is not None:
            conditions.append({"Content-Type": self.content_type})
        for name, value in self.metadata:
            conditions.append({name: value})
        if self.security_token is not None:
            conditions.append({"x-amz-security-token": self.security_token})
        return conditions

    def document(self) -> dict:
        return {"expiration": self.expiration, "conditions": self.conditions()}

    def to_json(self) -> str:
        return json.dumps(self.document(), separators=(",", ":"), ensure_ascii=False)

    def encode(self) -> str:
        """Base64 of the compact JSON document; the exact string that gets signed."""
        return base64.b64encode(self.to_json().encode("utf-8")).decode("ascii")


def build_post_policy(
    key: str,
    bucket: str,
    access_key: str,
    expiry_minutes: int,
    max_content_length: int,
    acl: str,
    *,
    region: str,
    metadata: Mapping[str, str] | None = None,
    security_token: str | None = None,
    content_type: str | None = None,
    now: datetime | None = None,
) -> PostPolicy:
    """Build a POST policy that allows exactly one upload of ``max_content_length`` bytes.

    ``metadata`` must already be in ``x-amz-meta-*`` form; its iteration order
    is kept so the document matches the submitted form fields. ``now`` is the
    issuance instant (UTC); it defaults to the current time.
    """
    if expiry_minutes <= 0:
        raise UploadValidationError("expiry_minutes must be positive")
    if max_content_length <= 0:
        raise UploadValidationError("max_content_length must be positive")

    issued_at = now or datetime.now(UTC)
    if issued_at.tzinfo is None:
        issued_at = issued_at.replace(tzinfo=UTC)
    issued_at = issued_at.astimezone(UTC).replace(microsecond=0)

    return PostPolicy(
        key=key,
        bucket=bucket,
        region=region,
        access_key=access_key,
        issued_at=issued_at,
        expires_at=issued_at + timedelta(minutes=expiry_minutes),
        max_content_length=max_content_length,
        acl=str(acl),
        metadata=tuple((metadata or {}).items()),
        content_type=content_type,
        security_token=security_token,
    )
