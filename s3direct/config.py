"""Environment-backed defaults for the presign HTTP API.

The upload core never reads these; library callers pass everything per call.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from s3direct.types import Acl


_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
load_dotenv(_ENV_PATH, override=False)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _get_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _get_bool_env(name: str, default: bool) -> bool:
    value = _get_env(name)
    if value is None:
        return default
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def get_s3_bucket() -> str | None:
    return _get_env("S3_BUCKET")


def get_s3_region() -> str:
    return _get_env("S3_REGION") or "us-east-1"


def get_s3_access_key_id() -> str | None:
    return _get_env("S3_ACCESS_KEY_ID")


def get_s3_secret_access_key() -> str | None:
    return _get_env("S3_SECRET_ACCESS_KEY")


def get_s3_session_token() -> str | None:
    return _get_env("S3_SESSION_TOKEN")


def get_s3_use_ssl() -> bool:
    return _get_bool_env("S3_USE_SSL", True)


def get_s3_default_acl() -> Acl:
    """Canned ACL applied when a presign request names none."""
    return Acl(_get_env("S3_DEFAULT_ACL") or Acl.PUBLIC_READ)


def get_cors_allow_origins() -> list[str]:
    raw = _get_env("CORS_ALLOW_ORIGINS") or "http://localhost:3000"
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
