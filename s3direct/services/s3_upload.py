from __future__ import annotations

import logging
import os
import re
import warnings
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO

import httpx

from s3direct.errors import UploadError, UploadHttpStatusError, UploadTransportError, UploadValidationError
from s3direct.services.post_policy import DEFAULT_EXPIRY_MINUTES, PostPolicy, build_post_policy
from s3direct.services.progress import ProgressReader
from s3direct.services.sigv4 import SIGNING_ALGORITHM, sign_policy
from s3direct.types import (
    Acl,
    BytesSource,
    Credentials,
    Destination,
    FileSource,
    ProgressCallback,
    UploadOptions,
    UploadRequest,
)

logger = logging.getLogger(__name__)

METADATA_PREFIX = "x-amz-meta-"

_CASE_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_WORD_SEPARATOR_RE = re.compile(r"[\s_./\\-]+")


@dataclass(frozen=True)
class PresignedPost:
    url: str
    fields: dict[str, str]
    object_url: str
    expires_at: datetime


def to_kebab_case(value: str) -> str:
    """``userId`` / ``user_id`` / ``User ID`` -> ``user-id``."""
    words = _WORD_SEPARATOR_RE.split(_CASE_BOUNDARY_RE.sub("-", value))
    return "-".join(word.lower() for word in words if word)


def convert_metadata_to_params(metadata: Mapping[str, str] | None) -> dict[str, str]:
    """Rename user metadata to the ``x-amz-meta-*`` fields S3 expects, keeping order."""
    params: dict[str, str] = {}
    for name, value in (metadata or {}).items():
        kebab = to_kebab_case(name)
        if not kebab:
            raise UploadValidationError(f"metadata key {name!r} is empty after normalization")
        params[f"{METADATA_PREFIX}{kebab}"] = value
    return params


def resolve_object_key(*, filename: str, dest_dir: str = "", key: str | None = None) -> str:
    if key is not None:
        return key
    if dest_dir:
        return f"{dest_dir}/{filename}"
    return filename


def build_endpoint(*, bucket: str, region: str, use_ssl: bool = True) -> str:
    scheme = "https" if use_ssl else "http"
    return f"{scheme}://{bucket}.s3.{region}.amazonaws.com"


def build_object_url(*, bucket: str, region: str, key: str, use_ssl: bool = True) -> str:
    return f"{build_endpoint(bucket=bucket, region=region, use_ssl=use_ssl)}/{key}"


def build_form_fields(*, policy: PostPolicy, signature: str) -> dict[str, str]:
    """Form fields in submission order; the file part must follow them."""
    fields = {
        "key": policy.key,
        "acl": policy.acl,
        "X-Amz-Credential": policy.credential,
        "X-Amz-Algorithm": SIGNING_ALGORITHM,
        "X-Amz-Date": policy.amz_date,
        "Policy": policy.encode(),
        "X-Amz-Signature": signature,
    }
    if policy.content_type is not None:
        fields["Content-Type"] = policy.content_type
    if policy.security_token is not None:
        fields["X-Amz-Security-Token"] = policy.security_token
    fields.update(policy.metadata)
    return fields


def _validate_target(credentials: Credentials, destination: Destination, *, filename: str) -> None:
    required = {
        "access_key": credentials.access_key,
        "secret_key": credentials.secret_key,
        "bucket": destination.bucket,
        "region": destination.region,
        "filename": filename,
    }
    if destination.key is not None:
        required["key"] = destination.key
    for name, value in required.items():
        if not value:
            raise UploadValidationError(f"{name} must not be empty")


def _sign(
    credentials: Credentials,
    destination: Destination,
    options: UploadOptions,
    *,
    filename: str,
    content_length: int,
    expiry_minutes: int = DEFAULT_EXPIRY_MINUTES,
    now: datetime | None = None,
) -> tuple[PostPolicy, dict[str, str]]:
    object_key = resolve_object_key(filename=filename, dest_dir=destination.dest_dir, key=destination.key)
    policy = build_post_policy(
        object_key,
        destination.bucket,
        credentials.access_key,
        expiry_minutes,
        content_length,
        options.acl,
        region=destination.region,
        metadata=convert_metadata_to_params(options.metadata),
        security_token=credentials.session_token,
        content_type=options.content_type,
        now=now,
    )
    signature = sign_policy(credentials.secret_key, policy)
    return policy, build_form_fields(policy=policy, signature=signature)


def presign_post(
    credentials: Credentials,
    destination: Destination,
    *,
    content_length: int,
    options: UploadOptions | None = None,
    expiry_minutes: int = DEFAULT_EXPIRY_MINUTES,
    now: datetime | None = None,
) -> PresignedPost:
    """Signed form fields for a client that POSTs ``content_length`` bytes itself."""
    options = options or UploadOptions()
    _validate_target(credentials, destination, filename=destination.filename)
    policy, fields = _sign(
        credentials,
        destination,
        options,
        filename=destination.filename,
        content_length=content_length,
        expiry_minutes=expiry_minutes,
        now=now,
    )
    return PresignedPost(
        url=build_endpoint(bucket=destination.bucket, region=destination.region, use_ssl=options.use_ssl),
        fields=fields,
        object_url=build_object_url(
            bucket=destination.bucket,
            region=destination.region,
            key=policy.key,
            use_ssl=options.use_ssl,
        ),
        expires_at=policy.expires_at,
    )


def _post_form(
    *,
    client: httpx.Client | None,
    url: str,
    fields: dict[str, str],
    file_part: tuple[str, ProgressReader, str],
    headers: dict[str, str],
) -> httpx.Response:
    files = {"file": file_part}
    if client is not None:
        return client.post(url, data=fields, files=files, headers=headers)
    # No timeout: large bodies may legitimately take longer than any default.
    with httpx.Client(timeout=None) as owned_client:
        return owned_client.post(url, data=fields, files=files, headers=headers)


def upload(request: UploadRequest) -> str:
    """Upload ``request.source`` with a signed POST and return the object URL.

    Raises:
        UploadValidationError: before any network call, for empty credentials,
            bucket, region, filename or key override, or a missing/empty source.
        UploadHttpStatusError: S3 answered with a non-2xx status.
        UploadTransportError: the connection or reading the source failed.
        UploadError: anything else, with the original exception in ``cause``.
    """
    credentials = request.credentials
    destination = request.destination
    options = request.options

    filename = destination.filename or request.source.name or ""
    _validate_target(credentials, destination, filename=filename)
    content_length = request.source.measure()

    policy, fields = _sign(credentials, destination, options, filename=filename, content_length=content_length)
    endpoint = build_endpoint(bucket=destination.bucket, region=destination.region, use_ssl=options.use_ssl)
    object_url = build_object_url(
        bucket=destination.bucket,
        region=destination.region,
        key=policy.key,
        use_ssl=options.use_ssl,
    )

    logger.debug(f"Uploading {content_length} bytes to {endpoint} as {policy.key}")
    try:
        with request.source.open() as stream:
            stream.seek(0)
            reader = ProgressReader(stream, content_length, options.on_progress)
            response = _post_form(
                client=options.client,
                url=f"{endpoint}/",
                fields=fields,
                file_part=(filename, reader, options.content_type),
                headers=dict(options.headers or {}),
            )
    except UploadError:
        raise
    except (httpx.RequestError, OSError) as exc:
        logger.error(f"S3 upload to {endpoint} failed: {exc}")
        raise UploadTransportError(exc) from exc
    except Exception as exc:
        raise UploadError(f"S3 upload failed: {exc}", cause=exc) from exc

    if not response.is_success:
        logger.warning(f"S3 rejected upload of {policy.key}: HTTP {response.status_code}")
        raise UploadHttpStatusError(response.status_code, response_text=response.text)

    logger.info(f"Uploaded {policy.key} to bucket {destination.bucket}")
    return object_url


def upload_from_file(
    credentials: Credentials,
    destination: Destination,
    file: str | os.PathLike[str] | BinaryIO,
    options: UploadOptions | None = None,
) -> str:
    return upload(
        UploadRequest(
            credentials=credentials,
            destination=destination,
            source=FileSource(file),
            options=options or UploadOptions(),
        )
    )


def upload_from_bytes(
    credentials: Credentials,
    destination: Destination,
    data: bytes,
    options: UploadOptions | None = None,
) -> str:
    return upload(
        UploadRequest(
            credentials=credentials,
            destination=destination,
            source=BytesSource(data),
            options=options or UploadOptions(),
        )
    )


def upload_uint8list(
    *,
    access_key: str,
    secret_key: str,
    bucket: str,
    file: bytes,
    region: str,
    dest_dir: str,
    filename: str,
    session_token: str | None = None,
    key: str | None = None,
    acl: Acl | str = Acl.PUBLIC_READ,
    content_type: str = "binary/octet-stream",
    use_ssl: bool = True,
    metadata: Mapping[str, str] | None = None,
    on_upload_progress: ProgressCallback | None = None,
) -> str:
    """Deprecated flat-keyword entry point; use :func:`upload_from_bytes`."""
    warnings.warn(
        "upload_uint8list() is deprecated; use upload_from_bytes()",
        DeprecationWarning,
        stacklevel=2,
    )
    return upload_from_bytes(
        Credentials(access_key=access_key, secret_key=secret_key, session_token=session_token),
        Destination(bucket=bucket, region=region, filename=filename, dest_dir=dest_dir, key=key),
        file,
        UploadOptions(
            acl=acl,
            content_type=content_type,
            use_ssl=use_ssl,
            metadata=metadata,
            on_progress=on_upload_progress,
        ),
    )
