from __future__ import annotations

import io
import os
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, BinaryIO

from s3direct.errors import UploadValidationError

if TYPE_CHECKING:
    import httpx

ProgressCallback = Callable[[int, int], None]


class Acl(StrEnum):
    """S3 canned ACLs.

    See https://docs.aws.amazon.com/AmazonS3/latest/userguide/acl-overview.html#canned-acl
    """

    PRIVATE = "private"
    PUBLIC_READ = "public-read"
    PUBLIC_READ_WRITE = "public-read-write"
    AWS_EXEC_READ = "aws-exec-read"
    AUTHENTICATED_READ = "authenticated-read"
    BUCKET_OWNER_READ = "bucket-owner-read"
    BUCKET_OWNER_FULL_CONTROL = "bucket-owner-full-control"
    LOG_DELIVERY_WRITE = "log-delivery-write"


@dataclass(frozen=True)
class Credentials:
    access_key: str
    secret_key: str
    session_token: str | None = None


@dataclass(frozen=True)
class Destination:
    """Where the object lands.

    ``key`` wins over ``dest_dir``/``filename`` when set. ``region`` must be
    formatted the way AWS spells it, e.g. ``us-west-1``.
    """

    bucket: str
    region: str
    filename: str
    dest_dir: str = ""
    key: str | None = None


@dataclass(frozen=True)
class UploadOptions:
    """Per-call upload options.

    acl: canned ACL sent as the ``acl`` field and pinned in the policy.
    content_type: stored object Content-Type, also pinned in the policy.
    use_ssl: https endpoint and object URL when true, http otherwise.
    metadata: user metadata, sent as ``x-amz-meta-<kebab-case-key>`` fields.
    headers: extra HTTP headers for the POST itself (not form fields).
    on_progress: called as ``(sent_bytes, total_bytes)`` while the payload
        streams. Must be fast and must not raise.
    client: caller-owned ``httpx.Client``; the place to configure timeouts,
        proxies or cancellation. A client without timeouts is created per
        call when omitted.
    """

    acl: Acl | str = Acl.PUBLIC_READ
    content_type: str = "binary/octet-stream"
    use_ssl: bool = True
    metadata: Mapping[str, str] | None = None
    headers: Mapping[str, str] | None = None
    on_progress: ProgressCallback | None = None
    client: httpx.Client | None = None


@dataclass(frozen=True)
class BytesSource:
    data: bytes

    @property
    def name(self) -> str | None:
        return None

    def measure(self) -> int:
        if not isinstance(self.data, (bytes, bytearray, memoryview)):
            raise UploadValidationError("data must be a bytes-like object")
        length = len(self.data)
        if length == 0:
            raise UploadValidationError("data must not be empty")
        return length

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        yield io.BytesIO(bytes(self.data))


@dataclass(frozen=True)
class FileSource:
    """A path on disk or an already open, seekable binary file object.

    Paths are opened and closed by the upload call. File objects belong to
    the caller and are uploaded from offset 0 regardless of their position.
    """

    file: str | os.PathLike[str] | BinaryIO

    @property
    def _is_path(self) -> bool:
        return isinstance(self.file, (str, os.PathLike))

    @property
    def name(self) -> str | None:
        raw_name = os.fspath(self.file) if self._is_path else getattr(self.file, "name", None)
        if not isinstance(raw_name, str):
            return None
        return os.path.basename(raw_name) or None

    def measure(self) -> int:
        if self._is_path:
            path = os.fspath(self.file)
            if not path:
                raise UploadValidationError("file path must not be empty")
            if not os.path.exists(path):
                raise UploadValidationError(f"file does not exist: {path}")
            if not os.path.isfile(path):
                raise UploadValidationError(f"not a regular file: {path}")
            if not os.access(path, os.R_OK):
                raise UploadValidationError(f"file is not readable: {path}")
            length = os.path.getsize(path)
        else:
            stream = self.file
            if isinstance(stream, io.TextIOBase):
                raise UploadValidationError("file must be opened in binary mode")
            if not hasattr(stream, "read") or not hasattr(stream, "seek"):
                raise UploadValidationError("file must be a seekable binary stream")
            try:
                offset = stream.tell()
                length = stream.seek(0, os.SEEK_END)
                stream.seek(offset)
            except (OSError, ValueError) as exc:
                raise UploadValidationError(f"file is not seekable: {exc}") from exc
        if length == 0:
            raise UploadValidationError("file must not be empty")
        return length

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        if self._is_path:
            with open(self.file, "rb") as handle:
                yield handle
            return
        yield self.file  # type: ignore[misc]


ByteSource = BytesSource | FileSource


@dataclass(frozen=True)
class UploadRequest:
    credentials: Credentials
    destination: Destination
    source: ByteSource
    options: UploadOptions = field(default_factory=UploadOptions)
