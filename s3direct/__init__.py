from s3direct.errors import (
    SigningError,
    UploadError,
    UploadHttpStatusError,
    UploadTransportError,
    UploadValidationError,
)
from s3direct.services import presign_post, upload, upload_from_bytes, upload_from_file, upload_uint8list
from s3direct.types import (
    Acl,
    BytesSource,
    Credentials,
    Destination,
    FileSource,
    UploadOptions,
    UploadRequest,
)

__all__ = [
    "Acl",
    "BytesSource",
    "Credentials",
    "Destination",
    "FileSource",
    "UploadOptions",
    "UploadRequest",
    "SigningError",
    "UploadError",
    "UploadHttpStatusError",
    "UploadTransportError",
    "UploadValidationError",
    "presign_post",
    "upload",
    "upload_from_bytes",
    "upload_from_file",
    "upload_uint8list",
]
