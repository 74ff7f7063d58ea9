from __future__ import annotations


class UploadError(Exception):
    """Base failure for every upload operation.

    Unexpected failures during request assembly or sending are raised as a
    plain ``UploadError`` with the original exception kept in ``cause``.
    """

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class UploadValidationError(UploadError, ValueError):
    """A required input is empty or the byte source is missing/empty."""


class SigningError(UploadError, ValueError):
    """Malformed input reached the signing-key chain."""


class UploadHttpStatusError(UploadError):
    def __init__(self, status_code: int, *, response_text: str = "") -> None:
        super().__init__(f"S3 upload failed with HTTP {status_code}")
        self.status_code = status_code
        self.response_text = response_text


class UploadTransportError(UploadError):
    def __init__(self, cause: BaseException) -> None:
        cause_text = str(cause) or type(cause).__name__
        super().__init__(f"S3 upload transport error: {cause_text}", cause=cause)
        self.cause_text = cause_text
