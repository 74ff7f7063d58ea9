from __future__ import annotations

import logging
import os
from typing import BinaryIO

from s3direct.errors import UploadError
from s3direct.types import ProgressCallback

logger = logging.getLogger(__name__)


class ProgressReader:
    """Read-through wrapper reporting how much of the payload httpx has pulled.

    httpx streams a multipart file part by calling ``read()`` in chunks; each
    chunk is handed to the connection right after it is returned, so the
    position after every non-empty read approximates bytes sent. ``total`` is
    the payload length only: multipart boundaries and field parts are not
    counted, so the ratio is approximate.

    ``tell``/``seek`` are forwarded so httpx can size the part and send a
    Content-Length header; S3 POST uploads do not accept chunked bodies.

    An exception from the callback aborts the send as an ``UploadError`` whose
    ``cause`` is the callback's exception, never as a transport failure.
    """

    def __init__(self, stream: BinaryIO, total: int, on_progress: ProgressCallback | None = None) -> None:
        self._stream = stream
        self.total = total
        self._on_progress = on_progress
        self.sent = 0

    def read(self, size: int = -1) -> bytes:
        chunk = self._stream.read(size)
        if chunk:
            self.sent = self._stream.tell()
            logger.debug(f"Upload progress: {self.sent}/{self.total} bytes")
            if self._on_progress is not None:
                try:
                    self._on_progress(self.sent, self.total)
                except Exception as exc:
                    raise UploadError(f"Progress callback failed: {exc}", cause=exc) from exc
        return chunk

    def tell(self) -> int:
        return self._stream.tell()

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        position = self._stream.seek(offset, whence)
        # Rewinds (httpx seeks to 0 before streaming) restart the count.
        self.sent = min(position, self.total)
        return position
