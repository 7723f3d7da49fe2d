import logging
import os
import time
import uuid
from typing import Optional

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool
from werkzeug.utils import secure_filename

from blogcms.core.config import settings
from blogcms.core.exceptions import (
    PayloadTooLargeException,
    UnsupportedMediaException,
    ValidationException,
)

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"jpeg", "jpg", "png", "gif", "webp"}
ALLOWED_MIME_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
CHUNK_SIZE = 64 * 1024


class UploadService:
    """Validate and store post images in the upload area."""

    def __init__(
        self,
        upload_dir: Optional[str] = None,
        url_prefix: Optional[str] = None,
        max_size: Optional[int] = None,
    ):
        self.upload_dir = upload_dir or settings.UPLOAD_FOLDER
        self.url_prefix = (url_prefix or settings.UPLOAD_URL_PREFIX).rstrip("/")
        self.max_size = max_size or settings.MAX_UPLOAD_SIZE

    def ensure_upload_dir(self) -> None:
        os.makedirs(self.upload_dir, exist_ok=True)

    @staticmethod
    def _extension(filename: str) -> str:
        _, ext = os.path.splitext(filename)
        return ext.lower().lstrip(".")

    def _check_type(self, upload: UploadFile) -> None:
        ext = self._extension(upload.filename or "")
        media_type = (upload.content_type or "").split(";")[0].strip().lower()
        if ext not in ALLOWED_EXTENSIONS or media_type not in ALLOWED_MIME_TYPES:
            logger.info("Rejected upload %r (%s)", upload.filename, media_type or "no type")
            raise UnsupportedMediaException(
                "Only image files are allowed! (jpeg, jpg, png, gif, webp)"
            )

    async def read_validated(self, upload: UploadFile) -> bytes:
        """Return the file body after checking type and size."""
        self._check_type(upload)

        chunks = []
        size = 0
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            size += len(chunk)
            if size > self.max_size:
                logger.info("Rejected upload %r: larger than %d bytes", upload.filename, self.max_size)
                raise PayloadTooLargeException(
                    f"File too large. Maximum size is {self.max_size // (1024 * 1024)}MB"
                )
            chunks.append(chunk)

        if size == 0:
            raise ValidationException("Uploaded image is empty")
        return b"".join(chunks)

    def build_filename(self, original: str) -> str:
        name = secure_filename(original) or f"image.{self._extension(original) or 'bin'}"
        return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{name}"

    def save(self, original_name: str, data: bytes) -> str:
        """Write ``data`` under a fresh unique name and return its reference path."""
        self.ensure_upload_dir()
        filename = self.build_filename(original_name)
        path = os.path.join(self.upload_dir, filename)
        # "x" refuses to clobber an existing file.
        with open(path, "xb") as f:
            f.write(data)
        return f"{self.url_prefix}/{filename}"

    async def store(self, upload: UploadFile) -> str:
        data = await self.read_validated(upload)
        return await run_in_threadpool(self.save, upload.filename or "", data)

    def path_for(self, reference: str) -> Optional[str]:
        """Map a reference path back to a file inside the upload area."""
        prefix = f"{self.url_prefix}/"
        if not reference or not reference.startswith(prefix):
            return None
        filename = os.path.basename(reference[len(prefix):])
        if not filename:
            return None
        return os.path.join(self.upload_dir, filename)

    def remove(self, reference: Optional[str]) -> None:
        path = self.path_for(reference or "")
        if path and os.path.isfile(path):
            os.remove(path)
            logger.debug("Removed stored image %s", path)


upload_service = UploadService()
