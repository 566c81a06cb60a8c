"""Storage for training media (videos and thumbnail images) on local disk."""
from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from pathlib import Path

from trainhub.core.config import Settings
from trainhub.core.errors import PersistenceFailure, ValidationFailure
from trainhub.core.logging import get_logger

logger = get_logger(__name__)

ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"})
VIDEO_URL_PREFIX = "/uploads/videos"
IMAGE_URL_PREFIX = "/uploads/images"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(name: str | None) -> str:
    """Strip directories and anything outside [A-Za-z0-9._-] from a client file name."""
    base = Path((name or "").replace("\\", "/")).name
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return cleaned[:120] or "upload"


@dataclass
class StoredFile:
    filename: str
    url: str
    size: int


class UploadService:
    def __init__(self, settings: Settings) -> None:
        self.video_dir = settings.video_uploads_dir
        self.image_dir = settings.image_uploads_dir
        self.max_video_bytes = settings.max_video_bytes
        self.max_image_bytes = settings.max_image_bytes

    def ensure_dirs(self) -> None:
        self.video_dir.mkdir(parents=True, exist_ok=True)
        self.image_dir.mkdir(parents=True, exist_ok=True)

    def save_video(self, filename: str | None, content_type: str | None, data: bytes) -> StoredFile:
        ct = (content_type or "").lower()
        if not ct.startswith("video/"):
            raise ValidationFailure("file must be a video", field="video")
        self._check_size(data, self.max_video_bytes)
        return self._write(self.video_dir, VIDEO_URL_PREFIX, filename, data)

    def save_image(self, filename: str | None, content_type: str | None, data: bytes) -> StoredFile:
        ct = (content_type or "").lower()
        if ct not in ALLOWED_IMAGE_TYPES:
            raise ValidationFailure("file must be an image (JPEG, PNG, GIF, or WebP)", field="image")
        self._check_size(data, self.max_image_bytes)
        return self._write(self.image_dir, IMAGE_URL_PREFIX, filename, data)

    @staticmethod
    def _check_size(data: bytes, limit: int) -> None:
        if not data:
            raise ValidationFailure("no file uploaded")
        if len(data) > limit:
            raise ValidationFailure("file too large or invalid")

    def _write(self, directory: Path, url_prefix: str, filename: str | None, data: bytes) -> StoredFile:
        stored_name = f"{uuid.uuid4()}_{safe_filename(filename)}"
        target = directory / stored_name
        try:
            directory.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            logger.error("upload write failed", path=str(target), error=str(exc), exc_info=True)
            raise PersistenceFailure(f"could not write {target}: {exc}", public_message="failed to save file") from exc
        logger.info("upload stored", path=str(target), size=len(data))
        return StoredFile(filename=stored_name, url=f"{url_prefix}/{stored_name}", size=len(data))
