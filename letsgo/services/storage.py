"""Disk storage for uploaded images."""

import random
import time
from pathlib import Path
from typing import Dict, Optional

from fastapi import UploadFile

from letsgo.core.constants import ALLOWED_IMAGE_TYPES, UPLOAD_URL_PREFIX
from letsgo.core.logger import LetsGoLogger


class ImageStorage:
    """Saves uploads under ``upload_dir`` and serves them from ``url_prefix``."""

    def __init__(self, upload_dir: Path, url_prefix: str = UPLOAD_URL_PREFIX):
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")

    @staticmethod
    def _unique_name(original: str) -> str:
        suffix = Path(original).suffix.lower()
        return f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}{suffix}"

    async def save(self, upload: Optional[UploadFile]) -> Optional[Dict[str, str]]:
        """
        Persist an uploaded image and return its descriptor.

        Returns None when nothing was sent or the file is not a PNG/JPEG.
        """
        if upload is None or not upload.filename:
            return None
        if upload.content_type not in ALLOWED_IMAGE_TYPES:
            LetsGoLogger.warning(
                f"Rejected upload {upload.filename!r} with type {upload.content_type}"
            )
            return None

        filename = self._unique_name(upload.filename)
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        data = await upload.read()
        (self.upload_dir / filename).write_bytes(data)

        return {"path": f"{self.url_prefix}/{filename}", "filename": filename}

    def delete(self, image: Optional[Dict[str, str]]) -> None:
        """Remove a previously stored image. Failures are logged, never raised."""
        if not image or not image.get("filename"):
            return

        target = self.upload_dir / Path(image["filename"]).name
        if not target.exists():
            return
        try:
            target.unlink()
        except OSError as e:
            LetsGoLogger.warning(f"Could not delete old image {target}: {e}")
