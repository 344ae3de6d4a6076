# storefront_http_api/services/image_upload_service.py

from __future__ import annotations

import secrets
import string
import time
from pathlib import Path
from typing import Iterable, Optional, Union

import aiofiles

from storefront_http_api.config import settings
from storefront_http_api.exceptions import BusinessRuleError
from storefront_http_api.logging import get_logger

logger = get_logger(__name__)

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}
ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp"}
MAX_PRODUCT_IMAGES = 10

_ALPHABET = string.ascii_letters + string.digits


class ImageUploadService:
    """
    Product images on the local filesystem, under
    ``{MEDIA_ROOT}/products/{product_id}/``.
    """

    def __init__(
        self,
        media_root: Optional[Union[str, Path]] = None,
        max_upload_mb: Optional[int] = None,
    ) -> None:
        self.media_root = Path(media_root if media_root is not None else settings.MEDIA_ROOT)
        self.max_bytes = (max_upload_mb or settings.MAX_UPLOAD_MB) * 1024 * 1024

    def product_dir(self, product_id: int) -> Path:
        return self.media_root / "products" / str(product_id)

    @staticmethod
    def generate_filename(extension: str, *, now: Optional[float] = None) -> str:
        timestamp = int(now if now is not None else time.time())
        random_part = "".join(secrets.choice(_ALPHABET) for _ in range(8))
        return f"{timestamp}_{random_part}.{extension.lower()}"

    def _extension_for(self, filename: Optional[str], content_type: Optional[str]) -> str:
        ext = Path(filename or "").suffix.lstrip(".").lower()
        if content_type not in ALLOWED_CONTENT_TYPES or ext not in ALLOWED_EXTENSIONS:
            raise BusinessRuleError("Images must be jpeg, png, gif or webp files.")
        return ext

    async def save(
        self,
        product_id: int,
        *,
        filename: Optional[str],
        content_type: Optional[str],
        data: bytes,
    ) -> str:
        """Store one upload and return the generated file name."""
        ext = self._extension_for(filename, content_type)
        if not data:
            raise BusinessRuleError("The uploaded file is empty.")
        if len(data) > self.max_bytes:
            raise BusinessRuleError(
                f"Images may not be larger than {self.max_bytes // (1024 * 1024)} MB."
            )

        directory = self.product_dir(product_id)
        directory.mkdir(parents=True, exist_ok=True)
        stored_name = self.generate_filename(ext)

        async with aiofiles.open(directory / stored_name, mode="wb") as fh:
            await fh.write(data)

        logger.info("product_image_saved", product_id=product_id, file=stored_name, size=len(data))
        return stored_name

    def delete(self, product_id: int, image: str) -> None:
        """Remove one image (a file name or a URL ending in it); missing files are ignored."""
        path = self.product_dir(product_id) / Path(image).name
        if path.is_file():
            path.unlink()
            logger.info("product_image_deleted", product_id=product_id, file=path.name)
        self.cleanup_directory(product_id)

    def delete_all(self, product_id: int, images: Iterable[str]) -> None:
        for image in images:
            if image.startswith(("http://", "https://")):
                continue
            path = self.product_dir(product_id) / Path(image).name
            if path.is_file():
                path.unlink()
        self.cleanup_directory(product_id)

    def cleanup_directory(self, product_id: int) -> None:
        directory = self.product_dir(product_id)
        if directory.is_dir() and not any(directory.iterdir()):
            directory.rmdir()


def get_image_upload_service() -> ImageUploadService:
    """FastAPI dependency; tests override it to point at a temporary directory."""
    return ImageUploadService()


__all__ = [
    "ImageUploadService",
    "get_image_upload_service",
    "ALLOWED_CONTENT_TYPES",
    "MAX_PRODUCT_IMAGES",
]
