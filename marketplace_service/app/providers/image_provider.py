"""
Cloudinary image storage
========================

Uploads category and item images to Cloudinary through its signed REST API
and removes them again when a record's image is replaced or the record is
hard-deleted.
"""

import hashlib
import re
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
from fastapi import HTTPException, UploadFile, status

from ..core.settings import get_settings
from ..utils.logging import setup_marketplace_logging

settings = get_settings()
logger = setup_marketplace_logging(
    "marketplace_service.image_provider", log_level=settings.LOG_LEVEL
)

_VERSION_SEGMENT = re.compile(r"^v\d+$")


@dataclass(frozen=True)
class ImageFolder:
    name: str
    max_width: int
    max_height: int

    @property
    def transformation(self) -> str:
        return f"c_limit,h_{self.max_height},w_{self.max_width}"


CATEGORY_IMAGES = ImageFolder("categories", 500, 500)
ITEM_IMAGES = ImageFolder("items", 800, 800)


def public_id_from_url(url: str) -> Optional[str]:
    """Derive the Cloudinary public id from a delivery URL.

    ``https://res.cloudinary.com/demo/image/upload/v1712/items/abc.jpg``
    yields ``items/abc``.
    """
    if not url or "/upload/" not in url:
        return None
    segments = url.split("?", 1)[0].split("/upload/", 1)[1].split("/")
    if segments and _VERSION_SEGMENT.match(segments[0]):
        segments = segments[1:]
    if not segments or not segments[-1]:
        return None
    segments[-1] = segments[-1].rsplit(".", 1)[0]
    return "/".join(segments)


class CloudinaryImageStorage:
    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.cloud_name = cloud_name or settings.CLOUDINARY_CLOUD_NAME
        self.api_key = api_key or settings.CLOUDINARY_API_KEY
        self.api_secret = api_secret or settings.CLOUDINARY_API_SECRET
        self.base_url = f"{settings.CLOUDINARY_UPLOAD_URL}/{self.cloud_name}/image"
        self.allowed_formats: List[str] = [
            f.lower() for f in settings.IMAGE_ALLOWED_FORMATS
        ]
        self.max_size_bytes = settings.IMAGE_MAX_SIZE_BYTES
        self.timeout = settings.IMAGE_TIMEOUT_SECONDS
        self.transport = transport

    def sign(self, params: Dict[str, Any]) -> str:
        """SHA-1 request signature over the sorted parameters plus the secret"""
        to_sign = "&".join(
            f"{key}={params[key]}"
            for key in sorted(params)
            if params[key] is not None and params[key] != ""
        )
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode("utf-8")).hexdigest()

    def _signed_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        params = {**params, "timestamp": int(time.time())}
        return {**params, "api_key": self.api_key, "signature": self.sign(params)}

    def _validate_file(self, filename: str, content: bytes) -> str:
        extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        if extension not in self.allowed_formats:
            raise ValueError(
                f"Unsupported image format. Allowed: {', '.join(self.allowed_formats)}"
            )
        if not content:
            raise ValueError("Image file is empty")
        if len(content) > self.max_size_bytes:
            raise ValueError(
                f"Image exceeds the {self.max_size_bytes // (1024 * 1024)}MB limit"
            )
        return extension

    async def upload_image(self, file: UploadFile, folder: ImageFolder) -> str:
        """Upload an image and return its secure URL.

        Raises ValueError for a rejected file and a 500 HTTPException when
        the image host fails, so the calling write is aborted.
        """
        filename = file.filename or ""
        content = await file.read()
        self._validate_file(filename, content)

        data = self._signed_params(
            {"folder": folder.name, "transformation": folder.transformation}
        )
        try:
            async with httpx.AsyncClient(
                transport=self.transport, timeout=self.timeout
            ) as client:
                response = await client.post(
                    f"{self.base_url}/upload",
                    data=data,
                    files={
                        "file": (
                            filename,
                            content,
                            file.content_type or "application/octet-stream",
                        )
                    },
                )
            response.raise_for_status()
            secure_url = response.json()["secure_url"]
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error(
                "Image upload failed",
                extra={
                    "folder": folder.name,
                    "image_filename": filename,
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "event_type": "image_upload_failed",
                },
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Image upload failed",
            )

        logger.info(
            "Image uploaded",
            extra={
                "folder": folder.name,
                "image_url": secure_url,
                "size_bytes": len(content),
                "event_type": "image_uploaded",
            },
        )
        return secure_url

    async def delete_image(self, url: Optional[str]) -> bool:
        """Remove a previously uploaded image; failures are logged, never raised"""
        public_id = public_id_from_url(url or "")
        if not public_id:
            return False

        try:
            async with httpx.AsyncClient(
                transport=self.transport, timeout=self.timeout
            ) as client:
                response = await client.post(
                    f"{self.base_url}/destroy",
                    data=self._signed_params({"public_id": public_id}),
                )
            response.raise_for_status()
            result = response.json().get("result")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                "Image deletion failed, continuing",
                extra={
                    "public_id": public_id,
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "event_type": "image_delete_failed",
                },
            )
            return False

        logger.info(
            "Image deleted",
            extra={
                "public_id": public_id,
                "result": result,
                "event_type": "image_deleted",
            },
        )
        return result == "ok"
