"""Media host access (Cloudinary) and upload checks."""
import io
import logging
from typing import Optional

import cloudinary
import cloudinary.uploader
from fastapi import Request, UploadFile

from errors import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = ("image/jpeg", "image/png", "application/pdf", "video/mp4")


class CloudinaryMedia:
    def __init__(self, cloud_name: str, api_key: str, api_secret: str, root_folder: str = "VISMOH"):
        self.root_folder = root_folder
        cloudinary.config(cloud_name=cloud_name, api_key=api_key, api_secret=api_secret, secure=True)

    def folder(self, name: str) -> str:
        return f"{self.root_folder}/{name}"

    def upload(self, content: bytes, folder: str, resource_type: str = "auto") -> dict:
        """Upload raw bytes; returns the host's result (secure_url, public_id, format, ...)."""
        try:
            return cloudinary.uploader.upload(io.BytesIO(content), folder=self.folder(folder), resource_type=resource_type)
        except Exception as e:
            logger.error("Upload to %s failed: %s", folder, e)
            raise UpstreamError(f"Media upload failed: {e}")

    def destroy(self, public_id: str, resource_type: str = "image") -> None:
        try:
            cloudinary.uploader.destroy(public_id, resource_type=resource_type)
        except Exception as e:
            logger.error("Could not delete %s: %s", public_id, e)
            raise UpstreamError(f"Media delete failed: {e}")


def public_id_from_url(url: str) -> Optional[str]:
    """`.../upload/v123/VISMOH/videos/abc.mp4` -> `VISMOH/videos/abc`."""
    if not url or "/upload/" not in url:
        return None
    path = url.split("/upload/", 1)[1]
    parts = path.split("/")
    if parts and parts[0].startswith("v") and parts[0][1:].isdigit():
        parts = parts[1:]
    if not parts:
        return None
    return "/".join(parts).rsplit(".", 1)[0] or None


def read_upload(file: UploadFile, max_bytes: int, allowed=ALLOWED_CONTENT_TYPES) -> bytes:
    if file.content_type not in allowed:
        raise ValidationError("Invalid file type. Only JPEG, PNG, PDF, and MP4 are allowed.")
    content = file.file.read()
    if not content:
        raise ValidationError("Uploaded file is empty.")
    if len(content) > max_bytes:
        raise ValidationError(f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB.")
    return content


def get_media(request: Request) -> CloudinaryMedia:
    return request.app.state.media
