"""
Storage Service
Write-once local file storage for logos and generated certificates
"""

import logging
import uuid
from pathlib import Path, PurePosixPath

from fastapi import HTTPException, status

from fdp_portal.config import Settings
from fdp_portal.services.image_optimizer import image_optimizer

logger = logging.getLogger(__name__)

# Files under UPLOAD_DIR are served from this prefix
PUBLIC_PREFIX = "/uploads"


class StorageService:
    """Named files under UPLOAD_DIR, addressed by /uploads/<relative path>"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.root = Path(settings.UPLOAD_DIR)

    def _resolve(self, relative_path: str) -> Path:
        parts = PurePosixPath(relative_path).parts
        if not parts or relative_path.startswith("/") or ".." in parts:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid storage path"
            )
        return self.root.joinpath(*parts)

    @staticmethod
    def public_url(relative_path: str) -> str:
        return f"{PUBLIC_PREFIX}/{relative_path}"

    def save_bytes(self, relative_path: str, content: bytes) -> str:
        """
        Store a new file and return its public URL

        Raises:
            HTTPException: 409 if a file already exists at that path
        """
        path = self._resolve(relative_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(path, "xb") as f:
                f.write(content)
        except FileExistsError:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"File already exists: {relative_path}"
            )

        logger.info(f"Stored {relative_path} ({len(content)} bytes)")
        return self.public_url(relative_path)

    def delete(self, relative_path: str) -> bool:
        path = self._resolve(relative_path)
        if not path.is_file():
            return False
        path.unlink()
        return True

    def save_logo(self, content: bytes, content_type: str) -> str:
        """
        Validate, normalise and store an uploaded logo

        Raises:
            HTTPException: 400 on wrong type, oversize or unreadable image
        """
        if content_type not in self.settings.allowed_image_types:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unsupported image type: {content_type}"
            )

        if len(content) > self.settings.MAX_UPLOAD_SIZE:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File too large. Maximum size: {self.settings.MAX_UPLOAD_SIZE / 1024 / 1024}MB"
            )

        try:
            optimized, _ = image_optimizer.optimize(content)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Uploaded logo is not a valid image"
            )

        logger.debug(
            f"Logo optimized: {image_optimizer.get_size_reduction(len(content), len(optimized))}"
        )
        return self.save_bytes(f"logos/{uuid.uuid4()}.png", optimized)
