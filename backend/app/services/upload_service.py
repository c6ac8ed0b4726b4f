"""Image uploads attached to salons."""

import logging

from fastapi import UploadFile
from sqlalchemy.orm import Session

from app.core.errors import InputValidationError, NotFoundError
from app.models.salon_image import SalonImage, SalonImageType
from app.repositories.salon_image_repository import SalonImageRepository
from app.repositories.salon_repository import SalonRepository
from app.services.storage import ObjectStorage

logger = logging.getLogger(__name__)

MAX_FILES_PER_UPLOAD = 5


class UploadService:
    def __init__(self, db: Session, storage: ObjectStorage):
        self.db = db
        self.storage = storage
        self.salon_repo = SalonRepository(db)
        self.image_repo = SalonImageRepository(db)

    async def upload_images(
        self,
        salon_id: int,
        files: list[UploadFile],
        salon_name: str | None = None,
    ) -> list[SalonImage]:
        """Store each file under the salon's folder and record it as a gallery image.

        Every file is checked before anything is stored.
        """
        if not files:
            raise InputValidationError("No image uploaded", code="no_file")
        if len(files) > MAX_FILES_PER_UPLOAD:
            raise InputValidationError(
                f"At most {MAX_FILES_PER_UPLOAD} images per upload", code="too_many_files"
            )
        for upload in files:
            if not (upload.content_type or "").startswith("image/"):
                raise InputValidationError("Only image files are allowed", code="invalid_file_type")

        salon = self.salon_repo.get_by_id(salon_id)
        if not salon:
            raise NotFoundError("Salon not found", code="salon_not_found")
        prefix = salon_name or str(salon.name)

        urls: list[str] = []
        try:
            for upload in files:
                data = await upload.read()
                urls.append(
                    self.storage.save(
                        data, upload.filename, prefix, upload.content_type or "image/*"
                    )
                )
        except Exception:
            for url in urls:
                self.storage.delete(url)
            raise

        try:
            images = [self.image_repo.add(salon_id, url, SalonImageType.GALLERY) for url in urls]
            self.db.commit()
        except Exception:
            self.db.rollback()
            for url in urls:
                self.storage.delete(url)
            raise

        logger.info("Uploaded %d image(s) for salon %s", len(images), salon_id)
        return images

    def delete_image(self, image_id: int) -> None:
        """Remove the image row, then the stored object (best effort)."""
        image = self.image_repo.get_by_id(image_id)
        if not image:
            raise NotFoundError("Image not found", code="image_not_found")
        url = str(image.image_url)
        self.image_repo.delete(image)
        self.db.commit()
        if not self.storage.delete(url):
            logger.warning("Stored image %s was not removed", url)
