"""Salon image upload endpoints."""

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from app.core.auth import Principal, require_admin
from app.core.database import get_db
from app.schemas.common import Envelope
from app.schemas.upload import MultiUploadResult, UploadResult
from app.services.storage import ObjectStorage, get_storage
from app.services.upload_service import UploadService

router = APIRouter()


@router.post(
    "/single",
    response_model=Envelope[UploadResult],
    status_code=201,
    summary="Upload one salon image",
    responses={
        404: {"description": "Salon not found"},
        422: {"description": "Not an image"},
    },
)
async def upload_single(
    image: UploadFile = File(...),
    salon_id: int = Form(...),
    salon_name: str | None = Form(default=None),
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    _: Principal = Depends(require_admin),
) -> Envelope[UploadResult]:
    [saved] = await UploadService(db, storage).upload_images(salon_id, [image], salon_name)
    return Envelope(
        message="Image uploaded successfully",
        data=UploadResult(url=saved.image_url, image_id=saved.id),  # type: ignore[arg-type]
    )


@router.post(
    "/multiple",
    response_model=Envelope[MultiUploadResult],
    status_code=201,
    summary="Upload up to five salon images",
    responses={
        404: {"description": "Salon not found"},
        422: {"description": "Not an image, or too many files"},
    },
)
async def upload_multiple(
    images: list[UploadFile] = File(...),
    salon_id: int = Form(...),
    salon_name: str | None = Form(default=None),
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    _: Principal = Depends(require_admin),
) -> Envelope[MultiUploadResult]:
    saved = await UploadService(db, storage).upload_images(salon_id, images, salon_name)
    return Envelope(
        message="Images uploaded successfully",
        data=MultiUploadResult(
            files=[UploadResult(url=i.image_url, image_id=i.id) for i in saved]  # type: ignore[arg-type]
        ),
    )


@router.delete(
    "/images/{image_id}",
    response_model=Envelope[None],
    summary="Delete salon image",
    responses={404: {"description": "Image not found"}},
)
async def delete_image(
    image_id: int,
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    _: Principal = Depends(require_admin),
) -> Envelope[None]:
    UploadService(db, storage).delete_image(image_id)
    return Envelope(message="Image deleted successfully")
