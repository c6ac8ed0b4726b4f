"""Salon API endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.auth import Principal, require_admin
from app.core.database import get_db
from app.schemas.common import Envelope
from app.schemas.salon import (
    SalonBulkDelete,
    SalonBulkDeleteResult,
    SalonCreate,
    SalonResponse,
    SalonStatusUpdate,
    SalonUpdate,
)
from app.services.salon_service import SalonService, SalonWithImages
from app.services.storage import ObjectStorage, get_storage

router = APIRouter()


def _to_response(item: SalonWithImages) -> SalonResponse:
    response = SalonResponse.model_validate(item.salon)
    response.images = item.images
    return response


@router.post(
    "/",
    response_model=Envelope[SalonResponse],
    status_code=201,
    summary="Add salon",
    responses={
        404: {"description": "City not found"},
        409: {"description": "Salon email already in use"},
    },
)
async def add_salon(
    data: SalonCreate,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
) -> Envelope[SalonResponse]:
    item = SalonService(db).add_salon(data)
    return Envelope(message="Salon added successfully", data=_to_response(item))


@router.get("/", response_model=Envelope[list[SalonResponse]], summary="List salons")
async def list_salons(
    city_id: int | None = Query(default=None),
    is_active: bool | None = Query(default=None),
    db: Session = Depends(get_db),
) -> Envelope[list[SalonResponse]]:
    items = SalonService(db).list_salons(city_id=city_id, is_active=is_active)
    return Envelope(data=[_to_response(item) for item in items])


@router.post(
    "/bulk-delete",
    response_model=Envelope[SalonBulkDeleteResult],
    summary="Delete many salons",
)
async def bulk_delete_salons(
    data: SalonBulkDelete,
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    _: Principal = Depends(require_admin),
) -> Envelope[SalonBulkDeleteResult]:
    count = SalonService(db, storage).bulk_delete_salons(data.ids)
    return Envelope(
        message=f"{count} salons deleted successfully",
        data=SalonBulkDeleteResult(deleted_count=count),
    )


@router.get(
    "/{salon_id}",
    response_model=Envelope[SalonResponse],
    summary="Get salon",
    responses={404: {"description": "Salon not found"}},
)
async def get_salon(salon_id: int, db: Session = Depends(get_db)) -> Envelope[SalonResponse]:
    return Envelope(data=_to_response(SalonService(db).get_salon(salon_id)))


@router.put(
    "/{salon_id}",
    response_model=Envelope[SalonResponse],
    summary="Update salon",
    responses={404: {"description": "Salon not found"}},
)
async def update_salon(
    salon_id: int,
    data: SalonUpdate,
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    _: Principal = Depends(require_admin),
) -> Envelope[SalonResponse]:
    item = SalonService(db, storage).update_salon(salon_id, data)
    return Envelope(message="Salon updated successfully", data=_to_response(item))


@router.delete(
    "/{salon_id}",
    response_model=Envelope[None],
    summary="Delete salon",
    responses={404: {"description": "Salon not found"}},
)
async def delete_salon(
    salon_id: int,
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    _: Principal = Depends(require_admin),
) -> Envelope[None]:
    SalonService(db, storage).delete_salon(salon_id)
    return Envelope(message="Salon deleted successfully")


@router.patch(
    "/{salon_id}/status",
    response_model=Envelope[SalonResponse],
    summary="Activate or deactivate salon",
    responses={404: {"description": "Salon not found"}},
)
async def set_salon_status(
    salon_id: int,
    data: SalonStatusUpdate,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
) -> Envelope[SalonResponse]:
    service = SalonService(db)
    service.set_active(salon_id, data.is_active)
    state = "activated" if data.is_active else "deactivated"
    return Envelope(message=f"Salon {state} successfully", data=_to_response(service.get_salon(salon_id)))
