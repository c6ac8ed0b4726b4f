"""City API endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.auth import Principal, require_admin
from app.core.database import get_db
from app.schemas.city import CityBulkCreate, CityBulkResult, CityCreate, CityResponse
from app.schemas.common import Envelope
from app.services.city_service import CityService

router = APIRouter()


@router.get("/", response_model=Envelope[list[CityResponse]], summary="List cities")
async def list_cities(
    active_only: bool = Query(default=False),
    db: Session = Depends(get_db),
) -> Envelope[list[CityResponse]]:
    cities = CityService(db).list_cities(active_only=active_only)
    return Envelope(data=[CityResponse.model_validate(c) for c in cities])


@router.post(
    "/",
    response_model=Envelope[CityResponse],
    status_code=201,
    summary="Add city",
    responses={409: {"description": "City already exists"}},
)
async def add_city(
    data: CityCreate,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
) -> Envelope[CityResponse]:
    city = CityService(db).add_city(data.name)
    return Envelope(message="City added successfully", data=CityResponse.model_validate(city))


@router.post(
    "/bulk",
    response_model=Envelope[CityBulkResult],
    status_code=201,
    summary="Add many cities",
)
async def add_bulk_cities(
    data: CityBulkCreate,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
) -> Envelope[CityBulkResult]:
    inserted = CityService(db).add_bulk_cities(data.names)
    message = (
        f"{len(inserted)} cities added successfully" if inserted else "All cities already exist"
    )
    return Envelope(message=message, data=CityBulkResult(message=message, inserted=inserted))


@router.put(
    "/deactivate/{city_id}",
    response_model=Envelope[CityResponse],
    summary="Deactivate city",
    responses={404: {"description": "City not found"}},
)
async def deactivate_city(
    city_id: int,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
) -> Envelope[CityResponse]:
    city = CityService(db).set_active(city_id, False)
    return Envelope(message="City deactivated successfully", data=CityResponse.model_validate(city))


@router.put(
    "/activate/{city_id}",
    response_model=Envelope[CityResponse],
    summary="Activate city",
    responses={404: {"description": "City not found"}},
)
async def activate_city(
    city_id: int,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
) -> Envelope[CityResponse]:
    city = CityService(db).set_active(city_id, True)
    return Envelope(message="City activated successfully", data=CityResponse.model_validate(city))


@router.delete(
    "/{city_id}",
    response_model=Envelope[None],
    summary="Delete city",
    responses={404: {"description": "City not found"}},
)
async def delete_city(
    city_id: int,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
) -> Envelope[None]:
    """Hard delete. Salons of the city are removed with it."""
    CityService(db).delete_city(city_id)
    return Envelope(message="City deleted successfully")
