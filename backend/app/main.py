import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.database import close_db, init_db
from app.core.errors import ServiceError
from app.core.rate_limiter import check_rate_limit
from app.routers import (
    admin_reviews,
    cities,
    coupons,
    customer_memberships,
    membership_plans,
    reviews,
    salons,
    uploads,
    users,
)
from app.schemas.common import ErrorEnvelope
from app.services.storage import LOCAL_URL_PREFIX

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {"name": "Cities", "description": "Manage the cities salons are listed under."},
    {"name": "Salons", "description": "Create, read, update, and delete salons."},
    {"name": "Uploads", "description": "Upload and remove salon images."},
    {"name": "Coupons", "description": "Define, purchase, and redeem salon coupons."},
    {"name": "Memberships", "description": "Salon membership plans and purchases."},
    {"name": "Customer Memberships", "description": "A customer's memberships across salons."},
    {"name": "Reviews", "description": "Salon reviews, likes, reports, and owner responses."},
    {"name": "Review Moderation", "description": "Moderate reviews and handle reports."},
    {"name": "Users", "description": "The authenticated user."},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_db()
    logger.info("%s %s started", settings.APP_NAME, settings.version)
    yield
    close_db()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Salon directory API. Manage cities, salons, and images; sell memberships "
        "and coupons; redeem coupons; and collect and moderate reviews."
    ),
    openapi_tags=OPENAPI_TAGS,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorEnvelope(message=exc.message, code=exc.code).model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorEnvelope(message=str(exc.detail)).model_dump(),
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = jsonable_encoder(exc.errors())
    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in errors
    )
    return JSONResponse(
        status_code=422,
        content={**ErrorEnvelope(message=message, code="validation").model_dump(), "errors": errors},
    )


api_dependencies = [Depends(check_rate_limit)]

app.include_router(
    cities.router, prefix="/api/admin/city", tags=["Cities"], dependencies=api_dependencies
)
app.include_router(
    salons.router, prefix="/api/admin/salons", tags=["Salons"], dependencies=api_dependencies
)
app.include_router(
    uploads.router, prefix="/api/admin/upload", tags=["Uploads"], dependencies=api_dependencies
)
app.include_router(
    coupons.router, prefix="/api/admin/coupons", tags=["Coupons"], dependencies=api_dependencies
)
app.include_router(
    membership_plans.router,
    prefix="/api/salon-memberships",
    tags=["Memberships"],
    dependencies=api_dependencies,
)
app.include_router(
    customer_memberships.router,
    prefix="/api/customer-memberships",
    tags=["Customer Memberships"],
    dependencies=api_dependencies,
)
app.include_router(
    reviews.router, prefix="/api/reviews", tags=["Reviews"], dependencies=api_dependencies
)
app.include_router(
    admin_reviews.router,
    prefix="/api/admin/reviews",
    tags=["Review Moderation"],
    dependencies=api_dependencies,
)
app.include_router(users.router, prefix="/api/users", tags=["Users"], dependencies=api_dependencies)

if settings.STORAGE_BACKEND == "local":
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    app.mount(LOCAL_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "status": "running",
    }
