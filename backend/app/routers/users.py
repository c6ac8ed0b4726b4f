"""Current-user endpoint."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.auth import Principal, get_current_principal
from app.core.database import get_db
from app.repositories.user_repository import UserRepository
from app.schemas.common import Envelope
from app.schemas.user import UserResponse

router = APIRouter()


@router.get(
    "/me",
    response_model=Envelope[UserResponse],
    summary="Get current user",
    responses={
        401: {"description": "Unauthorized"},
        404: {"description": "User not found"},
    },
)
async def get_me(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Envelope[UserResponse]:
    user = UserRepository(db).get_by_id(principal.id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return Envelope(data=UserResponse.model_validate(user))
