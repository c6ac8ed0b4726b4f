"""User repository for data access."""

from sqlalchemy.orm import Session

from app.models.user import User
from app.schemas.user import UserCreate


class UserRepository:
    """Repository for User model."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_names(self, user_ids: set[int]) -> dict[int, str | None]:
        """Map user id to display name for the given ids."""
        if not user_ids:
            return {}
        rows = self.db.query(User.id, User.name).filter(User.id.in_(user_ids)).all()
        return {row.id: row.name for row in rows}

    def create(self, data: UserCreate) -> User:
        user = User(
            name=data.name,
            email=data.email,
            phone=data.phone,
            role=data.role.value,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
