"""User model: customers, salon owners and administrators."""

from enum import Enum

from sqlalchemy import Column, DateTime, Integer, String, func

from app.core.database import Base


class UserRole(str, Enum):
    CUSTOMER = "customer"
    SALON_OWNER = "salon_owner"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=True)
    email = Column(String(255), unique=True, nullable=True)
    phone = Column(String(20), unique=True, nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.CUSTOMER.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
