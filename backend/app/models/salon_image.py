from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, func

from app.core.database import Base


class SalonImageType(str, Enum):
    COVER = "cover"
    GALLERY = "gallery"
    LOGO = "logo"


class SalonImage(Base):
    __tablename__ = "salon_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    salon_id = Column(
        Integer, ForeignKey("salons.id", ondelete="CASCADE"), nullable=False, index=True
    )
    image_url = Column(Text, nullable=False)
    is_primary = Column(Boolean, nullable=False, default=False)
    type = Column(String(20), nullable=False, default=SalonImageType.GALLERY.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
