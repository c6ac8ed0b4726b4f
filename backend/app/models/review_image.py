from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text, func

from app.core.database import Base


class ReviewImage(Base):
    __tablename__ = "review_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    review_id = Column(
        Integer, ForeignKey("salon_reviews.id", ondelete="CASCADE"), nullable=False, index=True
    )
    image_url = Column(Text, nullable=False)
    display_order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
