from sqlalchemy import Column, String, Float, Text, ForeignKey, Enum
from sqlalchemy.orm import relationship
from app.database import Base, generate_uuid
from app.models.performance_review import PerformanceRating


class PerformanceMetric(Base):
    """One rated category (e.g. "Communication") inside a review."""
    __tablename__ = "performance_metrics"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    review_id = Column(String(36), ForeignKey("performance_reviews.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    rating = Column(Enum(PerformanceRating), nullable=True)
    weight = Column(Float, default=1.0, nullable=False)
    comments = Column(Text, nullable=True)

    review = relationship("PerformanceReview", back_populates="metrics")
