"""
Performance reviews and their per-category metrics.

A review is written by a reviewer about a reviewee. Once finalized, its
rating, written feedback, status and reviewer are frozen for everyone except
admins.
"""
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Boolean, Enum
from sqlalchemy.orm import relationship
import enum
from app.database import Base, generate_uuid, utcnow


class PerformanceRating(str, enum.Enum):
    EXCEEDS_EXPECTATIONS = "EXCEEDS_EXPECTATIONS"
    MEETS_EXPECTATIONS = "MEETS_EXPECTATIONS"
    NEEDS_IMPROVEMENT = "NEEDS_IMPROVEMENT"
    UNSATISFACTORY = "UNSATISFACTORY"


class ReviewStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Fields a non-admin may not touch once the review is finalized
FROZEN_REVIEW_FIELDS = (
    "overall_rating",
    "strengths",
    "areas_for_improvement",
    "goals_for_next_period",
    "feedback",
)

# Workflow fields a non-admin may resend but not change on a finalized review
LOCKED_AFTER_FINALIZE = ("status", "reviewer_id")


class PerformanceReview(Base):
    __tablename__ = "performance_reviews"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    reviewee_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewer_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    overall_rating = Column(Enum(PerformanceRating), nullable=True)
    strengths = Column(Text, nullable=True)
    areas_for_improvement = Column(Text, nullable=True)
    goals_for_next_period = Column(Text, nullable=True)
    feedback = Column(Text, nullable=True)
    status = Column(Enum(ReviewStatus), default=ReviewStatus.DRAFT, nullable=False)

    review_period_start = Column(DateTime(timezone=True), nullable=True)
    review_period_end = Column(DateTime(timezone=True), nullable=True)
    review_date = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    due_date = Column(DateTime(timezone=True), nullable=True)

    is_finalized = Column(Boolean, default=False, nullable=False)
    finalized_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    reviewee = relationship("User", foreign_keys=[reviewee_id])
    reviewer = relationship("User", foreign_keys=[reviewer_id])
    metrics = relationship(
        "PerformanceMetric",
        back_populates="review",
        cascade="all, delete-orphan",
        order_by="PerformanceMetric.name",
    )
