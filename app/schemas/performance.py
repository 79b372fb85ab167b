from pydantic import Field, computed_field
from typing import List, Optional
from datetime import datetime
from app.core.schemas import CamelModel
from app.models.performance_review import PerformanceRating, ReviewStatus
from app.schemas.user import UserSummary
from app.services.scoring import map_rating_to_score


class MetricIn(CamelModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    rating: Optional[PerformanceRating] = None
    weight: float = Field(default=1.0, gt=0)
    comments: Optional[str] = None


class MetricResponse(MetricIn):
    id: str


class ReviewCreate(CamelModel):
    reviewee_id: str
    reviewer_id: Optional[str] = None
    overall_rating: Optional[PerformanceRating] = None
    strengths: Optional[str] = None
    areas_for_improvement: Optional[str] = None
    goals_for_next_period: Optional[str] = None
    feedback: Optional[str] = None
    status: ReviewStatus = ReviewStatus.DRAFT
    review_period_start: Optional[datetime] = None
    review_period_end: Optional[datetime] = None
    due_date: Optional[datetime] = None
    metrics: List[MetricIn] = []


class ReviewUpdate(CamelModel):
    reviewer_id: Optional[str] = None
    overall_rating: Optional[PerformanceRating] = None
    strengths: Optional[str] = None
    areas_for_improvement: Optional[str] = None
    goals_for_next_period: Optional[str] = None
    feedback: Optional[str] = None
    status: Optional[ReviewStatus] = None
    review_period_start: Optional[datetime] = None
    review_period_end: Optional[datetime] = None
    due_date: Optional[datetime] = None
    metrics: Optional[List[MetricIn]] = None


class ReviewResponse(CamelModel):
    id: str
    reviewee_id: str
    reviewer_id: Optional[str] = None
    overall_rating: Optional[PerformanceRating] = None
    strengths: Optional[str] = None
    areas_for_improvement: Optional[str] = None
    goals_for_next_period: Optional[str] = None
    feedback: Optional[str] = None
    status: ReviewStatus
    review_period_start: Optional[datetime] = None
    review_period_end: Optional[datetime] = None
    review_date: datetime
    due_date: Optional[datetime] = None
    is_finalized: bool
    finalized_at: Optional[datetime] = None
    metrics: List[MetricResponse] = []
    reviewer: Optional[UserSummary] = None

    @computed_field
    @property
    def score(self) -> int:
        return map_rating_to_score(self.overall_rating)


class EmployeeMetrics(CamelModel):
    average_score: float
    review_count: int
    last_review_date: Optional[datetime] = None


class EmployeePerformance(CamelModel):
    employee: UserSummary
    metrics: EmployeeMetrics
    reviews: List[ReviewResponse]


class MemberPerformance(CamelModel):
    id: str
    display_name: str
    email: str
    role: str
    total_reviews: int
    average_score: float
    last_review: Optional[datetime] = None
    status: str


class TeamMetrics(CamelModel):
    average_score: float
    total_members: int
    total_reviews: int
    active_reviews: int
    active_rate: float
    members_with_reviews: int


class TeamPerformance(CamelModel):
    team_id: str
    team_name: str
    metrics: TeamMetrics
    members: List[MemberPerformance]
    period: str


class EmployeeOverview(CamelModel):
    employee: UserSummary
    team_id: Optional[str] = None
    average_score: float
    review_count: int
    latest_review: Optional[ReviewResponse] = None


class WeeklyScore(CamelModel):
    week_start: datetime
    average_score: float
    review_count: int


class TeamScore(CamelModel):
    team_id: str
    team_name: str
    average_score: float
    member_count: int


class OverallPerformance(CamelModel):
    average_score: float
    total_reviews: int
    teams: List[TeamScore]
