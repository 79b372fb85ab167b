from typing import Dict, List, Optional
from datetime import datetime
from app.core.schemas import CamelModel


class KpiMember(CamelModel):
    id: str
    display_name: str
    role: str
    overall_score: float
    completed_reviews: int
    last_review_date: Optional[datetime] = None


class TrendPoint(CamelModel):
    period: str
    average_score: float


class TeamKpis(CamelModel):
    team_id: str
    team_name: str
    period: str
    average_score: float
    completion_rate: float
    total_members: int
    total_reviews: int
    score_distribution: Dict[str, int]
    by_category: Dict[str, float]
    trend: List[TrendPoint]
    members: List[KpiMember]
