from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from app.core.exceptions import AccessDeniedError, BadRequestError
from app.core.permissions import Actor
from app.models.performance_review import PerformanceReview
from app.models.team import Team
from app.models.user import UserRole
from app.schemas.kpi import KpiMember, TeamKpis, TrendPoint
from app.services import scoring
from app.services.base import BaseService
from app.services.performance import as_utc

PERIOD_DAYS: Dict[str, Optional[int]] = {
    "week": 7,
    "month": 30,
    "quarter": 90,
    "year": 365,
    "all": None,
}

TREND_MONTHS = 6


def month_key(value: datetime) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def last_months(now: datetime, count: int) -> List[str]:
    keys = []
    year, month = now.year, now.month
    for _ in range(count):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


class KpiService(BaseService):
    not_found_message = "Team not found"

    def resolve_team_id(self, actor: Actor, team_id: Optional[str]) -> str:
        """Admins pick any team; leaders are pinned to their own."""
        if actor.is_admin:
            if not team_id:
                raise BadRequestError("Team ID is required")
            return team_id
        if actor.role == UserRole.LEADER:
            if not actor.team_id:
                raise BadRequestError("You are not assigned to a team")
            return actor.team_id
        raise AccessDeniedError(f"User role {actor.role.value} is not authorized to access this route")

    def team_kpis(
        self, actor: Actor, team_id: Optional[str], period: str = "month", now: Optional[datetime] = None
    ) -> TeamKpis:
        now = now or datetime.now(timezone.utc)
        team = self.get_or_404(Team, self.resolve_team_id(actor, team_id))
        members = team.active_members
        member_ids = [member.id for member in members]

        reviews: List[PerformanceReview] = []
        if member_ids:
            reviews = (
                self.db.query(PerformanceReview)
                .filter(
                    PerformanceReview.reviewee_id.in_(member_ids),
                    PerformanceReview.is_finalized.is_(True),
                )
                .order_by(PerformanceReview.review_date.desc())
                .all()
            )

        days = PERIOD_DAYS[period]
        since = now - timedelta(days=days) if days is not None else None
        in_window = [r for r in reviews if since is None or as_utc(r.review_date) >= since]

        by_member: Dict[str, List[PerformanceReview]] = defaultdict(list)
        for review in in_window:
            by_member[review.reviewee_id].append(review)

        rows = []
        for member in members:
            member_reviews = by_member.get(member.id, [])
            rows.append(KpiMember(
                id=member.id,
                display_name=member.display_name,
                role=member.role.value,
                overall_score=scoring.employee_average(r.overall_rating for r in member_reviews),
                completed_reviews=len(member_reviews),
                last_review_date=member_reviews[0].review_date if member_reviews else None,
            ))
        rows = scoring.sort_by_score(rows, key=lambda row: row.overall_score)
        reviewed = [row for row in rows if row.completed_reviews > 0]

        return TeamKpis(
            team_id=team.id,
            team_name=team.name,
            period=period,
            average_score=scoring.team_average([row.overall_score for row in rows]),
            completion_rate=round(len(reviewed) / len(rows) * 100, 1) if rows else 0,
            total_members=len(rows),
            total_reviews=len(in_window),
            score_distribution=scoring.score_distribution(row.overall_score for row in reviewed),
            by_category=self._by_category(in_window),
            trend=self._trend(reviews, now),
            members=rows,
        )

    @staticmethod
    def _by_category(reviews: List[PerformanceReview]) -> Dict[str, float]:
        scores: Dict[str, List[int]] = defaultdict(list)
        for review in reviews:
            for metric in review.metrics:
                scores[metric.name].append(scoring.map_rating_to_score(metric.rating))
        return {name: scoring.average(values) for name, values in sorted(scores.items())}

    @staticmethod
    def _trend(reviews: List[PerformanceReview], now: datetime) -> List[TrendPoint]:
        months = last_months(now, TREND_MONTHS)
        buckets: Dict[str, List[int]] = {key: [] for key in months}
        for review in reviews:
            key = month_key(as_utc(review.review_date))
            if key in buckets:
                buckets[key].append(scoring.map_rating_to_score(review.overall_rating))
        return [TrendPoint(period=key, average_score=scoring.average(buckets[key])) for key in months]
