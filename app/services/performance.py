"""
Performance Review Service Layer

Review CRUD plus the read models built from reviews: an employee's history
with their average score, a team's member ranking, the organisation-wide
employee overview and the weekly / per-team aggregates. All scores go
through app.services.scoring.
"""
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from app.core.exceptions import AccessDeniedError, BadRequestError, NotFoundError
from app.core.permissions import (
    Actor,
    can_act_on_review,
    can_view_reviews,
    can_view_team_performance,
)
from app.models.performance_metric import PerformanceMetric
from app.models.performance_review import (
    FROZEN_REVIEW_FIELDS,
    LOCKED_AFTER_FINALIZE,
    PerformanceReview,
    ReviewStatus,
)
from app.models.team import Team
from app.models.user import User
from app.schemas.performance import (
    EmployeeMetrics,
    EmployeeOverview,
    EmployeePerformance,
    MemberPerformance,
    MetricIn,
    OverallPerformance,
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
    TeamMetrics,
    TeamPerformance,
    TeamScore,
    WeeklyScore,
)
from app.schemas.user import UserSummary
from app.services import scoring
from app.services.base import BaseService
from app.services.notification import NotificationService


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is None:
        return value
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc)
    return value.replace(tzinfo=timezone.utc)


class PerformanceService(BaseService):
    not_found_message = "Performance review not found"

    def get(self, review_id: str) -> PerformanceReview:
        return self.get_or_404(PerformanceReview, review_id)

    # --- Queries ---

    def _reviews_for(self, user_ids: List[str], finalized_only: bool = False) -> List[PerformanceReview]:
        if not user_ids:
            return []
        query = self.db.query(PerformanceReview).filter(PerformanceReview.reviewee_id.in_(user_ids))
        if finalized_only:
            query = query.filter(PerformanceReview.is_finalized.is_(True))
        return query.order_by(PerformanceReview.review_date.desc()).all()

    @staticmethod
    def _group_by_reviewee(reviews: List[PerformanceReview]) -> Dict[str, List[PerformanceReview]]:
        grouped: Dict[str, List[PerformanceReview]] = defaultdict(list)
        for review in reviews:
            grouped[review.reviewee_id].append(review)
        return grouped

    def employee_performance(
        self, actor: Actor, employee_id: str, offset: int, limit: int
    ) -> Tuple[EmployeePerformance, int]:
        employee = self.db.get(User, employee_id)
        if employee is None and actor.is_admin:
            raise NotFoundError("Employee not found")
        # Missing and hidden employees look the same to non-admins
        team = self.db.get(Team, employee.team_id) if employee is not None and employee.team_id else None
        if employee is None or not can_view_reviews(actor, employee.id, team.leader_id if team else None):
            raise AccessDeniedError("You do not have permission to view these performance reviews")

        reviews = self._reviews_for([employee.id])
        metrics = EmployeeMetrics(
            average_score=scoring.employee_average(review.overall_rating for review in reviews),
            review_count=len(reviews),
            last_review_date=reviews[0].review_date if reviews else None,
        )
        page = [ReviewResponse.model_validate(review) for review in reviews[offset:offset + limit]]
        result = EmployeePerformance(
            employee=UserSummary.model_validate(employee),
            metrics=metrics,
            reviews=page,
        )
        return result, len(reviews)

    def team_performance(self, actor: Actor, team_id: str, period: str = "current") -> TeamPerformance:
        team = self.db.get(Team, team_id)
        if team is None and actor.is_admin:
            raise NotFoundError("Team not found")
        if team is None or not can_view_team_performance(actor, team.leader_id):
            raise AccessDeniedError("You do not have permission to view performance data for this team")

        members = team.active_members
        if not members:
            raise NotFoundError("No active team members found for this team")

        reviews = self._reviews_for([member.id for member in members], finalized_only=True)
        by_member = self._group_by_reviewee(reviews)

        rows = []
        for member in members:
            member_reviews = by_member.get(member.id, [])
            rows.append(MemberPerformance(
                id=member.id,
                display_name=member.display_name,
                email=member.email,
                role=member.role.value,
                total_reviews=len(member_reviews),
                average_score=scoring.employee_average(review.overall_rating for review in member_reviews),
                last_review=member_reviews[0].review_date if member_reviews else None,
                status="REVIEWED" if member_reviews else "PENDING",
            ))
        rows = scoring.sort_by_score(rows, key=lambda row: row.average_score)

        reviewed = sum(1 for row in rows if row.total_reviews > 0)
        return TeamPerformance(
            team_id=team.id,
            team_name=team.name,
            metrics=TeamMetrics(
                average_score=scoring.team_average([row.average_score for row in rows]),
                total_members=len(members),
                total_reviews=len(reviews),
                active_reviews=len(reviews),
                active_rate=round(reviewed / len(members) * 100, 1),
                members_with_reviews=reviewed,
            ),
            members=rows,
            period=period,
        )

    def employees_overview(self) -> List[EmployeeOverview]:
        users = (
            self.db.query(User)
            .filter(User.is_active.is_(True))
            .order_by(User.display_name)
            .all()
        )
        by_user = self._group_by_reviewee(self._reviews_for([user.id for user in users]))
        overview = []
        for user in users:
            user_reviews = by_user.get(user.id, [])
            overview.append(EmployeeOverview(
                employee=UserSummary.model_validate(user),
                team_id=user.team_id,
                average_score=scoring.employee_average(review.overall_rating for review in user_reviews),
                review_count=len(user_reviews),
                latest_review=ReviewResponse.model_validate(user_reviews[0]) if user_reviews else None,
            ))
        return scoring.sort_by_score(overview, key=lambda row: row.average_score)

    def weekly(self, weeks: int = 8, now: Optional[datetime] = None) -> List[WeeklyScore]:
        """Average score of finalized reviews per ISO week, oldest first, empty weeks included."""
        now = now or datetime.now(timezone.utc)
        current_week = (now - timedelta(days=now.weekday())).replace(hour=0, minute=0, second=0, microsecond=0)
        first_week = current_week - timedelta(weeks=weeks - 1)

        reviews = (
            self.db.query(PerformanceReview)
            .filter(
                PerformanceReview.is_finalized.is_(True),
                PerformanceReview.review_date >= first_week,
            )
            .all()
        )
        buckets: Dict[datetime, List[int]] = {first_week + timedelta(weeks=i): [] for i in range(weeks)}
        for review in reviews:
            reviewed_at = as_utc(review.review_date)
            week_start = (reviewed_at - timedelta(days=reviewed_at.weekday())).replace(
                hour=0, minute=0, second=0, microsecond=0
            )
            if week_start in buckets:
                buckets[week_start].append(scoring.map_rating_to_score(review.overall_rating))

        return [
            WeeklyScore(week_start=week_start, average_score=scoring.average(scores), review_count=len(scores))
            for week_start, scores in sorted(buckets.items())
        ]

    def overall(self) -> OverallPerformance:
        teams = self.db.query(Team).filter(Team.is_active.is_(True)).order_by(Team.name).all()
        team_scores = []
        total_reviews = 0
        for team in teams:
            members = team.active_members
            by_member = self._group_by_reviewee(
                self._reviews_for([member.id for member in members], finalized_only=True)
            )
            total_reviews += sum(len(reviews) for reviews in by_member.values())
            member_averages = [
                scoring.employee_average(review.overall_rating for review in by_member.get(member.id, []))
                for member in members
            ]
            team_scores.append(TeamScore(
                team_id=team.id,
                team_name=team.name,
                average_score=scoring.team_average(member_averages),
                member_count=len(members),
            ))

        team_scores = scoring.sort_by_score(team_scores, key=lambda row: row.average_score)
        return OverallPerformance(
            average_score=scoring.average([row.average_score for row in team_scores]),
            total_reviews=total_reviews,
            teams=team_scores,
        )

    # --- Commands ---

    @staticmethod
    def _metric_rows(metrics: List[MetricIn]) -> List[PerformanceMetric]:
        return [PerformanceMetric(**metric.model_dump()) for metric in metrics]

    def create(self, actor: Actor, data: ReviewCreate) -> PerformanceReview:
        if not can_act_on_review(actor, "create"):
            raise AccessDeniedError("You do not have permission to create performance reviews")

        reviewee = self.db.get(User, data.reviewee_id)
        if reviewee is None or not reviewee.is_active:
            raise NotFoundError("Reviewee not found")
        reviewer_id = data.reviewer_id or actor.id
        if self.db.get(User, reviewer_id) is None:
            raise NotFoundError("Reviewer not found")

        review = PerformanceReview(
            **data.model_dump(exclude={"metrics", "reviewer_id"}),
            reviewer_id=reviewer_id,
        )
        review.metrics = self._metric_rows(data.metrics)
        self.db.add(review)
        self.commit()
        self.db.refresh(review)
        self.logger.info("Performance review created", extra={"review_id": review.id, "reviewee_id": reviewee.id})
        return review

    def update(self, actor: Actor, review_id: str, data: ReviewUpdate) -> PerformanceReview:
        review = self.get(review_id)
        if not can_act_on_review(actor, "update", review.reviewer_id):
            raise AccessDeniedError("You are not authorized to update this review")

        changes = data.model_dump(exclude_unset=True, exclude={"metrics"})
        if changes.get("status") is None:
            changes.pop("status", None)
        touches_frozen = (
            any(field in changes for field in FROZEN_REVIEW_FIELDS)
            or any(field in changes and changes[field] != getattr(review, field) for field in LOCKED_AFTER_FINALIZE)
            or data.metrics is not None
        )
        if review.is_finalized and not actor.is_admin and touches_frozen:
            raise BadRequestError("Cannot modify a finalized performance review")

        if "reviewer_id" in changes and changes["reviewer_id"] and self.db.get(User, changes["reviewer_id"]) is None:
            raise NotFoundError("Reviewer not found")

        for field, value in changes.items():
            setattr(review, field, value)
        if data.metrics is not None:
            review.metrics = self._metric_rows(data.metrics)
        self.commit()
        self.db.refresh(review)
        return review

    def delete(self, actor: Actor, review_id: str) -> None:
        review = self.get(review_id)
        if not can_act_on_review(actor, "delete", review.reviewer_id):
            raise AccessDeniedError("You do not have permission to delete performance reviews")
        self.db.delete(review)
        self.commit()

    def finalize(self, actor: Actor, review_id: str) -> PerformanceReview:
        review = self.get(review_id)
        if not can_act_on_review(actor, "finalize", review.reviewer_id):
            raise AccessDeniedError("You are not authorized to finalize this review")
        if review.is_finalized:
            raise BadRequestError("Performance review is already finalized")

        review.is_finalized = True
        review.finalized_at = datetime.now(timezone.utc)
        review.status = ReviewStatus.COMPLETED
        self.commit()
        self.db.refresh(review)

        NotificationService.notify_performance_update(
            self.db,
            review.reviewee_id,
            title="Performance review finalized",
            message="Your performance review has been finalized and is ready to view.",
            link=f"/performance/reviews/{review.id}",
        )
        self.logger.info("Performance review finalized", extra={"review_id": review.id})
        return review
