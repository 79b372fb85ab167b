from datetime import datetime, timedelta, timezone

import pytest
from fastapi import status

from app.models.performance_metric import PerformanceMetric
from app.models.performance_review import PerformanceRating, PerformanceReview
from app.models.user import UserRole
from app.services.kpis import last_months

API = "/api/v1/kpis/team"


@pytest.fixture
def kpi_team(db_session, make_user, make_team):
    """A leader plus three members: one recent review, one old review, one draft."""
    leader = make_user(UserRole.LEADER, display_name="Lead")
    team = make_team(name="Platform", leader=leader)
    recent = make_user(team=team, display_name="Recent")
    old = make_user(team=team, display_name="Old")
    drafted = make_user(team=team, display_name="Drafted")
    now = datetime.now(timezone.utc)

    review = PerformanceReview(
        reviewee_id=recent.id,
        overall_rating=PerformanceRating.EXCEEDS_EXPECTATIONS,
        is_finalized=True,
        review_date=now - timedelta(days=2),
    )
    review.metrics = [
        PerformanceMetric(name="Quality", rating=PerformanceRating.EXCEEDS_EXPECTATIONS),
        PerformanceMetric(name="Delivery", rating=PerformanceRating.MEETS_EXPECTATIONS),
    ]
    db_session.add_all([
        review,
        PerformanceReview(
            reviewee_id=old.id,
            overall_rating=PerformanceRating.NEEDS_IMPROVEMENT,
            is_finalized=True,
            review_date=now - timedelta(days=60),
        ),
        PerformanceReview(
            reviewee_id=drafted.id,
            overall_rating=PerformanceRating.MEETS_EXPECTATIONS,
            is_finalized=False,
            review_date=now - timedelta(days=1),
        ),
    ])
    db_session.commit()
    return team, leader


def test_monthly_kpis_for_admin(client, admin_user, kpi_team, auth_headers):
    team, _ = kpi_team
    response = client.get(API, params={"teamId": team.id}, headers=auth_headers(admin_user))
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]

    assert data["teamName"] == "Platform"
    assert data["period"] == "month"
    assert data["totalMembers"] == 4
    assert data["totalReviews"] == 1
    assert data["averageScore"] == 22.5
    assert data["completionRate"] == 25.0
    assert data["scoreDistribution"] == {"excellent": 1, "good": 0, "average": 0, "poor": 0}
    assert data["byCategory"] == {"Delivery": 75.0, "Quality": 90.0}
    assert data["members"][0]["displayName"] == "Recent"
    assert data["members"][0]["overallScore"] == 90.0
    assert len(data["trend"]) == 6


def test_all_time_window_counts_older_reviews(client, admin_user, kpi_team, auth_headers):
    team, _ = kpi_team
    response = client.get(API, params={"teamId": team.id, "period": "all"}, headers=auth_headers(admin_user))
    data = response.json()["data"]
    assert data["totalReviews"] == 2
    assert data["completionRate"] == 50.0
    assert data["averageScore"] == 37.5
    assert data["scoreDistribution"] == {"excellent": 1, "good": 0, "average": 1, "poor": 0}


def test_leader_is_pinned_to_own_team(client, make_team, kpi_team, auth_headers):
    team, leader = kpi_team
    other = make_team(name="Elsewhere")
    response = client.get(API, params={"teamId": other.id}, headers=auth_headers(leader))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["teamId"] == team.id


def test_admin_must_name_a_team(client, admin_user, auth_headers):
    response = client.get(API, headers=auth_headers(admin_user))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "Team ID is required"


def test_leader_without_team(client, make_user, auth_headers):
    leader = make_user(UserRole.LEADER)
    response = client.get(API, headers=auth_headers(leader))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "You are not assigned to a team"


@pytest.mark.parametrize("role", [UserRole.MEMBER, UserRole.SUB_LEADER])
def test_other_roles_are_forbidden(client, make_user, auth_headers, role):
    response = client.get(API, headers=auth_headers(make_user(role)))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_unknown_period_rejected(client, admin_user, kpi_team, auth_headers):
    team, _ = kpi_team
    response = client.get(API, params={"teamId": team.id, "period": "decade"}, headers=auth_headers(admin_user))
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_empty_team_has_zero_scores(client, admin_user, make_team, auth_headers):
    response = client.get(API, params={"teamId": make_team().id}, headers=auth_headers(admin_user))
    data = response.json()["data"]
    assert data["totalMembers"] == 0
    assert data["averageScore"] == 0
    assert data["completionRate"] == 0


def test_last_months_wraps_year():
    assert last_months(datetime(2024, 2, 15), 4) == ["2023-11", "2023-12", "2024-01", "2024-02"]
