import pytest
from app.core.exceptions import AccessDeniedError, AuthenticationError, BadRequestError
from app.core.permissions import (
    Actor,
    REVIEW_POLICY,
    authorize,
    can_act_on_review,
    can_modify_goal,
    can_view_goal,
    can_view_reviews,
    can_view_team_performance,
    ensure_not_last_super_admin,
    ensure_owner_or_admin,
    ensure_team_leader_or_admin,
)
from app.models.user import UserRole


def actor(role=UserRole.MEMBER, id="u1", team_id=None):
    return Actor(id=id, email=f"{id}@example.com", role=role, team_id=team_id)


def test_authorize_admits_listed_role():
    a = actor(UserRole.ADMIN)
    assert authorize(a, [UserRole.ADMIN, UserRole.SUPER_ADMIN]) is a


def test_authorize_rejects_unlisted_role():
    with pytest.raises(AccessDeniedError) as exc:
        authorize(actor(UserRole.MEMBER), [UserRole.ADMIN])
    assert "MEMBER" in exc.value.message


def test_authorize_empty_roles_admits_any_actor():
    assert authorize(actor(UserRole.SUB_LEADER), []).role == UserRole.SUB_LEADER


def test_authorize_without_actor_is_unauthorized():
    with pytest.raises(AuthenticationError):
        authorize(None, [])


def test_roles_are_not_hierarchical():
    """SUPER_ADMIN is not implicitly allowed where only ADMIN is listed."""
    with pytest.raises(AccessDeniedError):
        authorize(actor(UserRole.SUPER_ADMIN), [UserRole.ADMIN, UserRole.LEADER])


def test_owner_or_admin():
    ensure_owner_or_admin(actor(id="me"), "me")
    ensure_owner_or_admin(actor(UserRole.ADMIN), "someone-else")
    with pytest.raises(AccessDeniedError):
        ensure_owner_or_admin(actor(id="me"), "someone-else")


def test_team_leader_or_admin():
    for role in (UserRole.ADMIN, UserRole.SUPER_ADMIN, UserRole.LEADER, UserRole.SUB_LEADER):
        ensure_team_leader_or_admin(actor(role))
    with pytest.raises(AccessDeniedError):
        ensure_team_leader_or_admin(actor(UserRole.MEMBER))


def test_last_super_admin_guard():
    with pytest.raises(BadRequestError) as exc:
        ensure_not_last_super_admin(UserRole.SUPER_ADMIN, 1, "delete")
    assert exc.value.message == "Cannot delete the last Super Admin"

    ensure_not_last_super_admin(UserRole.SUPER_ADMIN, 2, "delete")
    ensure_not_last_super_admin(UserRole.ADMIN, 1, "change role of")


def test_goal_view_rules():
    assert can_view_goal(actor(UserRole.ADMIN), "owner", None)
    assert can_view_goal(actor(id="owner"), "owner", None)
    assert can_view_goal(actor(team_id="t1"), "owner", "t1")
    assert not can_view_goal(actor(team_id="t2"), "owner", "t1")
    assert not can_view_goal(actor(), "owner", None)


def test_goal_modify_requires_leader_for_teammates():
    assert can_modify_goal(actor(UserRole.LEADER, team_id="t1"), "owner", "t1")
    assert not can_modify_goal(actor(UserRole.SUB_LEADER, team_id="t1"), "owner", "t1")
    assert not can_modify_goal(actor(UserRole.MEMBER, team_id="t1"), "owner", "t1")
    assert not can_modify_goal(actor(UserRole.LEADER, team_id="t2"), "owner", "t1")


def test_review_visibility():
    assert can_view_reviews(actor(id="reviewee"), "reviewee", None)
    assert can_view_reviews(actor(UserRole.ADMIN), "reviewee", None)
    assert can_view_reviews(actor(UserRole.LEADER, id="lead"), "reviewee", "lead")
    assert not can_view_reviews(actor(UserRole.LEADER, id="lead"), "reviewee", "other-lead")
    # reviewee without a team is hidden from non-admins
    assert not can_view_reviews(actor(UserRole.LEADER, id="lead"), "reviewee", None)


def test_review_policy_create_is_admin_only():
    assert REVIEW_POLICY["create"].reviewer is False
    assert can_act_on_review(actor(UserRole.ADMIN), "create")
    assert not can_act_on_review(actor(UserRole.LEADER, id="rev"), "create", reviewer_id="rev")


def test_review_policy_update_allows_reviewer():
    assert can_act_on_review(actor(UserRole.MEMBER, id="rev"), "update", reviewer_id="rev")
    assert can_act_on_review(actor(UserRole.SUPER_ADMIN), "finalize", reviewer_id="rev")
    assert not can_act_on_review(actor(UserRole.LEADER, id="x"), "update", reviewer_id="rev")
    assert not can_act_on_review(actor(UserRole.MEMBER, id="x"), "update", reviewer_id=None)


def test_team_performance_visibility():
    assert can_view_team_performance(actor(UserRole.ADMIN), None)
    assert can_view_team_performance(actor(UserRole.LEADER, id="lead"), "lead")
    assert not can_view_team_performance(actor(UserRole.SUB_LEADER, id="sub"), "lead")
