import pytest

from app.errors import PermissionDenied, Unauthenticated
from app.models.event_vote import EventVote
from app.models.job import Job
from app.models.profile import Profile, UserRole
from app.policies import (
    ANONYMOUS,
    SERVICE,
    Caller,
    can_create_job,
    can_delete_vote,
    can_manage_events,
    can_participate,
    can_retire_suggestions,
    can_update_profile,
    can_view_job,
    can_view_profile,
    require,
)

ALUMNUS = Caller(user_id=1, role=UserRole.ALUMNI)
VERIFIED = Caller(user_id=2, role=UserRole.VERIFIED_ALUMNI, verified=True)
ADMIN = Caller(user_id=3, role=UserRole.ADMIN)


def test_require_distinguishes_anonymous_from_forbidden():
    with pytest.raises(Unauthenticated):
        require(ANONYMOUS, False, "vote")
    with pytest.raises(PermissionDenied):
        require(ALUMNUS, False, "vote")
    require(ALUMNUS, True, "vote")


def test_only_signed_in_users_participate():
    assert can_participate(ALUMNUS)
    assert not can_participate(ANONYMOUS)
    assert not can_participate(SERVICE)


def test_votes_are_removed_by_their_owner_or_the_service():
    vote = EventVote(suggestion_id=1, voter_id=1)
    assert can_delete_vote(ALUMNUS, vote)
    assert can_delete_vote(SERVICE, vote)
    assert not can_delete_vote(VERIFIED, vote)
    assert not can_delete_vote(ADMIN, vote)


def test_event_management_and_retirement():
    assert can_manage_events(ADMIN)
    assert can_manage_events(SERVICE)
    assert not can_manage_events(VERIFIED)
    assert can_retire_suggestions(SERVICE)
    assert not can_retire_suggestions(ADMIN)


def test_anonymous_profiles_are_hidden_from_others():
    profile = Profile(user_id=1, full_name="Hidden", pref_anonymous=True)
    assert can_view_profile(ALUMNUS, profile)
    assert can_view_profile(ADMIN, profile)
    assert not can_view_profile(VERIFIED, profile)
    assert not can_view_profile(ANONYMOUS, profile)


def test_profile_updates_by_owner_or_admin():
    profile = Profile(user_id=1, full_name="Owner")
    assert can_update_profile(ALUMNUS, profile)
    assert can_update_profile(ADMIN, profile)
    assert not can_update_profile(VERIFIED, profile)


def test_job_posting_and_visibility():
    assert can_create_job(VERIFIED)
    assert can_create_job(ADMIN)
    assert not can_create_job(ALUMNUS)

    closed = Job(title="Engineer", company="Acme", posted_by=2, is_active=False)
    assert can_view_job(VERIFIED, closed)
    assert can_view_job(ADMIN, closed)
    assert not can_view_job(ALUMNUS, closed)


def test_caller_for_profile():
    profile = Profile(user_id=5, full_name="X", role=UserRole.ADMIN, verified=True)
    caller = Caller.for_profile(5, profile)
    assert caller.is_admin and caller.verified
    assert Caller.for_profile(6, None) == Caller(user_id=6)
