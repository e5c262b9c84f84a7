"""
Access policies — who may read or write which rows.

Each predicate takes the acting ``Caller`` (and the target row where one is
involved) and returns a bool. Services call ``require`` before touching
storage.
"""

from dataclasses import dataclass
from typing import Optional

from app.errors import PermissionDenied, Unauthenticated
from app.models.event_vote import EventVote
from app.models.job import Job
from app.models.profile import Profile, UserRole


@dataclass(frozen=True)
class Caller:
    user_id: Optional[int] = None
    role: Optional[UserRole] = None
    verified: bool = False
    is_service: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None or self.is_service

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @classmethod
    def for_profile(cls, user_id: int, profile: Optional[Profile]) -> "Caller":
        if profile is None:
            return cls(user_id=user_id)
        return cls(user_id=user_id, role=profile.role, verified=bool(profile.verified))


ANONYMOUS = Caller()
SERVICE = Caller(is_service=True)


def require(caller: Caller, allowed: bool, action: str = "do that") -> None:
    if allowed:
        return
    if not caller.is_authenticated:
        raise Unauthenticated(f"Please sign in to {action}")
    raise PermissionDenied(f"You are not allowed to {action}")


# ── Profiles ──

def can_view_profile(caller: Caller, profile: Profile) -> bool:
    if caller.is_service or caller.is_admin:
        return True
    if caller.user_id is not None and caller.user_id == profile.user_id:
        return True
    return not profile.pref_anonymous


def can_update_profile(caller: Caller, profile: Profile) -> bool:
    return caller.is_admin or (caller.user_id is not None and caller.user_id == profile.user_id)


def can_manage_profiles(caller: Caller) -> bool:
    """Role changes, verification and deletion."""
    return caller.is_admin


# ── Activity log ──

def can_view_activity(caller: Caller) -> bool:
    return caller.is_admin


def can_record_activity(caller: Caller) -> bool:
    return caller.is_authenticated


# ── Events ──

def can_manage_events(caller: Caller) -> bool:
    return caller.is_admin or caller.is_service


# ── Jobs ──

def can_view_job(caller: Caller, job: Job) -> bool:
    if job.is_active or caller.is_admin:
        return True
    return caller.user_id is not None and caller.user_id == job.posted_by


def can_create_job(caller: Caller) -> bool:
    return caller.role in (UserRole.VERIFIED_ALUMNI, UserRole.ADMIN)


def can_update_job(caller: Caller, job: Job) -> bool:
    return caller.is_admin or (caller.user_id is not None and caller.user_id == job.posted_by)


# ── Suggestions, votes, comments ──

def can_participate(caller: Caller) -> bool:
    """Create suggestions, vote and comment."""
    return caller.user_id is not None


def can_delete_vote(caller: Caller, vote: EventVote) -> bool:
    return caller.is_service or (caller.user_id is not None and caller.user_id == vote.voter_id)


def can_retire_suggestions(caller: Caller) -> bool:
    """Bulk removal of suggestions with their votes and comments."""
    return caller.is_service
