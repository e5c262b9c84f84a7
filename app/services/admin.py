"""
Admin service — role and verification management, profile removal,
exports, and the activity log every admin action writes to.
"""

import csv
import io
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFound
from app.models.activity_log import ActivityLog
from app.models.profile import Profile, UserRole
from app.policies import Caller, can_manage_profiles, can_record_activity, can_view_activity, require
from app.schemas.admin import ActivityOut, AdminProfilePage, AdminSummary
from app.schemas.profile import ProfileOut
from app.services.realtime import PROFILES, ChangeBus, notify

logger = logging.getLogger(__name__)


@dataclass
class RequestMeta:
    """Where an admin action came from."""
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


# ═══════════════════════════════════════════════════════════════
#  Activity log
# ═══════════════════════════════════════════════════════════════

async def record_activity(
    db: AsyncSession,
    caller: Caller,
    action: str,
    user_id: Optional[int] = None,
    details: Optional[Dict[str, Any]] = None,
    meta: Optional[RequestMeta] = None,
) -> ActivityLog:
    require(caller, can_record_activity(caller), "record activity")
    meta = meta or RequestMeta()
    entry = ActivityLog(
        user_id=user_id,
        admin_id=caller.user_id if caller.is_admin else None,
        action=action,
        details_json=json.dumps(details or {}, default=str),
        ip_address=meta.ip_address,
        user_agent=(meta.user_agent or "")[:500] or None,
    )
    db.add(entry)
    return entry


def _activity_out(entry: ActivityLog) -> ActivityOut:
    try:
        details = json.loads(entry.details_json) if entry.details_json else {}
    except ValueError:
        details = {}
    return ActivityOut(
        id=entry.id,
        user_id=entry.user_id,
        admin_id=entry.admin_id,
        action=entry.action,
        details=details,
        ip_address=entry.ip_address,
        user_agent=entry.user_agent,
        created_at=entry.created_at,
    )


async def list_activity(db: AsyncSession, caller: Caller, limit: int = 50) -> List[ActivityOut]:
    require(caller, can_view_activity(caller), "view the activity log")
    result = await db.execute(
        select(ActivityLog).order_by(desc(ActivityLog.id)).limit(limit)
    )
    return [_activity_out(e) for e in result.scalars().all()]


# ═══════════════════════════════════════════════════════════════
#  Profiles
# ═══════════════════════════════════════════════════════════════

def _matches(profile: Profile, term: str) -> bool:
    term = term.lower()
    return any(
        value and term in value.lower()
        for value in (profile.full_name, profile.contact_email, profile.company)
    )


def summarize(profiles: List[Profile]) -> AdminSummary:
    verified = sum(1 for p in profiles if p.verified)
    return AdminSummary(
        total=len(profiles),
        verified=verified,
        unverified=len(profiles) - verified,
        anonymous=sum(1 for p in profiles if p.pref_anonymous),
    )


async def list_profiles(
    db: AsyncSession,
    caller: Caller,
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
    verification: Optional[str] = None,
) -> AdminProfilePage:
    require(caller, can_manage_profiles(caller), "manage profiles")
    result = await db.execute(
        select(Profile).order_by(desc(Profile.created_at), desc(Profile.id))
    )
    profiles = list(result.scalars().all())

    filtered = profiles
    if search and search.strip():
        filtered = [p for p in filtered if _matches(p, search.strip())]
    if role:
        filtered = [p for p in filtered if p.role == role]
    if verification == "verified":
        filtered = [p for p in filtered if p.verified]
    elif verification == "unverified":
        filtered = [p for p in filtered if not p.verified]

    return AdminProfilePage(
        profiles=[ProfileOut.model_validate(p) for p in filtered],
        summary=summarize(profiles),
        shown=len(filtered),
    )


async def _load(db: AsyncSession, profile_id: int) -> Profile:
    profile = await db.get(Profile, profile_id)
    if not profile:
        raise NotFound("Profile not found")
    return profile


async def set_role(
    db: AsyncSession,
    caller: Caller,
    profile_id: int,
    role: UserRole,
    meta: Optional[RequestMeta] = None,
    bus: Optional[ChangeBus] = None,
) -> Profile:
    require(caller, can_manage_profiles(caller), "change roles")
    profile = await _load(db, profile_id)
    previous = profile.role
    profile.role = role
    await record_activity(
        db, caller, "update_role", profile.user_id,
        {"profile_id": profile.id, "from": getattr(previous, "value", previous), "to": role.value},
        meta,
    )
    await db.commit()
    await db.refresh(profile)
    logger.info("Admin %s set role of profile %s to %s", caller.user_id, profile_id, role.value)
    await notify(bus, PROFILES, "update", profile.id)
    return profile


async def set_verification(
    db: AsyncSession,
    caller: Caller,
    profile_id: int,
    verified: bool,
    meta: Optional[RequestMeta] = None,
    bus: Optional[ChangeBus] = None,
) -> Profile:
    require(caller, can_manage_profiles(caller), "verify profiles")
    profile = await _load(db, profile_id)
    profile.verified = verified
    await record_activity(
        db, caller, "verify_profile" if verified else "unverify_profile", profile.user_id,
        {"profile_id": profile.id}, meta,
    )
    await db.commit()
    await db.refresh(profile)
    await notify(bus, PROFILES, "update", profile.id)
    return profile


async def delete_profile(
    db: AsyncSession,
    caller: Caller,
    profile_id: int,
    meta: Optional[RequestMeta] = None,
    bus: Optional[ChangeBus] = None,
) -> None:
    require(caller, can_manage_profiles(caller), "delete profiles")
    profile = await _load(db, profile_id)
    await record_activity(
        db, caller, "delete_profile", profile.user_id,
        {"profile_id": profile.id, "full_name": profile.full_name}, meta,
    )
    await db.delete(profile)
    await db.commit()
    logger.info("Admin %s deleted profile %s", caller.user_id, profile_id)
    await notify(bus, PROFILES, "delete", profile_id)


EXPORT_COLUMNS = [
    "Full Name", "Email", "Graduation Year", "Industry", "Company", "Location",
    "Role", "Verified", "Email Verified", "Anonymous", "Created At",
]


def profiles_to_csv(profiles: List[Profile]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    for p in profiles:
        writer.writerow([
            p.full_name,
            p.contact_email or "",
            p.graduation_year or "",
            p.industry or "",
            p.company or "",
            p.location or "",
            getattr(p.role, "value", p.role) or "",
            "Yes" if p.verified else "No",
            "Yes" if p.email_verified else "No",
            "Yes" if p.pref_anonymous else "No",
            p.created_at.date().isoformat() if p.created_at else "",
        ])
    return buffer.getvalue()


async def export_profiles(db: AsyncSession, caller: Caller) -> str:
    require(caller, can_manage_profiles(caller), "export profiles")
    result = await db.execute(select(Profile).order_by(desc(Profile.created_at), desc(Profile.id)))
    return profiles_to_csv(list(result.scalars().all()))
