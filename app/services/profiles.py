"""Profile service — first-login provisioning and self-service edits."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.errors import MissingRequiredField, NotFound
from app.models.profile import Profile, UserRole
from app.models.user import User
from app.policies import Caller, can_update_profile, can_view_profile, require
from app.schemas.profile import ProfileUpdate
from app.services.realtime import PROFILES, ChangeBus, notify

logger = logging.getLogger(__name__)

# Text columns where an empty string means "clear it".
_NULLABLE_TEXT_FIELDS = {
    "department", "location", "industry", "company", "job_title", "linkedin_url",
    "bio", "profile_picture_url", "contact_linkedin", "contact_phone", "contact_whatsapp",
}


async def get_profile_by_user(db: AsyncSession, user_id: int) -> Optional[Profile]:
    result = await db.execute(select(Profile).where(Profile.user_id == user_id))
    return result.scalar_one_or_none()


async def ensure_profile(db: AsyncSession, user: User) -> Profile:
    """Create the profile for a freshly signed-up user (no-op if it exists)."""
    profile = await get_profile_by_user(db, user.id)
    if profile:
        return profile

    role = UserRole.ADMIN if user.email.lower() in settings.admin_emails else UserRole.ALUMNI
    profile = Profile(
        user_id=user.id,
        full_name=user.full_name or user.email,
        contact_email=user.email,
        department=settings.DEFAULT_DEPARTMENT,
        profile_picture_url=user.avatar_url,
        role=role,
    )
    db.add(profile)
    await db.flush()
    logger.info("Created %s profile for user %s", role.value, user.id)
    return profile


async def get_own_profile(db: AsyncSession, caller: Caller) -> Profile:
    require(caller, caller.user_id is not None, "view your profile")
    profile = await get_profile_by_user(db, caller.user_id)
    if not profile:
        raise NotFound("Profile not found")
    return profile


async def get_profile(db: AsyncSession, caller: Caller, profile_id: int) -> Profile:
    """Fetch a profile the caller may see. Hidden profiles read as missing."""
    profile = await db.get(Profile, profile_id)
    if not profile or not can_view_profile(caller, profile):
        raise NotFound("Profile not found")
    return profile


async def update_own_profile(
    db: AsyncSession,
    caller: Caller,
    data: ProfileUpdate,
    bus: Optional[ChangeBus] = None,
) -> Profile:
    profile = await get_own_profile(db, caller)
    require(caller, can_update_profile(caller, profile), "edit this profile")

    changes = data.model_dump(exclude_unset=True)
    if "full_name" in changes:
        name = (changes.pop("full_name") or "").strip()
        if not name:
            raise MissingRequiredField("full_name")
        profile.full_name = name
    if "skills" in changes:
        profile.skills = changes.pop("skills")

    for field, value in changes.items():
        if field in _NULLABLE_TEXT_FIELDS and isinstance(value, str):
            value = value.strip() or None
        if value is None and field.startswith(("show_", "pref_", "primary_")):
            continue
        setattr(profile, field, value)

    await db.commit()
    await db.refresh(profile)
    await notify(bus, PROFILES, "update", profile.id)
    return profile
