"""
Profile router — self-service profile reads and edits.

Endpoints:
    GET   /profile              → own profile
    PATCH /profile              → update own profile fields
    GET   /profile/{profile_id} → another alumnus's profile (if visible)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.policies import Caller
from app.routers.auth import get_caller
from app.schemas.profile import ProfileOut, ProfileUpdate
from app.services import profiles as profile_service
from app.services.directory import to_directory_entry
from app.services.realtime import ChangeBus, get_change_bus

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileOut)
async def own_profile(
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await profile_service.get_own_profile(db, caller)


@router.patch("", response_model=ProfileOut)
async def update_profile(
    body: ProfileUpdate,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
    bus: ChangeBus = Depends(get_change_bus),
):
    return await profile_service.update_own_profile(db, caller, body, bus)


@router.get("/{profile_id}")
async def view_profile(
    profile_id: int,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """Owners and admins get the full record; everyone else the directory card."""
    profile = await profile_service.get_profile(db, caller, profile_id)
    if caller.is_admin or caller.user_id == profile.user_id:
        return ProfileOut.model_validate(profile)
    return to_directory_entry(profile)
