"""
Admin router — profile management for admins.

Endpoints:
    GET    /admin/profiles                     → filtered list + summary counts
    GET    /admin/profiles/export              → CSV download
    PATCH  /admin/profiles/{id}/role           → change role
    PATCH  /admin/profiles/{id}/verification   → verify / unverify
    DELETE /admin/profiles/{id}                → delete profile
    GET    /admin/activity                     → latest activity log entries
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.profile import UserRole
from app.policies import Caller
from app.routers.auth import get_caller
from app.schemas.admin import ActivityOut, AdminProfilePage
from app.schemas.profile import ProfileOut, RoleUpdate, VerificationUpdate
from app.services import admin as admin_service
from app.services.realtime import ChangeBus, get_change_bus

router = APIRouter(prefix="/admin", tags=["admin"])


def _meta(request: Request) -> admin_service.RequestMeta:
    return admin_service.RequestMeta(
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


@router.get("/profiles", response_model=AdminProfilePage)
async def list_profiles(
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
    verification: Optional[str] = Query(None, pattern="^(verified|unverified)$"),
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await admin_service.list_profiles(db, caller, search, role, verification)


@router.get("/profiles/export")
async def export_profiles(
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    csv_text = await admin_service.export_profiles(db, caller)
    filename = f"alumni-data-{date.today().isoformat()}.csv"
    return Response(
        csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.patch("/profiles/{profile_id}/role", response_model=ProfileOut)
async def update_role(
    profile_id: int,
    body: RoleUpdate,
    request: Request,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
    bus: ChangeBus = Depends(get_change_bus),
):
    return await admin_service.set_role(db, caller, profile_id, body.role, _meta(request), bus)


@router.patch("/profiles/{profile_id}/verification", response_model=ProfileOut)
async def update_verification(
    profile_id: int,
    body: VerificationUpdate,
    request: Request,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
    bus: ChangeBus = Depends(get_change_bus),
):
    return await admin_service.set_verification(
        db, caller, profile_id, body.verified, _meta(request), bus
    )


@router.delete("/profiles/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_profile(
    profile_id: int,
    request: Request,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
    bus: ChangeBus = Depends(get_change_bus),
):
    await admin_service.delete_profile(db, caller, profile_id, _meta(request), bus)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/activity", response_model=List[ActivityOut])
async def activity(
    limit: int = Query(50, ge=1, le=500),
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await admin_service.list_activity(db, caller, limit)
