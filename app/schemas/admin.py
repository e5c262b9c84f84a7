"""Admin panel Pydantic schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from app.schemas.profile import ProfileOut


class AdminSummary(BaseModel):
    total: int
    verified: int
    unverified: int
    anonymous: int


class AdminProfilePage(BaseModel):
    profiles: List[ProfileOut]
    summary: AdminSummary
    shown: int


class ActivityOut(BaseModel):
    id: int
    user_id: Optional[int] = None
    admin_id: Optional[int] = None
    action: str
    details: Dict[str, Any] = {}
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: Optional[datetime] = None
