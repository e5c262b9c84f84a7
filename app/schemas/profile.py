"""Profile Pydantic schemas — self-service edits, admin changes, directory output."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, EmailStr

from app.models.profile import ContactMethod, UserRole


class ProfileOut(BaseModel):
    """Full profile as seen by its owner or an admin."""
    id: int
    user_id: int
    full_name: str
    role: Optional[UserRole] = None
    email_verified: bool = False
    verified: bool = False
    graduation_year: Optional[int] = None
    department: Optional[str] = None
    location: Optional[str] = None
    industry: Optional[str] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    linkedin_url: Optional[str] = None
    bio: Optional[str] = None
    profile_picture_url: Optional[str] = None
    skills: List[str] = []
    contact_email: Optional[str] = None
    contact_linkedin: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_whatsapp: Optional[str] = None
    primary_contact_method: Optional[ContactMethod] = None
    show_email: bool = False
    show_linkedin: bool = True
    show_phone: bool = False
    show_whatsapp: bool = False
    pref_anonymous: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    """Fields an alumnus may change on their own profile."""
    full_name: Optional[str] = None
    graduation_year: Optional[int] = None
    department: Optional[str] = None
    location: Optional[str] = None
    industry: Optional[str] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    linkedin_url: Optional[str] = None
    bio: Optional[str] = None
    profile_picture_url: Optional[str] = None
    skills: Optional[List[str]] = None
    contact_email: Optional[EmailStr] = None
    contact_linkedin: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_whatsapp: Optional[str] = None
    primary_contact_method: Optional[ContactMethod] = None
    show_email: Optional[bool] = None
    show_linkedin: Optional[bool] = None
    show_phone: Optional[bool] = None
    show_whatsapp: Optional[bool] = None
    pref_anonymous: Optional[bool] = None


class RoleUpdate(BaseModel):
    role: UserRole


class VerificationUpdate(BaseModel):
    verified: bool


class DirectoryEntry(BaseModel):
    """Public directory card: only the contact channels the alumnus shares."""
    id: int
    full_name: str
    graduation_year: Optional[int] = None
    department: Optional[str] = None
    location: Optional[str] = None
    industry: Optional[str] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    bio: Optional[str] = None
    profile_picture_url: Optional[str] = None
    skills: List[str] = []
    verified: bool = False
    role: Optional[UserRole] = None
    contacts: Dict[str, str] = {}
    primary_contact_method: Optional[ContactMethod] = None


class DirectoryPage(BaseModel):
    profiles: List[DirectoryEntry]
    total: int
    shown: int
    industries: List[str]
    years: List[int]
    locations: List[str]
