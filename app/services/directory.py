"""Directory service — searchable listing of non-anonymous alumni."""

from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.profile import Profile
from app.schemas.profile import DirectoryEntry, DirectoryPage

# channel → (visibility flag, value attribute)
CONTACT_CHANNELS = {
    "email": ("show_email", "contact_email"),
    "phone": ("show_phone", "contact_phone"),
    "whatsapp": ("show_whatsapp", "contact_whatsapp"),
    "linkedin": ("show_linkedin", "linkedin_url"),
}


def visible_contacts(profile: Profile) -> Dict[str, str]:
    """Only channels the alumnus switched on and actually filled in."""
    if profile.pref_anonymous:
        return {}
    contacts = {}
    for channel, (flag, attr) in CONTACT_CHANNELS.items():
        value = getattr(profile, attr)
        if getattr(profile, flag) and value:
            contacts[channel] = value
    return contacts


def to_directory_entry(profile: Profile) -> DirectoryEntry:
    return DirectoryEntry(
        id=profile.id,
        full_name=profile.full_name,
        graduation_year=profile.graduation_year,
        department=profile.department,
        location=profile.location,
        industry=profile.industry,
        company=profile.company,
        job_title=profile.job_title,
        bio=profile.bio,
        profile_picture_url=profile.profile_picture_url,
        skills=profile.skills,
        verified=bool(profile.verified),
        role=profile.role,
        contacts=visible_contacts(profile),
        primary_contact_method=profile.primary_contact_method,
    )


def _matches_search(profile: Profile, term: str) -> bool:
    term = term.lower()
    for value in (profile.full_name, profile.company, profile.job_title, profile.industry):
        if value and term in value.lower():
            return True
    return False


def filter_profiles(
    profiles: List[Profile],
    search: Optional[str] = None,
    industry: Optional[str] = None,
    year: Optional[int] = None,
    location: Optional[str] = None,
) -> List[Profile]:
    filtered = profiles
    if search and search.strip():
        filtered = [p for p in filtered if _matches_search(p, search.strip())]
    if industry:
        filtered = [p for p in filtered if p.industry == industry]
    if year:
        filtered = [p for p in filtered if p.graduation_year == year]
    if location:
        filtered = [p for p in filtered if p.location == location]
    return filtered


async def browse_directory(
    db: AsyncSession,
    search: Optional[str] = None,
    industry: Optional[str] = None,
    year: Optional[int] = None,
    location: Optional[str] = None,
) -> DirectoryPage:
    result = await db.execute(
        select(Profile)
        .where(Profile.pref_anonymous.is_(False))
        .order_by(Profile.full_name.asc(), Profile.id.asc())
    )
    profiles = list(result.scalars().all())
    shown = filter_profiles(profiles, search, industry, year, location)

    return DirectoryPage(
        profiles=[to_directory_entry(p) for p in shown],
        total=len(profiles),
        shown=len(shown),
        industries=sorted({p.industry for p in profiles if p.industry}),
        years=sorted({p.graduation_year for p in profiles if p.graduation_year}, reverse=True),
        locations=sorted({p.location for p in profiles if p.location}),
    )
