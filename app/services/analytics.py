"""
Analytics service — dashboard aggregates computed from profile rows.

Everything here is a pure function over a list of profiles except
``load_report``, which fetches them.
"""

import csv
import io
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.profile import Profile
from app.schemas.analytics import (
    AnalyticsReport,
    IndustryCount,
    LocationCount,
    MethodCount,
    TotalStats,
    YearCount,
)
from app.services.events import as_utc

TOP_N = 10
RECENT_DAYS = 30


def alumni_by_year(profiles: Sequence[Profile]) -> List[YearCount]:
    counts = Counter(p.graduation_year for p in profiles if p.graduation_year)
    return [YearCount(year=year, count=count) for year, count in sorted(counts.items())]


def alumni_by_industry(profiles: Sequence[Profile], limit: int = TOP_N) -> List[IndustryCount]:
    counts = Counter(p.industry for p in profiles if p.industry)
    return [IndustryCount(industry=k, count=v) for k, v in counts.most_common(limit)]


def country_of(location: str) -> str:
    """Return the country from "City, Country"; other values come back unchanged."""
    parts = location.split(",")
    return parts[-1].strip() if len(parts) > 1 else location


def alumni_by_location(profiles: Sequence[Profile], limit: int = TOP_N) -> List[LocationCount]:
    counts = Counter(country_of(p.location) for p in profiles if p.location)
    return [LocationCount(location=k, count=v) for k, v in counts.most_common(limit)]


def contact_preferences(profiles: Sequence[Profile]) -> List[MethodCount]:
    # Anonymous alumni only count as anonymous, whatever their switches say.
    preferences = {
        "Email Visible": 0,
        "Phone Visible": 0,
        "WhatsApp Visible": 0,
        "LinkedIn Visible": 0,
        "Anonymous": 0,
    }
    for p in profiles:
        if p.pref_anonymous:
            preferences["Anonymous"] += 1
            continue
        if p.show_email:
            preferences["Email Visible"] += 1
        if p.show_phone:
            preferences["Phone Visible"] += 1
        if p.show_whatsapp:
            preferences["WhatsApp Visible"] += 1
        if p.show_linkedin:
            preferences["LinkedIn Visible"] += 1
    return [MethodCount(method=k, count=v) for k, v in preferences.items()]


def _has_contact(p: Profile) -> bool:
    return bool(p.contact_email or p.contact_phone or p.contact_whatsapp or p.linkedin_url)


def total_stats(profiles: Sequence[Profile], now: Optional[datetime] = None) -> TotalStats:
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=RECENT_DAYS)
    return TotalStats(
        total=len(profiles),
        verified=sum(1 for p in profiles if p.verified),
        recent_joins=sum(1 for p in profiles if p.created_at and as_utc(p.created_at) > cutoff),
        active_profiles=sum(1 for p in profiles if not p.pref_anonymous and _has_contact(p)),
    )


def build_report(profiles: Sequence[Profile], now: Optional[datetime] = None) -> AnalyticsReport:
    now = now or datetime.now(timezone.utc)
    return AnalyticsReport(
        total_stats=total_stats(profiles, now),
        alumni_by_year=alumni_by_year(profiles),
        alumni_by_industry=alumni_by_industry(profiles),
        alumni_by_location=alumni_by_location(profiles),
        contact_preferences=contact_preferences(profiles),
        generated_at=now,
    )


def report_to_csv(report: AnalyticsReport) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    stats = report.total_stats

    writer.writerow([f"Analytics Report - {settings.APP_NAME}"])
    writer.writerow([])
    writer.writerow(["Total Alumni", stats.total])
    writer.writerow(["Verified Alumni", stats.verified])
    writer.writerow(["Recent Joins (30 days)", stats.recent_joins])
    writer.writerow(["Active Profiles", stats.active_profiles])
    writer.writerow([])

    writer.writerow(["Alumni by Graduation Year"])
    writer.writerow(["Year", "Count"])
    for item in report.alumni_by_year:
        writer.writerow([item.year, item.count])
    writer.writerow([])

    writer.writerow(["Alumni by Industry"])
    writer.writerow(["Industry", "Count"])
    for item in report.alumni_by_industry:
        writer.writerow([item.industry, item.count])
    return buffer.getvalue()


async def load_report(db: AsyncSession) -> AnalyticsReport:
    result = await db.execute(select(Profile))
    return build_report(list(result.scalars().all()))
