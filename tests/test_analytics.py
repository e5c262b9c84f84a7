from datetime import datetime, timedelta, timezone

from app.models.profile import Profile
from app.services.analytics import (
    alumni_by_industry,
    alumni_by_location,
    alumni_by_year,
    build_report,
    contact_preferences,
    country_of,
    report_to_csv,
    total_stats,
)

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _profile(**fields):
    defaults = dict(
        full_name="Alumnus", verified=False, pref_anonymous=False, show_email=False,
        show_linkedin=True, show_phone=False, show_whatsapp=False, created_at=NOW - timedelta(days=90),
    )
    defaults.update(fields)
    return Profile(user_id=1, **defaults)


PROFILES = [
    _profile(graduation_year=2015, industry="Automotive", location="Pune, India",
             contact_email="a@example.com", verified=True, created_at=NOW - timedelta(days=2)),
    _profile(graduation_year=2015, industry="Automotive", location="Detroit, USA", show_email=True),
    _profile(graduation_year=2012, industry="Energy", location="India", pref_anonymous=True,
             contact_email="c@example.com", show_email=True),
]


def test_country_of():
    assert country_of("Pune, Maharashtra, India") == "India"
    assert country_of("India") == "India"


def test_counts_by_year_industry_and_location():
    assert [(y.year, y.count) for y in alumni_by_year(PROFILES)] == [(2012, 1), (2015, 2)]
    assert [(i.industry, i.count) for i in alumni_by_industry(PROFILES)] == [("Automotive", 2), ("Energy", 1)]
    assert [(loc.location, loc.count) for loc in alumni_by_location(PROFILES)] == [("India", 2), ("USA", 1)]


def test_contact_preferences_count_anonymous_separately():
    counts = {m.method: m.count for m in contact_preferences(PROFILES)}
    assert counts["Anonymous"] == 1
    assert counts["Email Visible"] == 1
    assert counts["LinkedIn Visible"] == 2


def test_total_stats():
    stats = total_stats(PROFILES, NOW)
    assert stats.total == 3
    assert stats.verified == 1
    assert stats.recent_joins == 1
    assert stats.active_profiles == 1


def test_csv_export_layout():
    csv_text = report_to_csv(build_report(PROFILES, NOW))
    lines = csv_text.splitlines()
    assert lines[0].startswith("Analytics Report - ")
    assert "Total Alumni,3" in lines
    assert "Alumni by Industry" in lines
    assert lines[-2:] == ["Automotive,2", "Energy,1"]


async def test_analytics_endpoints_require_sign_in(client, alumnus):
    assert (await client.get("/analytics")).status_code == 401

    response = await client.get("/analytics", headers=alumnus.headers)
    assert response.status_code == 200
    assert response.json()["total_stats"]["total"] == 1

    response = await client.get("/analytics/export", params={"format": "csv"}, headers=alumnus.headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
