import asyncio
from datetime import datetime, timedelta, timezone

from app.config import settings
from app.database import Base, create_engine_from_url, create_session_factory
from app.models.event import Event
from app.models.event_comment import EventComment
from app.models.event_suggestion import EventSuggestion
from app.models.event_vote import EventVote
from app.models.job import Job
from app.models.profile import ContactMethod, Profile, UserRole
from app.models.user import User

ALUMNI = [
    ("asha@example.com", "Asha Rao", UserRole.ADMIN, 2008, "Automotive", "Tata Motors", "Pune, India"),
    ("vikram@example.com", "Vikram Shah", UserRole.VERIFIED_ALUMNI, 2012, "Energy", "Siemens", "Munich, Germany"),
    ("meera@example.com", "Meera Iyer", UserRole.VERIFIED_ALUMNI, 2015, "Aerospace", "HAL", "Bengaluru, India"),
    ("rahul@example.com", "Rahul Nair", UserRole.ALUMNI, 2018, "Manufacturing", "Bosch", "Chennai, India"),
    ("sara@example.com", "Sara Khan", UserRole.ALUMNI, 2019, "Consulting", "Deloitte", "Dubai, UAE"),
    ("arjun@example.com", "Arjun Das", UserRole.ALUMNI, 2020, "Automotive", "Mahindra", "Nashik, India"),
]


async def async_main():
    engine = create_engine_from_url(settings.DATABASE_URL)
    async_session = create_session_factory(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        # Create users + profiles
        users = []
        for email, name, role, year, industry, company, location in ALUMNI:
            user = User(email=email, full_name=name, oauth_provider="google", oauth_id=email)
            session.add(user)
            await session.flush()
            session.add(Profile(
                user_id=user.id, full_name=name, role=role, graduation_year=year,
                department=settings.DEFAULT_DEPARTMENT, industry=industry, company=company,
                location=location, contact_email=email, show_email=role != UserRole.ALUMNI,
                primary_contact_method=ContactMethod.EMAIL,
                verified=role != UserRole.ALUMNI, email_verified=True,
            ))
            users.append(user)
        await session.flush()

        admin, vikram, meera = users[0], users[1], users[2]

        # An official event
        session.add(Event(
            title="Annual Alumni Meet",
            description="Dinner and talks on campus.",
            location="Main Auditorium",
            event_date=datetime.now(timezone.utc) + timedelta(days=45),
            organizer_id=admin.id,
        ))

        # One suggestion ready to promote, one still gathering votes
        popular = EventSuggestion(
            title="Industry Visit: EV Plant",
            description="Guided tour of an electric vehicle assembly line.",
            location="Pune",
            created_by=vikram.id,
        )
        quiet = EventSuggestion(
            title="Alumni Cricket Match",
            description="Batch of 2015 vs everyone else.",
            created_by=meera.id,
        )
        session.add_all([popular, quiet])
        await session.flush()

        for user in users[:settings.EVENT_PROMOTE_THRESHOLD]:
            session.add(EventVote(suggestion_id=popular.id, voter_id=user.id))
        session.add(EventVote(suggestion_id=quiet.id, voter_id=meera.id))
        session.add(EventComment(suggestion_id=popular.id, commenter_id=meera.id, content="Count me in!"))

        # Job postings
        session.add_all([
            Job(title="Design Engineer", company="Siemens", location="Munich, Germany",
                description="Turbine component design.", posted_by=vikram.id),
            Job(title="Stress Analyst", company="HAL", location="Bengaluru, India",
                description="FEA for airframe structures.", posted_by=meera.id),
        ])

        await session.commit()

    await engine.dispose()
    print("Database seeded with alumni, events, suggestions and jobs.")

asyncio.run(async_main())
