"""
Alumni Portal — FastAPI application entry-point.

Run with:
    uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.middleware.sessions import SessionMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.config import settings
from app.database import Base, async_session, engine, get_db
from app.errors import register_exception_handlers
from app.models.event import Event
from app.models.event_suggestion import EventSuggestion
from app.models.job import Job
from app.models.profile import Profile
from app.models.user import User
from app.schemas.profile import ProfileOut
from app.services.feed import FeedConnectionManager, SuggestionFeed, session_loader
from app.services.profiles import get_profile_by_user
from app.services.realtime import ChangeBus

# ── Import routers ──
from app.routers import admin, analytics, auth, directory, events, jobs, profile, promotion, suggestions
from app.routers.auth import get_current_user

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

# ── Change notifications & live suggestion feed ──
change_bus = ChangeBus()
feed_manager = FeedConnectionManager()
suggestion_feed = SuggestionFeed(change_bus, session_loader(async_session), feed_manager.broadcast)


# ── Lifespan: create tables, start the feed ──
@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    suggestion_feed.start()
    logger.info("%s started", settings.APP_NAME)
    yield
    suggestion_feed.stop()


app = FastAPI(
    title=settings.APP_NAME,
    description="Alumni network portal — directory, events, suggestions, jobs and analytics.",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.change_bus = change_bus
app.state.feed_manager = feed_manager
app.state.suggestion_feed = suggestion_feed

# ── Session middleware (required for OAuth state) ──
app.add_middleware(SessionMiddleware, secret_key=settings.SECRET_KEY, https_only=not settings.DEBUG)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=("*",))

register_exception_handlers(app)

# ── Register API routers ──
app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(directory.router)
app.include_router(events.router)
app.include_router(suggestions.router)
app.include_router(promotion.router)
app.include_router(jobs.router)
app.include_router(analytics.router)
app.include_router(admin.router)

if settings.ENVIRONMENT != "production":
    from fastapi.responses import RedirectResponse
    from app.routers.auth import _set_auth_cookie

    @app.get("/mock-login/{user_id}")
    def mock_login(user_id: int):
        resp = RedirectResponse(url="/", status_code=303)
        return _set_auth_cookie(resp, user_id)


# ── Landing page / dashboard ──
@app.get("/")
async def homepage(
    current_user: Optional[User] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    # Fetch live stats
    profiles_count = (await db.execute(select(func.count(Profile.id)))).scalar() or 0
    events_count = (await db.execute(select(func.count(Event.id)))).scalar() or 0
    jobs_count = (
        await db.execute(select(func.count(Job.id)).where(Job.is_active.is_(True)))
    ).scalar() or 0
    suggestions_count = (await db.execute(select(func.count(EventSuggestion.id)))).scalar() or 0

    own_profile = None
    if current_user:
        found = await get_profile_by_user(db, current_user.id)
        if found:
            own_profile = ProfileOut.model_validate(found).model_dump(mode="json")

    return {
        "app": settings.APP_NAME,
        "profile": own_profile,
        "stats": {
            "alumni": profiles_count,
            "events": events_count,
            "jobs": jobs_count,
            "suggestions": suggestions_count,
        },
    }
