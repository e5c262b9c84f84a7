"""Job board service."""

from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import MissingRequiredField, NotFound
from app.models.job import Job
from app.policies import Caller, can_create_job, can_update_job, can_view_job, require
from app.schemas.job import JobCreate, JobUpdate
from app.services.realtime import JOBS, ChangeBus, notify

REQUIRED_FIELDS = ("title", "company", "location")


async def list_jobs(
    db: AsyncSession,
    search: Optional[str] = None,
    location: Optional[str] = None,
) -> List[Job]:
    """Active postings, newest first."""
    query = select(Job).where(Job.is_active.is_(True))
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.where(
            or_(
                Job.title.ilike(pattern),
                Job.company.ilike(pattern),
                Job.description.ilike(pattern),
            )
        )
    if location and location != "all":
        query = query.where(Job.location == location)
    result = await db.execute(query.order_by(Job.created_at.desc(), Job.id.desc()))
    return list(result.scalars().all())


async def get_job(db: AsyncSession, caller: Caller, job_id: int) -> Job:
    job = await db.get(Job, job_id)
    if not job or not can_view_job(caller, job):
        raise NotFound("Job not found")
    return job


async def post_job(
    db: AsyncSession, caller: Caller, data: JobCreate, bus: Optional[ChangeBus] = None
) -> Job:
    require(caller, can_create_job(caller), "post jobs")

    values = {field: (getattr(data, field) or "").strip() for field in REQUIRED_FIELDS}
    missing = [field for field, value in values.items() if not value]
    if missing:
        raise MissingRequiredField(*missing)

    job = Job(
        **values,
        description=data.description,
        requirements=data.requirements,
        posted_by=caller.user_id,
        is_active=True,
    )
    db.add(job)
    await db.commit()
    await db.refresh(job)
    await notify(bus, JOBS, "insert", job.id)
    return job


async def update_job(
    db: AsyncSession,
    caller: Caller,
    job_id: int,
    data: JobUpdate,
    bus: Optional[ChangeBus] = None,
) -> Job:
    job = await get_job(db, caller, job_id)
    require(caller, can_update_job(caller, job), "edit this job")

    changes = data.model_dump(exclude_unset=True)
    for field in REQUIRED_FIELDS:
        if field in changes:
            value = (changes[field] or "").strip()
            if not value:
                raise MissingRequiredField(field)
            changes[field] = value
    if changes.get("is_active") is None:
        changes.pop("is_active", None)
    for field, value in changes.items():
        setattr(job, field, value)

    await db.commit()
    await db.refresh(job)
    await notify(bus, JOBS, "update", job.id)
    return job
