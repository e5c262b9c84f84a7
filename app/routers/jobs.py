"""Jobs router — browse, post and edit job openings."""

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.policies import Caller
from app.routers.auth import get_caller
from app.schemas.job import JobCreate, JobOut, JobUpdate
from app.services import jobs as job_service
from app.services.realtime import ChangeBus, get_change_bus

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("", response_model=List[JobOut])
async def list_jobs(
    search: Optional[str] = None,
    location: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    return await job_service.list_jobs(db, search, location)


@router.post("", response_model=JobOut, status_code=status.HTTP_201_CREATED)
async def post_job(
    body: JobCreate,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
    bus: ChangeBus = Depends(get_change_bus),
):
    return await job_service.post_job(db, caller, body, bus)


@router.get("/{job_id}", response_model=JobOut)
async def get_job(
    job_id: int,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await job_service.get_job(db, caller, job_id)


@router.patch("/{job_id}", response_model=JobOut)
async def update_job(
    job_id: int,
    body: JobUpdate,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
    bus: ChangeBus = Depends(get_change_bus),
):
    return await job_service.update_job(db, caller, job_id, body, bus)
