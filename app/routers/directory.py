"""Directory router — browse alumni with search and filters."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.profile import DirectoryPage
from app.services.directory import browse_directory

router = APIRouter(prefix="/directory", tags=["directory"])


@router.get("", response_model=DirectoryPage)
async def directory(
    search: Optional[str] = None,
    industry: Optional[str] = None,
    year: Optional[int] = None,
    location: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    return await browse_directory(db, search, industry, year, location)
