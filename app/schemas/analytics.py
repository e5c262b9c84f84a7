"""Analytics Pydantic schemas."""

from datetime import datetime
from typing import List

from pydantic import BaseModel


class YearCount(BaseModel):
    year: int
    count: int


class IndustryCount(BaseModel):
    industry: str
    count: int


class LocationCount(BaseModel):
    location: str
    count: int


class MethodCount(BaseModel):
    method: str
    count: int


class TotalStats(BaseModel):
    total: int = 0
    verified: int = 0
    recent_joins: int = 0
    active_profiles: int = 0


class AnalyticsReport(BaseModel):
    total_stats: TotalStats
    alumni_by_year: List[YearCount]
    alumni_by_industry: List[IndustryCount]
    alumni_by_location: List[LocationCount]
    contact_preferences: List[MethodCount]
    generated_at: datetime
