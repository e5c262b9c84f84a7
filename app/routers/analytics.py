"""Analytics router — dashboard aggregates and exports for signed-in alumni."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.policies import Caller, require
from app.routers.auth import get_caller
from app.schemas.analytics import AnalyticsReport
from app.services.analytics import load_report, report_to_csv

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("", response_model=AnalyticsReport)
async def analytics(
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    require(caller, caller.is_authenticated, "view analytics")
    return await load_report(db)


@router.get("/export")
async def export_analytics(
    format: str = Query("json", pattern="^(json|csv)$"),
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    require(caller, caller.is_authenticated, "export analytics")
    report = await load_report(db)
    filename = f"alumni-analytics-{date.today().isoformat()}.{format}"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}

    if format == "csv":
        return Response(report_to_csv(report), media_type="text/csv", headers=headers)
    return JSONResponse(report.model_dump(mode="json"), headers=headers)
