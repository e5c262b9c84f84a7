"""
Promotion router — privileged trigger for the suggestion promotion job.

    POST /api/promote-suggestions[?threshold=N]

The server must hold ``SERVICE_ROLE_KEY`` and the caller must present it,
either as ``Authorization: Bearer <key>`` or in ``X-Service-Key``.
"""

import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import settings
from app.database import get_session_factory
from app.errors import ConfigurationError, PermissionDenied
from app.schemas.suggestion import PromotionResult
from app.services.promotion import run_promotion
from app.services.realtime import ChangeBus, get_change_bus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["promotion"])


def _presented_key(request: Request) -> str:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip()
    return request.headers.get("X-Service-Key", "").strip()


@router.post("/promote-suggestions", response_model=PromotionResult)
async def promote_suggestions(
    request: Request,
    threshold: Optional[int] = None,
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    bus: ChangeBus = Depends(get_change_bus),
):
    server_key = settings.SERVICE_ROLE_KEY
    if not server_key:
        raise ConfigurationError("Missing service role key")

    if not hmac.compare_digest(_presented_key(request).encode(), server_key.encode()):
        logger.warning("Rejected promotion request without a valid service key")
        raise PermissionDenied("A valid service key is required")

    promoted = await run_promotion(session_factory, server_key, threshold, bus)
    return PromotionResult(promoted=promoted)
