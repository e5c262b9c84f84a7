"""
Run the suggestion promotion job once.

Meant for cron or any external scheduler:
    python -m app.jobs.promote [--threshold N]
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from app.config import settings
from app.database import Base, async_session, engine
from app.errors import ConfigurationError
from app.services.promotion import run_promotion
import app.models  # noqa: F401  (register tables)

logger = logging.getLogger("app.jobs.promote")


async def main(threshold: Optional[int] = None) -> int:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        promoted = await run_promotion(async_session, settings.SERVICE_ROLE_KEY, threshold)
    except ConfigurationError as exc:
        logger.error("Promotion aborted: %s", exc.message)
        print(json.dumps({"error": exc.message}))
        return 2
    finally:
        await engine.dispose()

    print(json.dumps({"promoted": promoted}))
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Promote event suggestions that reached the vote threshold.")
    parser.add_argument("--threshold", type=int, default=None, help="override EVENT_PROMOTE_THRESHOLD")
    args = parser.parse_args()

    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    sys.exit(asyncio.run(main(args.threshold)))
