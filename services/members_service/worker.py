"""ARQ worker for members service background tasks.

Run with: arq services.members_service.worker.WorkerSettings
"""

from arq import cron
from libs.common.arq_config import get_redis_settings
from libs.common.logging import configure_logging, get_logger
from libs.db.config import AsyncSessionLocal

logger = get_logger(__name__)


async def task_expire_invitations(ctx: dict) -> int:
    """Mark invitations past their expiry date as expired."""
    from services.members_service.services.invitation_service import (
        expire_stale_invitations,
    )

    logger.info("Running: expire_invitations")
    async with AsyncSessionLocal() as db:
        return await expire_stale_invitations(db)


async def startup(ctx: dict) -> None:
    configure_logging()


class WorkerSettings:
    """ARQ worker settings with cron job schedules."""

    redis_settings = get_redis_settings()
    on_startup = startup

    functions = [task_expire_invitations]

    cron_jobs = [
        # Hourly, on the hour
        cron(task_expire_invitations, minute=0, run_at_startup=True),
    ]
