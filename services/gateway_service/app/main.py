"""FastAPI application entrypoint for the Alumni Engagement API.

Every service router is mounted on this one app under ``API_PREFIX``;
the service packages share a database and a process.
"""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from services.communications_service.routers import notifications_router
from services.community_service.routers import shares_router
from services.donations_service.routers import funds_router
from services.jobs_service.routers import jobs_router
from services.members_service.routers import (
    invitations_router,
    members_router,
    tenants_router,
)
from services.rewards_service.routers import (
    analytics_router,
    badges_router,
    leaderboard_router,
    points_router,
    rewards_router,
    verifications_router,
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        version="0.1.0",
        description="Multi-tenant alumni engagement: rewards, badges, invitations, funds and jobs.",
    )

    # Add rate limiter state to app
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability (structured logging + request tracing)
    add_observability_middleware(app)

    # Add global exception handlers for consistent error responses
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple readiness endpoint."""
        return {"status": "ok"}

    prefix = settings.API_PREFIX

    # Members, tenants and invitations
    app.include_router(tenants_router, prefix=prefix)
    app.include_router(members_router, prefix=prefix)
    app.include_router(invitations_router, prefix=prefix)

    # Rewards. Verification, analytics and points live under /rewards/... and must be
    # registered before the catch-all /rewards/{reward_id} routes.
    app.include_router(verifications_router, prefix=prefix)
    app.include_router(analytics_router, prefix=prefix)
    app.include_router(points_router, prefix=prefix)
    app.include_router(rewards_router, prefix=prefix)
    app.include_router(badges_router, prefix=prefix)
    app.include_router(leaderboard_router, prefix=prefix)

    # Everything else
    app.include_router(funds_router, prefix=prefix)
    app.include_router(jobs_router, prefix=prefix)
    app.include_router(shares_router, prefix=prefix)
    app.include_router(notifications_router, prefix=prefix)

    return app


app = create_app()
