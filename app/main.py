"""FastAPI application entry point with APScheduler."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.auth.hmac_auth import verify_request_signature
from app.config import get_settings
from app.services.scheduler_service import scheduler, setup_scheduler

logger = logging.getLogger(__name__)
settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.APP_DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s  %(message)s",
)


class HmacMiddleware(BaseHTTPMiddleware):
    """Verify HMAC-signed requests when HMAC_SECRET is configured.

    Only requests that carry the X-User-Id header are checked.
    Requests without that header pass through (dependencies still guard access).
    When HMAC_SECRET is empty the middleware is a no-op (dev/test mode).
    """

    async def dispatch(self, request, call_next):
        secret = get_settings().HMAC_SECRET
        if not secret:
            return await call_next(request)

        user_id_header = request.headers.get("x-user-id")
        if user_id_header is None:
            return await call_next(request)

        ok = verify_request_signature(
            secret,
            user_id_header,
            request.headers.get("x-request-timestamp"),
            request.headers.get("x-nonce"),
            request.headers.get("x-signature"),
        )
        if not ok:
            return JSONResponse({"detail": "Invalid request signature"}, status_code=401)
        return await call_next(request)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting Verzuim service...")
    if settings.SCHEDULER_ENABLED:
        setup_scheduler()
        scheduler.start()
        logger.info("APScheduler started with %d jobs", len(scheduler.get_jobs()))
    else:
        logger.info("SCHEDULER_ENABLED is false, background jobs disabled")

    yield

    # Shutdown
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("APScheduler stopped")


app = FastAPI(
    title="Verzuim Service",
    description="Sick-leave registration with Wet verbetering poortwachter tracking",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# HMAC signature verification, added after CORS
app.add_middleware(HmacMiddleware)

# REST API router
from app.api.v1.router import router as api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health():
    """Basic liveness probe."""
    return {"status": "ok", "service": "verzuim"}


@app.get("/health/ready")
async def health_ready():
    """Readiness probe with database check."""
    from app.database import engine
    from sqlalchemy import text

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return {"status": "ready", "database": "ok"}
    except Exception as e:
        logger.error("Health ready check failed: %s", e)
        return JSONResponse(
            {"status": "not_ready", "database": "error"},
            status_code=503
        )
