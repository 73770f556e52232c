"""
School Portal API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Logging, database and Redis connections
- Background job scheduler
- CORS middleware and the /media static mount
- API routing
- Health check endpoints
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from school_portal.api import api_router
from school_portal.core.auth import require_permission
from school_portal.core.config import settings
from school_portal.core.database import close_db, init_db
from school_portal.core.logging_config import configure_logging
from school_portal.core.permissions import Permission
from school_portal.core.redis import close_redis, init_redis
from school_portal.core.scheduler import (
    list_registered_jobs,
    pause_job,
    resume_job,
    start_scheduler,
    stop_scheduler,
    trigger_job_manually,
)
from school_portal.modules.admin_users.models import AdminUser
from school_portal.modules.admissions.jobs import register_admission_jobs

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Application lifespan manager.

    Redis is optional outside production: without it, rate limits fall
    back to process memory and sign-out revocation is not enforced.
    """
    configure_logging()
    logger.info(f"Starting {settings.app_name} in {settings.python_env} mode...")

    try:
        await init_redis()
        logger.info("Redis connected")
    except Exception as e:
        logger.error(f"Redis connection failed: {e}")
        if settings.is_production:
            raise

    try:
        await init_db()
        logger.info("Database connected")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        if settings.is_production:
            raise

    if settings.scheduler_enabled:
        try:
            register_admission_jobs()
            await start_scheduler()
            logger.info("Background scheduler started")
        except Exception as e:
            logger.error(f"Background scheduler failed to start: {e}")
            if settings.is_production:
                raise

    yield

    logger.info(f"Shutting down {settings.app_name}...")

    # Stop the scheduler first (wait for running jobs)
    await stop_scheduler()
    await close_redis()
    await close_db()
    logger.info("Cleanup complete")


app = FastAPI(
    title=settings.app_name,
    description="School information portal and PPDB admission back-office API",
    version="0.1.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api/v1")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

Path(settings.media_root).mkdir(parents=True, exist_ok=True)
app.mount("/media", StaticFiles(directory=settings.media_root), name="media")


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint - API welcome message."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "status": "running",
        "environment": settings.python_env,
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


@app.get("/ready", tags=["Health"])
async def readiness_check() -> dict[str, str]:
    """Readiness check endpoint."""
    return {"status": "ready"}


# ============================================
# Background Job Debug Endpoints
# ============================================
# Manual control of scheduled jobs. Super admin only.

manage_settings = require_permission(Permission.MANAGE_SETTINGS)


@app.get("/debug/jobs", tags=["Debug"])
async def list_jobs(_admin: AdminUser = Depends(manage_settings)):
    """List all registered background jobs with next run time and pause state."""
    return {"jobs": list_registered_jobs()}


@app.post("/debug/jobs/{job_id}/trigger", tags=["Debug"])
async def trigger_job(job_id: str, _admin: AdminUser = Depends(manage_settings)):
    """
    Run a background job immediately, bypassing its schedule.

    Available jobs:
        - admissions_purge_orphaned_documents

    Raises:
        HTTPException 400: If job_id is not registered
    """
    try:
        return await trigger_job_manually(job_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@app.post("/debug/jobs/{job_id}/pause", tags=["Debug"])
async def pause_job_endpoint(job_id: str, _admin: AdminUser = Depends(manage_settings)):
    return {"job_id": job_id, "paused": pause_job(job_id)}


@app.post("/debug/jobs/{job_id}/resume", tags=["Debug"])
async def resume_job_endpoint(job_id: str, _admin: AdminUser = Depends(manage_settings)):
    return {"job_id": job_id, "resumed": resume_job(job_id)}
