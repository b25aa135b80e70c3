import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from app.core.config import settings
from app.core.database import init_db
from app.core.logging_config import setup_logging
from app.api.endpoints import (
    applications,
    client,
    health,
    job_postings,
    onboarding,
    permissions,
    shifts,
    staff,
    venues,
)

setup_logging(settings.LOG_LEVEL, settings.JSON_LOGS)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    logger.info("Starting up Venue Operations API...")
    init_db()
    logger.info("Models registered")

    yield

    logger.info("Shutting down Venue Operations API...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Staff, hiring, onboarding and shift scheduling for venues",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Health checks sit at the root for load balancers
app.include_router(health.router)

app.include_router(venues.router, prefix=settings.API_V1_STR)
app.include_router(staff.router, prefix=settings.API_V1_STR)
app.include_router(job_postings.router, prefix=settings.API_V1_STR)
app.include_router(job_postings.public_router, prefix=settings.API_V1_STR)
app.include_router(applications.router, prefix=settings.API_V1_STR)
app.include_router(onboarding.router, prefix=settings.API_V1_STR)
app.include_router(onboarding.catalog_router, prefix=settings.API_V1_STR)
app.include_router(shifts.router, prefix=settings.API_V1_STR)
app.include_router(shifts.assignments_router, prefix=settings.API_V1_STR)
app.include_router(shifts.swaps_router, prefix=settings.API_V1_STR)
app.include_router(shifts.requests_router, prefix=settings.API_V1_STR)
app.include_router(permissions.router, prefix=settings.API_V1_STR)
app.include_router(permissions.catalog_router, prefix=settings.API_V1_STR)
app.include_router(client.router, prefix=settings.API_V1_STR)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Venue Operations API",
        "version": "1.0.0",
        "status": "healthy"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
