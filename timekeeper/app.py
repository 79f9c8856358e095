"""
Main Application Module

This module serves as the primary FastAPI application entry point,
configuring routes, middleware and error handling.

Features:
- Route management
- CORS configuration
- Error handling
- Request logging
- Health check

Security:
- CORS policies
- Bearer authentication on every /api route

Dependencies:
- FastAPI for routing
- CORS middleware
- Logging
- Database

Author: Timekeeper Development Team
"""

# First import database to ensure it's initialized first
from .shared.database import lifespan, get_db

from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorDatabase
import logging

from .shared import config
from .shared.errors import TimekeeperError, timekeeper_error_handler

# Now import all routers
from .features.clients.routes_clients import router as clients_router
from .features.projects.routes_projects import router as projects_router
from .features.timer.routes_time_entries import router as time_entries_router
from .features.reports.routes_reports import router as reports_router

# Set up logging
logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Timekeeper API", lifespan=lifespan)

# CORS middleware setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*", "Authorization"],  # Explicitly allow Authorization header
)

app.add_exception_handler(TimekeeperError, timekeeper_error_handler)

# Include the API routers
logger.info("Mounting API routers...")
app.include_router(clients_router, prefix="/api")
app.include_router(projects_router, prefix="/api")
app.include_router(time_entries_router, prefix="/api")
app.include_router(reports_router, prefix="/api")


@app.get("/health")
async def health(db: AsyncIOMotorDatabase = Depends(get_db)):
    """
    Report service and database status.

    Returns:
        dict: ``status`` and ``database`` connectivity
    """
    try:
        await db.command("ping")
        database = "connected"
    except Exception as e:
        logger.error(f"Health check ping failed: {str(e)}")
        database = "unavailable"
    return {"status": "ok", "database": database}


@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    """
    Log HTTP requests and responses.

    Args:
        request: HTTP request
        call_next: Next handler

    Returns:
        Response: HTTP response
    """
    logger.info(f"Incoming request: {request.method} {request.url}")
    try:
        response = await call_next(request)
        logger.info(f"Response status: {response.status_code}")
        return response
    except Exception as e:
        logger.error(f"Request failed: {str(e)}")
        return JSONResponse(
            status_code=500,
            content={"detail": str(e)}
        )
