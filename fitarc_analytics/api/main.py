"""
FastAPI Application

Main entry point for the workout analytics web API.
"""

from typing import Dict

from fastapi import FastAPI, HTTPException, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from fitarc_analytics.api.models.responses import ErrorResponse
from fitarc_analytics.api.routes import analytics, tracking

# Initialize FastAPI app
app = FastAPI(
    title="FitArc Workout Analytics API",
    description="Training volume, movement balance and strength trends from logged workouts",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS configuration - allow the mobile/web dev servers
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:8081",  # Expo dev server
        "http://localhost:19006",  # Expo web
        "http://127.0.0.1:8081",
        "http://127.0.0.1:19006",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analytics.router, prefix="/api", tags=["Analytics"])
app.include_router(tracking.router, prefix="/api", tags=["Tracking"])


@app.get("/")
async def root() -> Dict[str, str]:
    """Root endpoint - API information."""
    return {
        "name": "FitArc Workout Analytics API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health")
async def health_check() -> Dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "fitarc-analytics-api"}


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle HTTP exceptions with consistent error format."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail), message=str(exc.detail)).model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    """Report request body validation failures in the standard error format."""
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(error="Validation Error", message=str(exc.errors())).model_dump(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="Internal Server Error", message=str(exc)).model_dump(),
    )


if __name__ == "__main__":
    import uvicorn

    from fitarc_analytics.logger import setup_logger
    from fitarc_analytics.settings import settings

    setup_logger(level=settings.log_level, log_file=settings.log_file)
    uvicorn.run(
        "fitarc_analytics.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
