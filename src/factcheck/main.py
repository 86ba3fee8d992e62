"""Main FastAPI application."""

import logging

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from factcheck.analyzer import FactChecker
from factcheck import config
from factcheck.config import Settings
from factcheck.routes import router


logger = logging.getLogger(__name__)

SERVICE_NAME = "Fact-Checker AI Server"
VERSION = "2.0"


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application.

    Builds the fact checker once on startup from the process settings; both stay
    read-only for the lifetime of the process.
    """
    settings = config.settings
    application.state.settings = settings
    application.state.fact_checker = FactChecker.from_settings(settings)

    if not settings.has_credentials:
        logger.warning("GEMINI_API_KEY is not set; every analysis will fail until it is configured")

    logger.info(f"{SERVICE_NAME} online")
    logger.info(f"Port: {settings.port}")
    logger.info("Google Search: ENABLED")
    logger.info(f"Model: {settings.gemini_model}")
    logger.info(f"GET  {settings.base_url}/health")
    logger.info(f"POST {settings.base_url}/analyze")

    yield

    logger.info("Shutting down application...")
    application.state.fact_checker = None


app = FastAPI(
    title="Fact-Checker AI Server",
    description="Search-grounded fact-checking relay returning a normalized trust assessment",
    version=VERSION,
    lifespan=lifespan,
)

# Middleware cannot be added after startup, so origins come from the import-time settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/")
async def root() -> dict:
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "status": "running",
        "version": VERSION,
        "endpoints": {
            "root": "GET /",
            "health": "GET /health",
            "analyze": "POST /analyze",
        },
    }


@app.get("/health")
async def health_check(request: Request) -> dict:
    """Health check endpoint."""
    settings: Settings = request.app.state.settings
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "model": settings.gemini_model,
    }


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    settings = config.settings
    logging.basicConfig(level=settings.log_level.upper())

    uvicorn.run(
        "factcheck.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
