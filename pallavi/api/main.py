"""
FastAPI application entry point.

Wires the model manager, flows, actions, orchestrator and profile store
together at startup and mounts the routers that expose them.
"""

import logging
import os
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from .models.common import APIError
from .routers import assessment, careers, flows, health, profile
from pallavi import __version__
from pallavi.flows.actions import CareerActions
from pallavi.flows.career import CareerFlows
from pallavi.flows.orchestration import CareerOrchestrator
from pallavi.models.manager import ModelManager
from pallavi.profile import ProfileStore

logger = logging.getLogger(__name__)

# Global application state
app_state = {}

ERROR_CODES = {404: "not_found", 405: "method_not_allowed", 413: "payload_too_large"}


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or os.getenv("PALLAVI_LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_services(model_manager: ModelManager) -> dict:
    career_flows = CareerFlows(model_manager)
    actions = CareerActions(career_flows)
    return {
        "model_manager": model_manager,
        "flows": career_flows,
        "actions": actions,
        "orchestrator": CareerOrchestrator(actions),
        "profile_store": ProfileStore(),
    }


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Builds the model manager and everything that depends on it once at
    startup, and releases provider clients at shutdown.
    """
    logger.info("Starting Pallavi API server...")
    model_manager = ModelManager()
    app_state.update(build_services(model_manager))
    logger.info(f"Loaded {len(model_manager.config['tasks'])} model tasks from {model_manager.config_path}")

    yield  # Server runs here

    logger.info("Shutting down Pallavi API server...")
    model_manager.cleanup()
    app_state.clear()


def create_app() -> FastAPI:
    """Factory function to create and configure the FastAPI application."""

    app = FastAPI(
        title="Pallavi Career Guidance API",
        description="Career path, skills and interview guidance backed by a hosted language model",
        version=__version__,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=os.getenv("PALLAVI_CORS_ORIGINS", "http://localhost:3000,http://localhost:9002").split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        body = APIError(error=str(exc.detail), error_code=ERROR_CODES.get(exc.status_code, "http_error"))
        return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"), headers=exc.headers)

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(flows.router, prefix="/api/v1/flows", tags=["flows"])
    app.include_router(assessment.router, prefix="/api/v1/assessment", tags=["assessment"])
    app.include_router(profile.router, prefix="/api/v1/profile", tags=["profile"])
    app.include_router(careers.router, prefix="/api/v1/careers", tags=["careers"])

    @app.get("/")
    async def root():
        """Root endpoint with basic API information."""
        return {
            "name": "Pallavi Career Guidance API",
            "version": __version__,
            "status": "operational",
            "endpoints": {
                "health": "/health",
                "flows": "/api/v1/flows",
                "assessment": "/api/v1/assessment",
                "profile": "/api/v1/profile",
                "careers": "/api/v1/careers",
                "docs": "/docs",
            }
        }

    return app


app = create_app()
