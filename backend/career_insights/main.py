"""
FastAPI application entry point.

Run locally:
    uvicorn career_insights.main:app --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from career_insights.api.routes import health, user
from career_insights.database.session import reset_engine
from career_insights.platform.errors import (
    ErrorHandlerMiddleware,
    request_validation_handler,
)
from career_insights.platform.health import get_health_checker


@asynccontextmanager
async def lifespan(app: FastAPI):
    get_health_checker().log_config_status()
    yield
    reset_engine()


def create_app() -> FastAPI:
    """Build the application with middleware and routers."""
    app = FastAPI(title="Career Insights API", lifespan=lifespan)

    app.add_middleware(ErrorHandlerMiddleware)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(health.router)
    app.include_router(user.router)

    return app


app = create_app()
