"""Main FastAPI application."""
from typing import Optional
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.api import analytics, auth, projects, telemetry, users
from app.config import Settings, settings as default_settings
from app.constants import API_V1_PREFIX
from app.database import create_db_engine, create_session_factory, init_db
from app.utils.exceptions import AppException, app_exception_handler, request_validation_handler
from app.utils.logger import configure_logging, logger

VERSION = "1.0.0"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Configuration to use; the environment-derived settings if omitted

    Returns:
        Configured FastAPI app with its own engine and session factory
    """
    settings = settings or default_settings
    configure_logging(settings)

    app = FastAPI(
        title="Kogase API",
        description="Telemetry ingestion and analytics for game developers",
        version=VERSION,
    )

    engine = create_db_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    if settings.auto_migrate:
        init_db(engine)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Include routers
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(users.admin_router)
    app.include_router(projects.router)
    app.include_router(analytics.router)
    app.include_router(telemetry.router)

    @app.get("/")
    def root():
        """Root endpoint."""
        return {
            "message": "Kogase API",
            "version": VERSION,
            "docs": "/docs",
        }

    @app.get(f"{API_V1_PREFIX}/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok", "version": VERSION}

    logger.info(f"Kogase API configured for {settings.environment}")
    return app


app = create_app()


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("app.main:app", host=default_settings.api_host, port=default_settings.api_port)
