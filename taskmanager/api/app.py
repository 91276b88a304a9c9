"""
FastAPI application for the Task Manager API.

``create_app`` builds the app and every piece of process-wide state
(settings, token service, services, limiter) once, and hangs it on
``app.state``. Handlers reach it through dependencies, never through
module globals.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from taskmanager.api import admin, tasks
from taskmanager.api.errors import register_exception_handlers
from taskmanager.api.rate_limit import create_limiter, rate_limit_exceeded_handler
from taskmanager.auth.routes import router as auth_router
from taskmanager.auth.jwt import TokenService
from taskmanager.config import Settings, configure_logging, get_settings
from taskmanager.integrations.sentry import init_sentry
from taskmanager.services import TaskService, UserService
from taskmanager.storage import StorageProvider, create_local_storage

logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup app resources."""
    settings: Settings = app.state.settings
    
    configure_logging(settings)
    init_sentry(settings)
    
    if settings.has_bootstrap_admin:
        await app.state.user_service.ensure_admin(
            settings.bootstrap_admin_email,
            settings.bootstrap_admin_password,
            settings.bootstrap_admin_name,
        )
    
    logger.info(f"Task Manager API starting in {settings.environment} mode")
    
    yield
    
    logger.info("Task Manager API shutting down")


# =============================================================================
# App Setup
# =============================================================================


def create_app(
    settings: Settings | None = None,
    storage: StorageProvider | None = None,
) -> FastAPI:
    """Build a fully wired application."""
    settings = settings or get_settings()
    storage = storage or create_local_storage()
    
    app = FastAPI(
        title="Task Manager API",
        description="Multi-user task management with role and ownership based access",
        version="0.1.0",
        lifespan=lifespan,
    )
    
    token_service = TokenService.from_settings(settings)
    app.state.settings = settings
    app.state.token_service = token_service
    app.state.user_service = UserService(storage.users, token_service)
    app.state.task_service = TaskService(storage.tasks)
    
    app.state.limiter = create_limiter(settings)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # CORS stays outermost so rejected requests still carry CORS headers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    register_exception_handlers(app)
    
    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(admin.router, prefix=settings.api_prefix)
    app.include_router(tasks.router, prefix=settings.api_prefix)
    
    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "Task Manager API Running"
    
    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "environment": settings.environment}
    
    return app


app = create_app()
