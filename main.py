import logging
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from config import Settings
from database import open_store
from errors import register_exception_handlers
from logging_setup import setup_logging
from routes import tasks

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

ENDPOINTS = [
    ("GET", "/api/tasks"),
    ("POST", "/api/tasks"),
    ("GET", "/api/tasks/:id"),
    ("PUT", "/api/tasks/:id"),
    ("DELETE", "/api/tasks/:id"),
    ("GET", "/api/stats"),
    ("GET", "/api/health"),
]


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        settings: Runtime settings; read from the environment when omitted

    Returns:
        Configured app; the task store is opened on startup
    """
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="Task List API",
        description="RESTful API for a persistent task list",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.settings = settings
    app.state.store = None

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(tasks.router, prefix="/api", tags=["tasks"])

    @app.on_event("startup")
    def on_startup():
        """Open the task store (create table, seed sample data)"""
        # `uvicorn main:app` leaves the root logger bare; main() has already configured it.
        if not logging.getLogger().handlers:
            setup_logging(settings.log_level, sql_echo=settings.db_echo)
        app.state.store = open_store(settings)

    @app.on_event("shutdown")
    def on_shutdown():
        """Close the task store before the process exits"""
        logger.info("Shutting down server...")
        if app.state.store is not None:
            app.state.store.close()
            app.state.store = None

    @app.get("/")
    def read_root():
        """Root endpoint"""
        return {
            "message": "Task List API is running",
            "version": API_VERSION,
            "docs": "/docs"
        }

    return app


# Module-level app for `uvicorn main:app`
app = create_app()


def main() -> None:
    settings = app.state.settings
    setup_logging(settings.log_level, sql_echo=settings.db_echo)

    base = f"http://{settings.host}:{settings.port}"
    logger.info("Starting server on %s", base)
    logger.info("Database: %s", settings.database_url)
    logger.info("API endpoints:")
    for method, path in ENDPOINTS:
        logger.info("  %-6s %s%s", method, base, path)

    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
