"""
FastAPI application for the BOATMRP planning API.

Run with: uvicorn web.app:app --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from web.config import get_settings
from web.database.session import init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup."""
    init_db()
    yield


def create_app() -> FastAPI:
    """Application factory for creating the FastAPI app."""
    config = get_settings()

    app = FastAPI(
        title=config.app_name,
        version=config.app_version,
        description="Material requirements planning for boat manufacturing",
        lifespan=lifespan,
    )

    from web.routes.planning import router as planning_router

    app.include_router(planning_router)

    @app.get("/health")
    async def health_check():
        """Liveness check."""
        return {"status": "healthy", "app": "boatmrp", "version": config.app_version}

    return app


# Create the application instance
app = create_app()
