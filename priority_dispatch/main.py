"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from priority_dispatch.api.routes import router
from priority_dispatch.config import get_settings
from priority_dispatch.engine import get_priority_engine
from priority_dispatch.utils.logging import get_logger, setup_logging

# Setup logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("application_starting")

    engine = get_priority_engine()
    logger.info(
        "priority_engine_initialized",
        max_candidate_distance_km=engine.max_candidate_distance_km,
        proximity_radius_km=engine.proximity_radius_km,
    )

    yield

    logger.info("application_shutting_down")


app = FastAPI(
    title="Driver Priority Dispatch",
    description="Driver priority scoring and order assignment ranking",
    version="0.1.0",
    lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api/v1", tags=["priority"])


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "priority-dispatch"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "message": "Driver Priority Dispatch API",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "priority_dispatch.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.environment == "development",
    )
