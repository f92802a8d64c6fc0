"""
vnode API - FastAPI Application

Run with: uvicorn api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.config import get_cors_origins, get_root
from api.routes.run import router as run_router
from api.routes.health import router as health_router
from vnode import __version__

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"vnode API starting, root {get_root()}")
    yield
    logger.info("vnode API shutting down...")


app = FastAPI(
    title="vnode API",
    description="Run Python modules on demand",
    version=__version__,
    lifespan=lifespan,
)

# /api/v1/run executes code: cross-origin callers must be listed explicitly
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(health_router, tags=["Health"])
app.include_router(run_router, prefix="/api/v1", tags=["Execution"])


@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "name": "vnode API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000)
