"""Health check endpoints."""

import os
from pathlib import Path

from fastapi import APIRouter, Depends, Response

from api.config import get_root
from vnode import __version__

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness: the process is up."""
    return {"status": "healthy", "version": __version__}


@router.get("/health/ready")
async def readiness_check(response: Response, root: Path = Depends(get_root)):
    """Readiness: the configured root is a readable directory."""
    checks = {
        "root_exists": root.is_dir(),
        "root_readable": os.access(root, os.R_OK | os.X_OK),
    }
    ready = all(checks.values())
    if not ready:
        response.status_code = 503
    return {"ready": ready, "root": str(root), "checks": checks}
