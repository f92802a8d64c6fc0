"""Run endpoint for module execution."""

import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from api.config import get_root
from vnode.cli.run import export_summary
from vnode.runtime.errors import CircularDependencyError, ModuleLoadError
from vnode.runtime.runner import Runner, RunnerOptions

logger = logging.getLogger(__name__)

router = APIRouter()


class RunRequest(BaseModel):
    """Request body for running a file.

    file is resolved against the server's configured root and must lie
    under it.
    """
    file: str
    base: Optional[str] = None
    interpret_default: bool = True
    stubs: Optional[Dict[str, Any]] = None


class RunResponse(BaseModel):
    """Response body for running a file."""
    success: bool
    file: str
    execution_time_ms: float
    exports: Optional[Dict[str, Any]] = None
    export_keys: List[str] = []
    modules_loaded: int = 0
    error: Optional[str] = None


@router.post("/run", response_model=RunResponse)
async def run_module(request: RunRequest, root: Path = Depends(get_root)):
    """Run a file under the configured root and return its exports."""
    start_time = time.time()

    path = (root / request.file).resolve()
    if not path.is_relative_to(root):
        logger.warning(f"Refusing to run {request.file}: outside {root}")
        raise HTTPException(status_code=403, detail=f"File is outside the project root: {request.file}")
    if not path.is_file():
        raise HTTPException(status_code=404, detail=f"File not found: {request.file}")

    runner = Runner(RunnerOptions(
        root=str(root),
        base=request.base,
        request_stubs=request.stubs or {},
        interpret_default=request.interpret_default,
    ))

    try:
        exports = await runner.run(str(path))
    except (ModuleLoadError, CircularDependencyError) as e:
        return RunResponse(
            success=False,
            file=str(path),
            execution_time_ms=(time.time() - start_time) * 1000,
            modules_loaded=len(runner.module_cache),
            error=str(e),
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    summary = export_summary(exports)
    return RunResponse(
        success=True,
        file=str(path),
        execution_time_ms=(time.time() - start_time) * 1000,
        exports=summary,
        export_keys=list(summary),
        modules_loaded=len(runner.module_cache),
    )
