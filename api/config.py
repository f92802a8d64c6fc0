"""
Server-side settings for the vnode API.

- VNODE_ROOT: project root; only files under it can be run (default: cwd)
- VNODE_CORS_ORIGINS: comma-separated origins allowed to call the API
"""

import os
from pathlib import Path
from typing import List


def get_root() -> Path:
    """Resolved project root the API is confined to."""
    return Path(os.environ.get("VNODE_ROOT") or os.getcwd()).resolve()


def get_cors_origins() -> List[str]:
    raw = os.environ.get("VNODE_CORS_ORIGINS", "")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
