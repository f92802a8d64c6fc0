"""vnode HTTP API."""
