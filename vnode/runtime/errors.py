"""Errors raised by the vnode runtime."""

from typing import List


class ModuleLoadError(Exception):
    """The fetcher produced neither source text nor an external target."""

    def __init__(self, identifier: str):
        super().__init__(f"failed to load {identifier}")
        self.identifier = identifier


class CircularDependencyError(Exception):
    """A dependency cycle closed onto a module with no usable exports yet."""

    def __init__(self, stack: List[str]):
        self.stack = list(stack)
        lines = "\n".join(f"- {p}" for p in reversed(self.stack))
        super().__init__(f"Circular dependency detected\nStack:\n{lines}")
