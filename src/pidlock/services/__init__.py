"""External collaborators for pidlock.

- filesystem: File operations sequenced by the lock strategies
"""

from .filesystem import LocalFileSystem

__all__ = ["LocalFileSystem"]
