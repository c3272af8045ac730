from __future__ import annotations

"""
Domain Exception Hierarchy.

Errors that cross the engine boundary. Per-file and per-directory failures
never surface here: they are absorbed into the snapshot as placeholder
content or empty subtrees.
"""


class Snapshot4AIError(Exception):
    """Base class for every error raised by the snapshot engine."""


class SnapshotBuildError(Snapshot4AIError):
    """
    Raised when the root directory handle cannot be enumerated.

    No partial snapshot is published when this is raised.
    """


class FileTooLargeError(Snapshot4AIError):
    """Raised when a file above the hard limit is selected or analyzed."""

    def __init__(self, path: str, size_bytes: int) -> None:
        self.path = path
        self.size_bytes = size_bytes
        super().__init__(f"{path} is too large to load ({size_bytes} bytes)")


class LifecycleError(Snapshot4AIError):
    """Raised when an operation is not valid in the current lifecycle state."""


class ContentUnavailableError(Snapshot4AIError):
    """Raised when a file's content could not be read and cannot be analyzed."""
