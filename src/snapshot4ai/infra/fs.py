from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Defines the capability interface through which the snapshot engine sees a
directory tree (enumerate, open child directory, open child file, size, read)
and provides the local-disk implementation of it. Also resolves the OS
specific user data directory and normalizes user supplied paths.

The engine never touches ``os`` or ``pathlib`` directly: everything goes
through a ``DirectoryHandle`` so that tests can substitute an in-memory tree.
"""

import asyncio
import os
import stat
from pathlib import Path
from typing import AsyncIterator, Optional, Protocol, Tuple

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "Snapshot4AI"
UNIX_APP_DIR_NAME = ".snapshot4ai"

KIND_FILE = "file"
KIND_DIRECTORY = "directory"

# -----------------------------------------------------------------------------
# CAPABILITY INTERFACE
# -----------------------------------------------------------------------------


class FileHandle(Protocol):
    """Read-only capability for a single file."""

    name: str

    async def size(self) -> int:
        ...

    async def read_bytes(self, limit: Optional[int] = None) -> bytes:
        """Return the file bytes, or only the first ``limit`` bytes."""
        ...


class DirectoryHandle(Protocol):
    """Read-only capability for a directory and its immediate entries."""

    name: str

    def entries(self) -> AsyncIterator[Tuple[str, str]]:
        """Yield ``(kind, name)`` pairs in capability order."""
        ...

    async def get_directory(self, name: str) -> "DirectoryHandle":
        ...

    async def get_file(self, name: str) -> FileHandle:
        ...


# -----------------------------------------------------------------------------
# LOCAL DISK IMPLEMENTATION
# -----------------------------------------------------------------------------


class LocalFileHandle:
    """
    FileHandle backed by a path on the local disk.

    Only regular files can be sized or read. Pipes, sockets and devices raise
    OSError before they are opened, since opening a FIFO blocks until a
    writer appears.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self.name = path.name

    def __repr__(self) -> str:
        return f"LocalFileHandle({str(self._path)!r})"

    async def size(self) -> int:
        st = await asyncio.to_thread(self._regular_stat)
        return st.st_size

    async def read_bytes(self, limit: Optional[int] = None) -> bytes:
        return await asyncio.to_thread(self._read, limit)

    def _regular_stat(self) -> os.stat_result:
        st = self._path.stat()
        if not stat.S_ISREG(st.st_mode):
            raise OSError(f"Not a regular file: {self._path}")
        return st

    def _read(self, limit: Optional[int]) -> bytes:
        self._regular_stat()
        with open(self._path, "rb") as f:
            if limit is None:
                return f.read()
            return f.read(limit)


class LocalDirectoryHandle:
    """
    DirectoryHandle backed by a directory on the local disk.

    Symlinked directories are reported as files so that link cycles cannot
    send the traversal into an infinite loop.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self.name = self._path.name or str(self._path)

    def __repr__(self) -> str:
        return f"LocalDirectoryHandle({str(self._path)!r})"

    @property
    def path(self) -> Path:
        return self._path

    async def entries(self) -> AsyncIterator[Tuple[str, str]]:
        listing = await asyncio.to_thread(self._scan)
        for kind, name in listing:
            yield kind, name

    def _scan(self) -> list[Tuple[str, str]]:
        listing: list[Tuple[str, str]] = []
        with os.scandir(self._path) as it:
            for entry in it:
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                except OSError:
                    is_dir = False
                listing.append((KIND_DIRECTORY if is_dir else KIND_FILE, entry.name))
        return listing

    async def get_directory(self, name: str) -> "LocalDirectoryHandle":
        child = self._path / name
        if not await asyncio.to_thread(child.is_dir):
            raise NotADirectoryError(str(child))
        return LocalDirectoryHandle(child)

    async def get_file(self, name: str) -> LocalFileHandle:
        child = self._path / name
        if not await asyncio.to_thread(child.exists):
            raise FileNotFoundError(str(child))
        return LocalFileHandle(child)


def open_local_directory(path: str) -> LocalDirectoryHandle:
    """
    Grant directory access for a local path.

    Args:
        path: Directory path (``~`` and environment variables are expanded).

    Returns:
        LocalDirectoryHandle: Capability for the normalized directory.
    """
    return LocalDirectoryHandle(normalize_path(path, os.getcwd()))


# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/Snapshot4AI
    - Linux/Mac: ~/.snapshot4ai

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    return os.path.abspath(os.path.expandvars(os.path.expanduser(p)))
