from __future__ import annotations

"""
In-memory filesystem capability for tests.

Implements the DirectoryHandle / FileHandle protocols over Python objects,
with switches to make enumeration, opening, sizing or reading fail.
"""

from typing import AsyncIterator, Dict, List, Optional, Tuple, Union


class FakeFile:
    """FileHandle over an in-memory byte string, recording every read."""

    def __init__(
            self,
            name: str,
            data: bytes = b"",
            *,
            size: Optional[int] = None,
            fail_read: bool = False,
            fail_size: bool = False,
    ) -> None:
        self.name = name
        self.data = data
        self._size = len(data) if size is None else size
        self.fail_read = fail_read
        self.fail_size = fail_size
        self.reads: List[Optional[int]] = []

    async def size(self) -> int:
        if self.fail_size:
            raise PermissionError(f"size of {self.name} denied")
        return self._size

    async def read_bytes(self, limit: Optional[int] = None) -> bytes:
        self.reads.append(limit)
        if self.fail_read:
            raise PermissionError(f"read of {self.name} denied")
        return self.data if limit is None else self.data[:limit]


class FakeDir:
    """DirectoryHandle over FakeFile/FakeDir children, in insertion order."""

    def __init__(
            self,
            name: str,
            children: Optional[List[Union["FakeDir", FakeFile]]] = None,
            *,
            fail_enumerate: bool = False,
            fail_open: bool = False,
    ) -> None:
        self.name = name
        self.children: Dict[str, Union[FakeDir, FakeFile]] = {c.name: c for c in children or []}
        self.fail_enumerate = fail_enumerate
        self.fail_open = fail_open

    async def entries(self) -> AsyncIterator[Tuple[str, str]]:
        if self.fail_enumerate:
            raise PermissionError(f"listing of {self.name} denied")
        for name, child in self.children.items():
            yield ("directory" if isinstance(child, FakeDir) else "file"), name

    async def get_directory(self, name: str) -> "FakeDir":
        child = self.children[name]
        if not isinstance(child, FakeDir):
            raise NotADirectoryError(name)
        if child.fail_open:
            raise PermissionError(f"open of {name} denied")
        return child

    async def get_file(self, name: str) -> FakeFile:
        child = self.children[name]
        if not isinstance(child, FakeFile):
            raise IsADirectoryError(name)
        return child


def text_file(name: str, text: str) -> FakeFile:
    return FakeFile(name, text.encode("utf-8"))

