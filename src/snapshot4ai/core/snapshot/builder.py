from __future__ import annotations

"""
Snapshot Builder.

Walks a directory capability depth-first and produces the immutable tree
together with its flat content index. Each directory visit returns its node
and the content records of its subtree; the records are flattened once at
the root, so no mutable index is shared between concurrent visits.

Failure handling:
- a file that cannot be opened, sized or read becomes a read-error record;
- a sub-directory that cannot be opened or enumerated becomes an empty node;
- only a failure to enumerate the root raises SnapshotBuildError.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Set, Tuple

from snapshot4ai.core.content.policy import classify
from snapshot4ai.core.content.reader import read_error_record, read_file
from snapshot4ai.core.snapshot.index import ContentIndex
from snapshot4ai.domain.errors import SnapshotBuildError
from snapshot4ai.domain.snapshot_models import (
    BuildStats,
    ContentRecord,
    ContentStatus,
    DirectoryNode,
    NodeType,
    Snapshot,
)
from snapshot4ai.infra.fs import KIND_DIRECTORY, KIND_FILE, DirectoryHandle

logger = logging.getLogger(__name__)


@dataclass
class _Subtree:
    """Result of visiting one entry: its node plus the records below it."""
    node: DirectoryNode
    records: List[ContentRecord] = field(default_factory=list)
    unreadable_directories: int = 0


def sort_children(children: List[DirectoryNode]) -> Tuple[DirectoryNode, ...]:
    """
    Order siblings: directories first, then case-insensitive name order.

    Args:
        children: Nodes of a single directory, in any order.

    Returns:
        Tuple[DirectoryNode, ...]: The sorted children.
    """
    return tuple(sorted(
        children,
        key=lambda n: (n.type is not NodeType.DIRECTORY, n.name.casefold(), n.name),
    ))


def join_path(parent: str, name: str) -> str:
    return f"{parent}/{name}"


class SnapshotBuilder:
    """
    Builds Snapshot objects from a root DirectoryHandle.

    Args:
        max_concurrency: Upper bound on simultaneous file reads. With the
            default of 1 the traversal is strictly sequential.
    """

    def __init__(self, max_concurrency: int = 1) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.max_concurrency = max_concurrency

    async def build(self, root_handle: DirectoryHandle, generation: int = 0) -> Snapshot:
        """
        Scan ``root_handle`` and return a complete snapshot.

        Args:
            root_handle: Capability for the selected directory.
            generation: Token stamped on the resulting snapshot.

        Returns:
            Snapshot: Tree, index and build statistics.

        Raises:
            SnapshotBuildError: If the root directory cannot be enumerated.
        """
        started = time.perf_counter()

        try:
            entries = await _list_entries(root_handle)
        except Exception as e:
            logger.error(f"Cannot enumerate root directory {root_handle!r}: {e}")
            raise SnapshotBuildError(f"Cannot read directory '{root_handle.name}': {e}") from e

        walk = _Walk(self.max_concurrency)
        subtree = await walk.visit_entries(root_handle, root_handle.name, "", entries)
        index = ContentIndex(subtree.records)

        stats = _collect_stats(
            subtree,
            index,
            elapsed_seconds=time.perf_counter() - started,
        )
        logger.info(
            f"Snapshot #{generation} built: {stats.files} files, "
            f"{stats.directories} directories in {stats.elapsed_seconds:.2f}s"
        )
        return Snapshot(generation=generation, root=subtree.node, index=index, stats=stats)


class _Walk:
    """State of a single traversal; one instance per build() call."""

    def __init__(self, max_concurrency: int) -> None:
        self.concurrent = max_concurrency > 1
        self.semaphore = asyncio.Semaphore(max_concurrency)

    async def visit_entries(
            self,
            handle: DirectoryHandle,
            name: str,
            path: str,
            entries: List[Tuple[str, str]],
    ) -> _Subtree:
        """Visit every entry of one directory and assemble its node."""
        tasks: List[Callable[[], Awaitable[_Subtree]]] = []
        seen: Set[str] = set()

        for kind, entry_name in entries:
            if entry_name in seen:
                logger.warning(f"Duplicate entry '{entry_name}' in '{path or '/'}' ignored")
                continue
            seen.add(entry_name)
            child_path = join_path(path, entry_name)
            if kind == KIND_DIRECTORY:
                tasks.append(_bind(self.visit_directory, handle, entry_name, child_path))
            elif kind == KIND_FILE:
                tasks.append(_bind(self.visit_file, handle, entry_name, child_path))
            else:
                logger.debug(f"Skipping entry '{child_path}' of unknown kind '{kind}'")

        if self.concurrent:
            results = list(await asyncio.gather(*(task() for task in tasks)))
        else:
            results = [await task() for task in tasks]

        # gather() keeps submission order, so records stay in discovery order
        records: List[ContentRecord] = []
        unreadable = 0
        for result in results:
            records.extend(result.records)
            unreadable += result.unreadable_directories

        node = DirectoryNode(
            name=name,
            path=path,
            type=NodeType.DIRECTORY,
            children=sort_children([r.node for r in results]),
        )
        return _Subtree(node=node, records=records, unreadable_directories=unreadable)

    async def visit_directory(self, parent: DirectoryHandle, name: str, path: str) -> _Subtree:
        try:
            handle = await parent.get_directory(name)
            entries = await _list_entries(handle)
        except Exception as e:
            logger.warning(f"Cannot read directory {path}: {type(e).__name__}: {e}")
            empty = DirectoryNode(name=name, path=path, type=NodeType.DIRECTORY, children=())
            return _Subtree(node=empty, unreadable_directories=1)

        return await self.visit_entries(handle, name, path, entries)

    async def visit_file(self, parent: DirectoryHandle, name: str, path: str) -> _Subtree:
        # Only leaf reads take the semaphore; directories waiting on children never hold it
        async with self.semaphore:
            try:
                handle = await parent.get_file(name)
                size = await handle.size()
                decision = classify(size)
            except Exception as e:
                logger.warning(f"Cannot open file {path}: {type(e).__name__}: {e}")
                node = DirectoryNode(name=name, path=path, type=NodeType.FILE)
                return _Subtree(node=node, records=[read_error_record(path)])

            record = await read_file(handle, path, size, decision)

        node = DirectoryNode(name=name, path=path, type=NodeType.FILE, size=size)
        return _Subtree(node=node, records=[record])


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

async def _list_entries(handle: DirectoryHandle) -> List[Tuple[str, str]]:
    """Drain the handle's entry iterator into a list."""
    return [(kind, name) async for kind, name in handle.entries()]


def _bind(
        fn: Callable[[DirectoryHandle, str, str], Awaitable[_Subtree]],
        handle: DirectoryHandle,
        name: str,
        path: str,
) -> Callable[[], Awaitable[_Subtree]]:
    """Defer a visit so sequential mode starts each one only when awaited."""
    return lambda: fn(handle, name, path)


def _collect_stats(subtree: _Subtree, index: ContentIndex, elapsed_seconds: float) -> BuildStats:
    directories = _count_directories(subtree.node) - 1
    statuses = [record.status for record in index.records()]
    return BuildStats(
        files=len(index),
        directories=directories,
        truncated=statuses.count(ContentStatus.TRUNCATED),
        too_large=statuses.count(ContentStatus.TOO_LARGE),
        read_errors=statuses.count(ContentStatus.READ_ERROR),
        unreadable_directories=subtree.unreadable_directories,
        elapsed_seconds=elapsed_seconds,
    )


def _count_directories(node: DirectoryNode) -> int:
    if not node.is_dir:
        return 0
    return 1 + sum(_count_directories(child) for child in node.children or ())
