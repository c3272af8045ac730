from __future__ import annotations

"""
Snapshot Domain Data Models.

Provides the recursive tree node, the per-file content record and the
snapshot aggregate produced by a directory scan. All models are frozen:
a published snapshot is never mutated, only replaced.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional, Tuple

if TYPE_CHECKING:
    from snapshot4ai.core.snapshot.index import ContentIndex

# -----------------------------------------------------------------------------
# TREE STRUCTURE
# -----------------------------------------------------------------------------


class NodeType(str, Enum):
    """Kind of a tree entry."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class DirectoryNode:
    """
    Represents one entry (file or directory) in the snapshot tree.

    Attributes:
        name: Entry name as delivered by the filesystem capability.
        path: '/'-joined ancestor chain from the snapshot root ("" for the root).
        type: File or directory.
        size: Byte size for files, None for directories or unknown sizes.
        children: Sorted child nodes for directories, None for files.
    """
    name: str
    path: str
    type: NodeType
    size: Optional[int] = None
    children: Optional[Tuple["DirectoryNode", ...]] = None

    def __post_init__(self) -> None:
        if self.type is NodeType.DIRECTORY and self.children is None:
            object.__setattr__(self, "children", ())
        if self.type is NodeType.FILE and self.children is not None:
            raise ValueError(f"File node '{self.path}' cannot have children")

    @property
    def is_dir(self) -> bool:
        return self.type is NodeType.DIRECTORY

    def iter_files(self) -> Iterator["DirectoryNode"]:
        """Yield every file node below this node in depth-first order."""
        if not self.is_dir:
            yield self
            return
        for child in self.children or ():
            yield from child.iter_files()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the subtree into plain JSON-compatible structures."""
        data: Dict[str, Any] = {
            "name": self.name,
            "path": self.path,
            "type": self.type.value,
        }
        if self.size is not None:
            data["size"] = self.size
        if self.is_dir:
            data["children"] = [child.to_dict() for child in self.children or ()]
        return data


# -----------------------------------------------------------------------------
# CONTENT RECORDS
# -----------------------------------------------------------------------------


class ContentStatus(str, Enum):
    """Tag describing how a record's content was obtained."""

    OK = "ok"
    TRUNCATED = "truncated"
    TOO_LARGE = "too_large"
    READ_ERROR = "read_error"


@dataclass(frozen=True)
class ContentRecord:
    """
    Indexed content for a single file node.

    Attributes:
        path: Identical to the matching DirectoryNode path.
        content: Full text, truncated prefix plus marker, or placeholder text.
        size_bytes: Byte size reported by the capability (0 if unknown).
        truncated: True when only a preview prefix was read.
        too_large: True when the file exceeded the hard limit and was not read.
        status: Tagged outcome; consumers branch on this, not on the text.
        language: Editor language identifier derived from the file name.
    """
    path: str
    content: str
    size_bytes: int
    truncated: bool = False
    too_large: bool = False
    status: ContentStatus = ContentStatus.OK
    language: str = "plaintext"

    @property
    def is_readable(self) -> bool:
        return self.status in (ContentStatus.OK, ContentStatus.TRUNCATED)


# -----------------------------------------------------------------------------
# AGGREGATE
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class BuildStats:
    """Counters collected while building a snapshot."""
    files: int = 0
    directories: int = 0
    truncated: int = 0
    too_large: int = 0
    read_errors: int = 0
    unreadable_directories: int = 0
    elapsed_seconds: float = 0.0


@dataclass(frozen=True)
class Snapshot:
    """
    Immutable result of a completed directory scan.

    Attributes:
        generation: Build token; increases with every successful rescan.
        root: Root directory node.
        index: Flat content index, one record per file node.
        stats: Counters collected during the build.
    """
    generation: int
    root: DirectoryNode
    index: "ContentIndex"
    stats: BuildStats = field(default_factory=BuildStats)
