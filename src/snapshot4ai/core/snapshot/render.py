from __future__ import annotations

"""
Tree Renderer.

Converts a snapshot's DirectoryNode tree into ASCII lines using the standard
connectors (├──, └──). Children are emitted in the order the builder sorted
them, so the output mirrors the file explorer.
"""

from typing import List, Optional

from snapshot4ai.core.content.policy import format_size_kb
from snapshot4ai.core.snapshot.index import ContentIndex
from snapshot4ai.domain.snapshot_models import ContentStatus, DirectoryNode

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_tree(
        root: DirectoryNode,
        index: Optional[ContentIndex] = None,
        show_sizes: bool = False,
) -> List[str]:
    """
    Render the whole tree, root name first.

    Args:
        root: Root node of a snapshot.
        index: Optional content index used to flag unreadable/oversized files.
        show_sizes: Append file sizes in KB.

    Returns:
        List[str]: One string per rendered line.
    """
    lines: List[str] = [f"{root.name}/"]
    render_tree_structure(root, lines, index=index, show_sizes=show_sizes)
    return lines


def render_tree_structure(
        node: DirectoryNode,
        lines: List[str],
        prefix: str = "",
        index: Optional[ContentIndex] = None,
        show_sizes: bool = False,
) -> None:
    """
    Recursively append the children of ``node`` to ``lines``.

    Args:
        node: Directory whose children are rendered.
        lines: Accumulator list for output strings.
        prefix: Indentation prefix for the current recursion level.
        index: Optional content index for status annotations.
        show_sizes: Append file sizes in KB.
    """
    children = node.children or ()
    total = len(children)

    for i, child in enumerate(children):
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "

        if child.is_dir:
            lines.append(f"{prefix}{connector}{child.name}/")
            new_prefix = prefix + ("    " if is_last else "│   ")
            render_tree_structure(child, lines, prefix=new_prefix, index=index, show_sizes=show_sizes)
            continue

        lines.append(f"{prefix}{connector}{child.name}{_annotation(child, index, show_sizes)}")


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _annotation(node: DirectoryNode, index: Optional[ContentIndex], show_sizes: bool) -> str:
    parts: List[str] = []
    if show_sizes and node.size is not None:
        parts.append(format_size_kb(node.size))

    record = index.get(node.path) if index is not None else None
    if record is not None and record.status is not ContentStatus.OK:
        parts.append(record.status.value.replace("_", " "))

    return f"  ({', '.join(parts)})" if parts else ""
