from __future__ import annotations

"""
Content Size Policy.

Classifies how much of a file may be loaded into memory based on its byte
size alone. Pure and side-effect free: the file is never touched here.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from snapshot4ai.domain.constants import (
    HARD_LIMIT,
    PREVIEW_LIMIT,
    PREVIEW_THRESHOLD,
    TOO_LARGE_TEMPLATE,
)


class ReadAction(str, Enum):
    FULL = "full"
    PREVIEW = "preview"
    SKIP = "skip"


@dataclass(frozen=True)
class SizeDecision:
    """
    Outcome of classifying a file size.

    Attributes:
        action: How much of the file to read.
        preview_bytes: Byte limit for PREVIEW reads, None otherwise.
    """
    action: ReadAction
    preview_bytes: Optional[int] = None


_FULL = SizeDecision(ReadAction.FULL)
_PREVIEW = SizeDecision(ReadAction.PREVIEW, PREVIEW_LIMIT)
_SKIP = SizeDecision(ReadAction.SKIP)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def classify(size_bytes: int) -> SizeDecision:
    """
    Decide how a file of ``size_bytes`` bytes is loaded.

    - SKIP: above HARD_LIMIT, nothing is read.
    - PREVIEW: above HARD_LIMIT / 2, only the first PREVIEW_LIMIT bytes.
    - FULL: everything else.

    Args:
        size_bytes: Non-negative file size.

    Returns:
        SizeDecision: The read directive.
    """
    if size_bytes < 0:
        raise ValueError(f"size_bytes must be non-negative, got {size_bytes}")
    if size_bytes > HARD_LIMIT:
        return _SKIP
    if size_bytes > PREVIEW_THRESHOLD:
        return _PREVIEW
    return _FULL


def format_size_mb(size_bytes: int) -> str:
    """Render a byte count as megabytes with two decimals, e.g. ``6.00MB``."""
    return f"{size_bytes / 1024 / 1024:.2f}MB"


def format_size_kb(size_bytes: int) -> str:
    """Render a byte count as kilobytes with one decimal, e.g. ``1.5 KB``."""
    return f"{size_bytes / 1024:.1f} KB"


def too_large_placeholder(size_bytes: int) -> str:
    """Placeholder content substituted for files above the hard limit."""
    return TOO_LARGE_TEMPLATE.format(size=format_size_mb(size_bytes))
