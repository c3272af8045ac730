from __future__ import annotations

"""
Resilient File Reading Component.

Loads a file through its capability handle under the size policy and turns
the outcome into a ContentRecord. Any failure (revoked permission, I/O error,
binary content) degrades to the read-error sentinel so that one bad file
never aborts the surrounding directory scan.
"""

import logging
from typing import Optional

from snapshot4ai.core.content.language import detect_language
from snapshot4ai.core.content.policy import (
    ReadAction,
    SizeDecision,
    classify,
    too_large_placeholder,
)
from snapshot4ai.domain.constants import (
    PREVIEW_LIMIT,
    PREVIEW_THRESHOLD,
    READ_ERROR_CONTENT,
    TRUNCATION_MARKER,
)
from snapshot4ai.domain.snapshot_models import ContentRecord, ContentStatus
from snapshot4ai.infra.fs import FileHandle

logger = logging.getLogger(__name__)

# Longest UTF-8 sequence minus one: a cut can leave at most this many bytes
_MAX_PARTIAL_SEQUENCE = 3

# A FULL read never asks for more than this; more bytes mean the file grew after sizing
_FULL_READ_CAP = PREVIEW_THRESHOLD + 1


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

async def read_file(
        handle: FileHandle,
        path: str,
        size_bytes: int,
        decision: Optional[SizeDecision] = None,
) -> ContentRecord:
    """
    Read a file into a ContentRecord without raising.

    Args:
        handle: Capability for the file.
        path: Snapshot path of the file node.
        size_bytes: Size reported by the capability.
        decision: Pre-computed policy decision; classified here if omitted.

    Returns:
        ContentRecord: Full, truncated, too-large or read-error record.
    """
    language = detect_language(handle.name)
    if decision is None:
        decision = classify(size_bytes)

    if decision.action is ReadAction.SKIP:
        return ContentRecord(
            path=path,
            content=too_large_placeholder(size_bytes),
            size_bytes=size_bytes,
            too_large=True,
            status=ContentStatus.TOO_LARGE,
            language=language,
        )

    try:
        if decision.action is ReadAction.PREVIEW:
            limit = int(decision.preview_bytes or 0)
            data = (await handle.read_bytes(limit))[:limit]
            return _preview_record(path, data, size_bytes, language)

        data = await handle.read_bytes(_FULL_READ_CAP)
        if len(data) > PREVIEW_THRESHOLD:
            logger.warning(f"{path} grew past {PREVIEW_THRESHOLD} bytes while scanning; keeping a preview")
            return _preview_record(path, data[:PREVIEW_LIMIT], size_bytes, language)

        return ContentRecord(
            path=path,
            content=data.decode("utf-8"),
            size_bytes=size_bytes,
            language=language,
        )
    except Exception as e:
        logger.warning(f"Failed to read {path}: {type(e).__name__}: {e}")
        return read_error_record(path, size_bytes, language)


def read_error_record(path: str, size_bytes: int = 0, language: Optional[str] = None) -> ContentRecord:
    """Build the sentinel record used for files that could not be read."""
    return ContentRecord(
        path=path,
        content=READ_ERROR_CONTENT,
        size_bytes=size_bytes,
        status=ContentStatus.READ_ERROR,
        language=language or detect_language(path.rsplit("/", 1)[-1]),
    )


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _preview_record(path: str, data: bytes, size_bytes: int, language: str) -> ContentRecord:
    return ContentRecord(
        path=path,
        content=_decode_prefix(data) + TRUNCATION_MARKER,
        size_bytes=size_bytes,
        truncated=True,
        status=ContentStatus.TRUNCATED,
        language=language,
    )


def _decode_prefix(data: bytes) -> str:
    """
    Decode a byte prefix, tolerating a multi-byte character cut at the end.

    Invalid bytes anywhere else still raise UnicodeDecodeError.
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        if e.reason == "unexpected end of data" and len(data) - e.start <= _MAX_PARTIAL_SEQUENCE:
            return data[:e.start].decode("utf-8")
        raise
