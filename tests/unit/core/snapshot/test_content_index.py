from __future__ import annotations

"""Unit tests for the flat Content Index."""

import pytest

from snapshot4ai.core.snapshot.index import ContentIndex
from snapshot4ai.domain.snapshot_models import ContentRecord


def _record(path: str, content: str = "") -> ContentRecord:
    return ContentRecord(path=path, content=content, size_bytes=len(content))


def test_preserves_insertion_order() -> None:
    index = ContentIndex([_record("/b"), _record("/a"), _record("/c")])

    assert index.paths() == ["/b", "/a", "/c"]
    assert list(index) == ["/b", "/a", "/c"]
    assert len(index) == 3


def test_lookup() -> None:
    index = ContentIndex([_record("/a.txt", "hello")])

    assert "/a.txt" in index
    assert index["/a.txt"].content == "hello"
    assert index.get("/missing") is None
    with pytest.raises(KeyError):
        index["/missing"]


def test_duplicate_paths_rejected() -> None:
    with pytest.raises(ValueError):
        ContentIndex([_record("/a"), _record("/a")])


def test_mapping_view_is_read_only() -> None:
    index = ContentIndex([_record("/a")])

    with pytest.raises(TypeError):
        index.as_mapping()["/b"] = _record("/b")  # type: ignore[index]
