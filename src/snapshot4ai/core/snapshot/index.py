from __future__ import annotations

"""
Flat Content Index.

Maps every file path of a snapshot to its ContentRecord, in discovery order.
Built once from the records collected by the builder and read-only after.
"""

from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from snapshot4ai.domain.snapshot_models import ContentRecord


class ContentIndex:
    """
    Immutable, insertion-ordered mapping from path to ContentRecord.

    Duplicate paths are rejected at construction: each file node of a
    snapshot owns exactly one record.
    """

    __slots__ = ("_records",)

    def __init__(self, records: Iterable[ContentRecord] = ()) -> None:
        entries: Dict[str, ContentRecord] = {}
        for record in records:
            if record.path in entries:
                raise ValueError(f"Duplicate content record for path '{record.path}'")
            entries[record.path] = record
        self._records: Mapping[str, ContentRecord] = MappingProxyType(entries)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __contains__(self, path: object) -> bool:
        return path in self._records

    def __getitem__(self, path: str) -> ContentRecord:
        return self._records[path]

    def __repr__(self) -> str:
        return f"ContentIndex({len(self._records)} records)"

    def get(self, path: str) -> Optional[ContentRecord]:
        return self._records.get(path)

    def paths(self) -> List[str]:
        return list(self._records)

    def records(self) -> List[ContentRecord]:
        return list(self._records.values())

    def as_mapping(self) -> Mapping[str, ContentRecord]:
        """Read-only view of the underlying mapping."""
        return self._records
