from __future__ import annotations

"""
Snapshot Search Service.

Case-insensitive substring search over a ContentIndex, matching either the
file path or the file content. Results keep index order (the order in which
files were discovered); there is no relevance ranking.

Content matching only covers records whose status is OK or TRUNCATED. The
placeholder texts stored for oversized and unreadable files are not file
content, so they are matched by path only. A plain substring scan over every
record's text would instead return all of them for queries such as
"too large" or "error reading".
"""

import logging
from typing import List

from snapshot4ai.core.snapshot.index import ContentIndex

logger = logging.getLogger(__name__)


class SearchEngine:
    """Query a single snapshot's content index."""

    def __init__(self, index: ContentIndex) -> None:
        self._index = index

    def search(self, query: str) -> List[str]:
        """
        Return the paths whose name or content contains ``query``.

        An empty query returns no results. Placeholder texts of oversized or
        unreadable files are not searched as content.

        Args:
            query: Raw search string.

        Returns:
            List[str]: Matching paths in index order.
        """
        if not query:
            return []

        needle = query.lower()
        results = [
            record.path
            for record in self._index.records()
            if needle in record.path.lower()
            or (record.is_readable and needle in record.content.lower())
        ]
        logger.debug(f"Search '{query}' matched {len(results)} of {len(self._index)} files")
        return results


def search_index(index: ContentIndex, query: str) -> List[str]:
    """Functional shortcut for ``SearchEngine(index).search(query)``."""
    return SearchEngine(index).search(query)
