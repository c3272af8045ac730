from __future__ import annotations

"""
View State Data Models.

Defines the consumer-facing state that is tied to a snapshot generation:
the selected file, the displayed content, the active search and the analysis
transcript. Everything here is discarded when a new directory is selected.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

# -----------------------------------------------------------------------------
# LIFECYCLE STATES
# -----------------------------------------------------------------------------


class LifecycleState(str, Enum):
    EMPTY = "empty"
    BUILDING = "building"
    READY = "ready"


# -----------------------------------------------------------------------------
# TRANSCRIPT
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ChatMessage:
    """
    One prompt/response exchange with the analysis provider.

    Attributes:
        id: Unique message identifier.
        timestamp: ISO-8601 creation time (UTC).
        prompt: User prompt sent to the provider.
        response: Provider answer.
        file_path: Snapshot path of the analyzed file, if any.
    """
    prompt: str
    response: str
    file_path: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


# -----------------------------------------------------------------------------
# DEPENDENT VIEW STATE
# -----------------------------------------------------------------------------


@dataclass
class ViewState:
    """
    Mutable state derived from the current snapshot.

    Attributes:
        generation: Snapshot generation the state refers to.
        selected_path: Path of the selected file node.
        displayed_content: Content currently shown for the selection.
        search_query: Last search query.
        search_results: Paths returned for the last query.
        transcript: Analysis exchanges referring to this snapshot.
    """
    generation: int = 0
    selected_path: Optional[str] = None
    displayed_content: str = ""
    search_query: str = ""
    search_results: List[str] = field(default_factory=list)
    transcript: List[ChatMessage] = field(default_factory=list)

    def clear(self, generation: int) -> None:
        """Reset every field and retag the state with ``generation``."""
        self.generation = generation
        self.selected_path = None
        self.displayed_content = ""
        self.search_query = ""
        self.search_results = []
        self.transcript = []

    @property
    def is_empty(self) -> bool:
        return (
            self.selected_path is None
            and not self.displayed_content
            and not self.search_query
            and not self.search_results
            and not self.transcript
        )
