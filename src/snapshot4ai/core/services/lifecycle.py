from __future__ import annotations

"""
Snapshot Lifecycle Service.

Owns the current snapshot and the view state derived from it, and governs
when the snapshot may be replaced:

    EMPTY -> BUILDING -> READY -> BUILDING -> READY ...

Every rebuild is tagged with a new generation token. Leaving READY clears the
view state (selection, displayed content, search, transcript) before the
first suspension point. A build that completes after a newer one was started
is discarded, so the last build wins without cancelling anything. A fatal
root failure leaves the previous snapshot current.
"""

import logging
from typing import Callable, List, Optional

from snapshot4ai.core.services.analysis import (
    AnalysisProvider,
    build_analysis_request,
    run_analysis,
)
from snapshot4ai.core.services.search import SearchEngine
from snapshot4ai.core.snapshot.builder import SnapshotBuilder
from snapshot4ai.domain.constants import DEFAULT_MODEL_KEY
from snapshot4ai.domain.errors import FileTooLargeError, LifecycleError
from snapshot4ai.domain.snapshot_models import ContentRecord, Snapshot
from snapshot4ai.domain.view_models import ChatMessage, LifecycleState, ViewState
from snapshot4ai.infra.fs import DirectoryHandle

logger = logging.getLogger(__name__)


class SnapshotLifecycle:
    """
    State machine around SnapshotBuilder for a single viewer session.

    Args:
        builder: Builder used for every rescan; a sequential one by default.
    """

    def __init__(self, builder: Optional[SnapshotBuilder] = None) -> None:
        self._builder = builder or SnapshotBuilder()
        self._state = LifecycleState.EMPTY
        self._snapshot: Optional[Snapshot] = None
        self._search: Optional[SearchEngine] = None
        self._latest_generation = 0
        self.view = ViewState()

    # -------------------------------------------------------------------------
    # INTROSPECTION
    # -------------------------------------------------------------------------

    @property
    def state(self) -> LifecycleState:
        return self._state

    def current_snapshot(self) -> Optional[Snapshot]:
        return self._snapshot

    # -------------------------------------------------------------------------
    # SNAPSHOT REPLACEMENT
    # -------------------------------------------------------------------------

    async def rebuild(self, root_handle: DirectoryHandle) -> Optional[Snapshot]:
        """
        Scan ``root_handle`` and publish the result as the current snapshot.

        Args:
            root_handle: Capability for the newly selected directory.

        Returns:
            Optional[Snapshot]: The published snapshot, or None when a newer
            rebuild superseded this one before it completed.

        Raises:
            SnapshotBuildError: If the root cannot be read. The previous
                snapshot stays current.
        """
        self._latest_generation += 1
        generation = self._latest_generation

        # Must happen before the first await
        self._state = LifecycleState.BUILDING
        self.view.clear(generation)
        logger.info(f"Building snapshot #{generation} of '{root_handle.name}'")

        try:
            snapshot = await self._builder.build(root_handle, generation=generation)
        except Exception:
            if generation == self._latest_generation:
                self._restore_after_failure()
            raise

        if generation != self._latest_generation:
            logger.info(
                f"Discarding snapshot #{generation}: superseded by #{self._latest_generation}"
            )
            return None

        self._snapshot = snapshot
        self._search = SearchEngine(snapshot.index)
        self._state = LifecycleState.READY
        return snapshot

    async def request_rescan(
            self,
            root_handle: DirectoryHandle,
            confirm: Callable[[], bool],
    ) -> Optional[Snapshot]:
        """
        Rescan after asking for confirmation when a transcript would be lost.

        Nothing is cleared when the user declines.

        Args:
            root_handle: Capability for the newly selected directory.
            confirm: Callback returning True to proceed.

        Returns:
            Optional[Snapshot]: The new snapshot, or None if declined or superseded.
        """
        if self.view.transcript and not confirm():
            logger.info("Rescan declined; keeping current snapshot and transcript")
            return None
        return await self.rebuild(root_handle)

    # -------------------------------------------------------------------------
    # CONSUMER OPERATIONS
    # -------------------------------------------------------------------------

    def search(self, query: str) -> List[str]:
        """
        Search the current snapshot and remember query and results.

        Returns:
            List[str]: Matching paths (empty when there is no snapshot).
        """
        self._ensure_not_building("search")
        results = self._search.search(query) if self._search is not None else []
        self.view.search_query = query
        self.view.search_results = results
        return results

    def select_file(self, path: str) -> ContentRecord:
        """
        Make ``path`` the selected file and display its content.

        Raises:
            LifecycleError: If no snapshot is ready.
            KeyError: If ``path`` is not a file of the current snapshot.
            FileTooLargeError: If the file exceeded the hard limit.
        """
        snapshot = self._require_ready("select a file")
        record = snapshot.index[path]
        if record.too_large:
            raise FileTooLargeError(path, record.size_bytes)

        self.view.selected_path = path
        self.view.displayed_content = record.content
        return record

    def record_exchange(self, message: ChatMessage) -> None:
        """Append an analysis exchange to the transcript."""
        self._require_ready("record an analysis exchange")
        self.view.transcript.append(message)

    async def analyze(
            self,
            provider: AnalysisProvider,
            prompt: str,
            path: Optional[str] = None,
            model: str = DEFAULT_MODEL_KEY,
    ) -> Optional[ChatMessage]:
        """
        Analyze a file of the current snapshot and record the exchange.

        Args:
            provider: External analysis provider.
            prompt: User prompt.
            path: File to analyze; defaults to the selected file.
            model: Target model for the token estimate.

        Returns:
            Optional[ChatMessage]: The recorded exchange, or None when the
            snapshot was replaced while the provider was answering.
        """
        snapshot = self._require_ready("analyze")
        target = path or self.view.selected_path
        if target is None:
            raise LifecycleError("No file selected for analysis")

        request = build_analysis_request(snapshot, target, prompt, model)
        message = await run_analysis(provider, request)

        if self._state is not LifecycleState.READY or self.view.generation != request.generation:
            logger.info(f"Dropping analysis of {target}: snapshot #{request.generation} is stale")
            return None

        self.view.transcript.append(message)
        return message

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _restore_after_failure(self) -> None:
        if self._snapshot is not None:
            self._state = LifecycleState.READY
            self.view.generation = self._snapshot.generation
        else:
            self._state = LifecycleState.EMPTY
            self.view.generation = 0

    def _ensure_not_building(self, action: str) -> None:
        if self._state is LifecycleState.BUILDING:
            raise LifecycleError(f"Cannot {action} while a snapshot is being built")

    def _require_ready(self, action: str) -> Snapshot:
        self._ensure_not_building(action)
        if self._snapshot is None:
            raise LifecycleError(f"Cannot {action} without a snapshot")
        return self._snapshot
