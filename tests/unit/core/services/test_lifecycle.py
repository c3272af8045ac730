from __future__ import annotations

"""
Unit tests for the Snapshot Lifecycle Service.

Verifies:
1. EMPTY -> BUILDING -> READY transitions.
2. Dependent view state is cleared when a rescan starts.
3. Last build wins; superseded results are discarded.
4. Root failures keep the previous snapshot current.
5. Confirmation policy for rescans with an existing transcript.
"""

import asyncio
from typing import List

import pytest
from fs_fakes import FakeDir, FakeFile, text_file

from snapshot4ai.core.services import analysis
from snapshot4ai.core.services.lifecycle import SnapshotLifecycle
from snapshot4ai.domain.constants import HARD_LIMIT
from snapshot4ai.domain.errors import FileTooLargeError, LifecycleError, SnapshotBuildError
from snapshot4ai.domain.view_models import ChatMessage, LifecycleState


class GatedDir(FakeDir):
    """FakeDir whose enumeration waits until ``gate`` is set."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.gate = asyncio.Event()

    async def entries(self):
        await self.gate.wait()
        async for entry in super().entries():
            yield entry


class EchoProvider:
    def __init__(self) -> None:
        self.calls: List[tuple] = []

    async def analyze(self, code: str, prompt: str, language: str) -> str:
        self.calls.append((code, prompt, language))
        return f"{language}:{len(code)}"


@pytest.fixture(autouse=True)
def fake_token_count(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tiktoken encodings out of lifecycle tests."""
    monkeypatch.setattr(analysis, "count_tokens", lambda text, model="": len(text.split()))


def _other_tree() -> FakeDir:
    return FakeDir("other", [text_file("new.txt", "fresh content")])


def _populate_view(lifecycle: SnapshotLifecycle) -> None:
    lifecycle.select_file("/README.md")
    lifecycle.search("hello")
    lifecycle.record_exchange(ChatMessage(prompt="explain", response="ok", file_path="/README.md"))


# -----------------------------------------------------------------------------
# Transitions
# -----------------------------------------------------------------------------

def test_initial_state_is_empty() -> None:
    lifecycle = SnapshotLifecycle()

    assert lifecycle.state is LifecycleState.EMPTY
    assert lifecycle.current_snapshot() is None
    assert lifecycle.search("anything") == []


def test_rebuild_publishes_snapshot(sample_tree: FakeDir) -> None:
    lifecycle = SnapshotLifecycle()

    snapshot = asyncio.run(lifecycle.rebuild(sample_tree))

    assert snapshot is not None
    assert lifecycle.state is LifecycleState.READY
    assert lifecycle.current_snapshot() is snapshot
    assert snapshot.generation == 1
    assert lifecycle.search("hello") == ["/src/main.py"]


def test_generation_increases_on_every_rescan(sample_tree: FakeDir) -> None:
    lifecycle = SnapshotLifecycle()

    first = asyncio.run(lifecycle.rebuild(sample_tree))
    second = asyncio.run(lifecycle.rebuild(_other_tree()))

    assert second.generation > first.generation
    assert lifecycle.current_snapshot() is second


def test_state_is_building_during_scan() -> None:
    async def scenario() -> None:
        lifecycle = SnapshotLifecycle()
        gated = GatedDir("gated", [text_file("a.txt", "a")])

        task = asyncio.create_task(lifecycle.rebuild(gated))
        await asyncio.sleep(0)
        assert lifecycle.state is LifecycleState.BUILDING
        with pytest.raises(LifecycleError):
            lifecycle.select_file("/a.txt")

        gated.gate.set()
        await task
        assert lifecycle.state is LifecycleState.READY

    asyncio.run(scenario())


# -----------------------------------------------------------------------------
# Dependent State Invalidation
# -----------------------------------------------------------------------------

def test_rescan_clears_dependent_state_immediately(sample_tree: FakeDir) -> None:
    async def scenario() -> None:
        lifecycle = SnapshotLifecycle()
        await lifecycle.rebuild(sample_tree)
        _populate_view(lifecycle)

        assert lifecycle.view.selected_path == "/README.md"
        assert lifecycle.view.displayed_content == "# Demo project\n"
        assert lifecycle.view.search_results == ["/src/main.py"]
        assert len(lifecycle.view.transcript) == 1

        gated = GatedDir("next", [text_file("b.txt", "b")])
        task = asyncio.create_task(lifecycle.rebuild(gated))
        await asyncio.sleep(0)

        assert lifecycle.view.selected_path is None
        assert lifecycle.view.displayed_content == ""
        assert lifecycle.view.search_query == ""
        assert lifecycle.view.search_results == []
        assert lifecycle.view.transcript == []

        gated.gate.set()
        await task
        assert lifecycle.view.is_empty
        assert lifecycle.view.generation == lifecycle.current_snapshot().generation

    asyncio.run(scenario())


# -----------------------------------------------------------------------------
# Last Build Wins
# -----------------------------------------------------------------------------

def test_superseded_build_is_discarded() -> None:
    async def scenario() -> None:
        lifecycle = SnapshotLifecycle()
        slow = GatedDir("slow", [text_file("old.txt", "old")])

        first = asyncio.create_task(lifecycle.rebuild(slow))
        await asyncio.sleep(0)

        newest = await lifecycle.rebuild(_other_tree())
        slow.gate.set()
        stale = await first

        assert stale is None
        assert lifecycle.current_snapshot() is newest
        assert "/new.txt" in newest.index
        assert lifecycle.state is LifecycleState.READY

    asyncio.run(scenario())


def test_superseded_failure_does_not_reset_state() -> None:
    async def scenario() -> None:
        lifecycle = SnapshotLifecycle()
        doomed = GatedDir("doomed", fail_enumerate=True)

        first = asyncio.create_task(lifecycle.rebuild(doomed))
        await asyncio.sleep(0)
        second = asyncio.create_task(lifecycle.rebuild(GatedDir("pending")))
        await asyncio.sleep(0)

        doomed.gate.set()
        with pytest.raises(SnapshotBuildError):
            await first
        assert lifecycle.state is LifecycleState.BUILDING

        second.cancel()

    asyncio.run(scenario())


# -----------------------------------------------------------------------------
# Fatal Root Failure
# -----------------------------------------------------------------------------

def test_root_failure_keeps_previous_snapshot(sample_tree: FakeDir) -> None:
    lifecycle = SnapshotLifecycle()
    previous = asyncio.run(lifecycle.rebuild(sample_tree))

    with pytest.raises(SnapshotBuildError):
        asyncio.run(lifecycle.rebuild(FakeDir("revoked", fail_enumerate=True)))

    assert lifecycle.current_snapshot() is previous
    assert lifecycle.state is LifecycleState.READY
    assert lifecycle.view.generation == previous.generation
    assert lifecycle.search("zeta") == ["/zeta.py"]


def test_root_failure_from_empty_returns_to_empty() -> None:
    lifecycle = SnapshotLifecycle()

    with pytest.raises(SnapshotBuildError):
        asyncio.run(lifecycle.rebuild(FakeDir("revoked", fail_enumerate=True)))

    assert lifecycle.state is LifecycleState.EMPTY
    assert lifecycle.current_snapshot() is None


# -----------------------------------------------------------------------------
# Confirmation Policy
# -----------------------------------------------------------------------------

def test_declined_rescan_clears_nothing(sample_tree: FakeDir) -> None:
    lifecycle = SnapshotLifecycle()
    previous = asyncio.run(lifecycle.rebuild(sample_tree))
    _populate_view(lifecycle)

    result = asyncio.run(lifecycle.request_rescan(_other_tree(), confirm=lambda: False))

    assert result is None
    assert lifecycle.current_snapshot() is previous
    assert lifecycle.view.selected_path == "/README.md"
    assert len(lifecycle.view.transcript) == 1


def test_confirmed_rescan_replaces_snapshot(sample_tree: FakeDir) -> None:
    lifecycle = SnapshotLifecycle()
    asyncio.run(lifecycle.rebuild(sample_tree))
    _populate_view(lifecycle)

    result = asyncio.run(lifecycle.request_rescan(_other_tree(), confirm=lambda: True))

    assert result is lifecycle.current_snapshot()
    assert lifecycle.view.is_empty


def test_no_confirmation_needed_without_transcript(sample_tree: FakeDir) -> None:
    lifecycle = SnapshotLifecycle()
    asyncio.run(lifecycle.rebuild(sample_tree))

    def fail() -> bool:
        raise AssertionError("confirmation should not be requested")

    assert asyncio.run(lifecycle.request_rescan(_other_tree(), confirm=fail)) is not None


# -----------------------------------------------------------------------------
# Selection and Analysis
# -----------------------------------------------------------------------------

def test_select_file_rejects_unknown_and_too_large() -> None:
    lifecycle = SnapshotLifecycle()
    asyncio.run(lifecycle.rebuild(FakeDir("r", [FakeFile("huge.bin", b"", size=HARD_LIMIT + 1)])))

    with pytest.raises(KeyError):
        lifecycle.select_file("/missing.txt")
    with pytest.raises(FileTooLargeError):
        lifecycle.select_file("/huge.bin")
    assert lifecycle.view.selected_path is None


def test_select_file_requires_snapshot() -> None:
    with pytest.raises(LifecycleError):
        SnapshotLifecycle().select_file("/a.txt")


def test_analyze_selected_file_records_exchange(sample_tree: FakeDir) -> None:
    lifecycle = SnapshotLifecycle()
    provider = EchoProvider()

    async def scenario() -> None:
        await lifecycle.rebuild(sample_tree)
        lifecycle.select_file("/src/main.py")
        message = await lifecycle.analyze(provider, "What does this do?")

        assert message is not None
        assert message.file_path == "/src/main.py"
        assert message.response.startswith("python:")
        assert lifecycle.view.transcript == [message]

    asyncio.run(scenario())
    assert provider.calls[0][1] == "What does this do?"


def test_analyze_without_selection_fails(sample_tree: FakeDir) -> None:
    lifecycle = SnapshotLifecycle()
    asyncio.run(lifecycle.rebuild(sample_tree))

    with pytest.raises(LifecycleError):
        asyncio.run(lifecycle.analyze(EchoProvider(), "explain"))


def test_analysis_finishing_after_rescan_is_dropped(sample_tree: FakeDir) -> None:
    class SlowProvider:
        def __init__(self) -> None:
            self.gate = asyncio.Event()

        async def analyze(self, code: str, prompt: str, language: str) -> str:
            await self.gate.wait()
            return "late answer"

    async def scenario() -> None:
        lifecycle = SnapshotLifecycle()
        await lifecycle.rebuild(sample_tree)
        provider = SlowProvider()

        pending = asyncio.create_task(lifecycle.analyze(provider, "explain", path="/zeta.py"))
        await asyncio.sleep(0)
        await lifecycle.rebuild(_other_tree())

        provider.gate.set()
        assert await pending is None
        assert lifecycle.view.transcript == []

    asyncio.run(scenario())
