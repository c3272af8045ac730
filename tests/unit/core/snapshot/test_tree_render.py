from __future__ import annotations

"""Unit tests for the ASCII Tree Renderer."""

import asyncio

from fs_fakes import FakeDir, FakeFile, text_file

from snapshot4ai.core.snapshot.builder import SnapshotBuilder
from snapshot4ai.core.snapshot.render import render_tree
from snapshot4ai.domain.constants import HARD_LIMIT


def test_render_structure(sample_tree: FakeDir) -> None:
    snapshot = asyncio.run(SnapshotBuilder().build(sample_tree))

    assert render_tree(snapshot.root) == [
        "project/",
        "├── Assets/",
        "├── src/",
        "│   ├── lib/",
        "│   │   └── core.py",
        "│   ├── main.py",
        "│   └── Utils.py",
        "├── README.md",
        "└── zeta.py",
    ]


def test_render_annotations() -> None:
    root = FakeDir("r", [
        FakeFile("huge.bin", b"", size=HARD_LIMIT + 1),
        text_file("a.txt", "x" * 1536),
        FakeFile("bad.txt", b"", fail_read=True),
    ])
    snapshot = asyncio.run(SnapshotBuilder().build(root))

    lines = render_tree(snapshot.root, snapshot.index, show_sizes=True)

    assert "├── a.txt  (1.5 KB)" in lines
    assert "├── bad.txt  (0.0 KB, read error)" in lines
    assert "└── huge.bin  (5120.0 KB, too large)" in lines
