from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures built on the in-memory capability from 'fs_fakes'.
"""

import os
import sys

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

_TESTS_PATH = os.path.abspath(os.path.dirname(__file__))
if _TESTS_PATH not in sys.path:
    sys.path.insert(0, _TESTS_PATH)

from fs_fakes import FakeDir, text_file  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def sample_tree() -> FakeDir:
    """
    Small project delivered in deliberately unsorted order.

    Layout:
        project/
            zeta.py, README.md, src/ (main.py, Utils.py, lib/ (core.py)), Assets/ ()
    """
    return FakeDir("project", [
        text_file("zeta.py", "print('zeta')\n"),
        FakeDir("src", [
            text_file("main.py", "import utils\nprint('hello')\n"),
            text_file("Utils.py", "def helper():\n    return 42\n"),
            FakeDir("lib", [text_file("core.py", "CORE = True\n")]),
        ]),
        text_file("README.md", "# Demo project\n"),
        FakeDir("Assets", []),
    ])
