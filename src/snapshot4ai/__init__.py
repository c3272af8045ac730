from __future__ import annotations

"""
snapshot4ai.

Directory snapshot and content-indexing engine for AI-assisted code viewing.
"""

__version__ = "0.1.0"
