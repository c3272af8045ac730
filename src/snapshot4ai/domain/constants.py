from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Provides centralized access to the content size thresholds, the placeholder
texts substituted for unreadable or oversized files, and the extension to
editor-language mapping.
"""

from typing import Dict

CURRENT_CONFIG_VERSION = "1.0.0"
DEFAULT_MODEL_KEY = "- Default Model -"

# -----------------------------------------------------------------------------
# CONTENT SIZE THRESHOLDS
# -----------------------------------------------------------------------------

# Values are shared with the viewer front-end and must stay bit-exact.
HARD_LIMIT: int = 5 * 1024 * 1024
PREVIEW_THRESHOLD: int = HARD_LIMIT // 2
PREVIEW_LIMIT: int = 100000

# -----------------------------------------------------------------------------
# PLACEHOLDER CONTENT
# -----------------------------------------------------------------------------

TRUNCATION_MARKER = "\n\n[... File truncated for performance reasons ...]"
READ_ERROR_CONTENT = "Error reading file content"
TOO_LARGE_TEMPLATE = "File is too large ({size})"

# -----------------------------------------------------------------------------
# LANGUAGE REGISTRY
# -----------------------------------------------------------------------------

DEFAULT_LANGUAGE = "plaintext"

LANGUAGE_BY_EXTENSION: Dict[str, str] = {
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "py": "python",
    "html": "html",
    "css": "css",
    "json": "json",
    "md": "markdown",
    "sql": "sql",
    "php": "php",
    "java": "java",
    "cpp": "cpp",
    "c": "c",
    "go": "go",
    "rs": "rust",
    "swift": "swift",
    "rb": "ruby",
}
