from __future__ import annotations

"""
Token Estimation Service.

Counts tokens of file content before it is sent for analysis, using the
tiktoken BPE encodings. Legacy GPT identifiers use ``cl100k_base``; every
other model uses ``o200k_base``.
"""

import logging
from functools import lru_cache

import tiktoken

from snapshot4ai.domain.constants import DEFAULT_MODEL_KEY

logger = logging.getLogger(__name__)

MODERN_ENCODING = "o200k_base"
LEGACY_ENCODING = "cl100k_base"
_LEGACY_MARKERS = ("gpt-4-", "gpt-3.5", "legacy")


def encoding_name_for(model: str) -> str:
    """Pick the tiktoken encoding name for ``model``."""
    model_lower = model.lower()
    if any(marker in model_lower for marker in _LEGACY_MARKERS):
        return LEGACY_ENCODING
    return MODERN_ENCODING


@lru_cache(maxsize=4)
def _get_encoding(name: str) -> "tiktoken.Encoding":
    return tiktoken.get_encoding(name)


def count_tokens(text: str, model: str = DEFAULT_MODEL_KEY) -> int:
    """
    Count the tokens of ``text`` for the target model.

    Args:
        text: Input string content.
        model: Target model name.

    Returns:
        int: Number of tokens (0 for empty text).
    """
    if not text:
        return 0
    encoding = _get_encoding(encoding_name_for(model))
    return len(encoding.encode(text, disallowed_special=()))
