from __future__ import annotations

"""Editor language detection by file extension."""

from snapshot4ai.domain.constants import DEFAULT_LANGUAGE, LANGUAGE_BY_EXTENSION


def detect_language(file_name: str) -> str:
    """
    Map a file name to the editor language identifier.

    Only the last extension counts; names without a dot are treated as
    their own extension (``Makefile`` -> ``makefile``), which falls back
    to plain text.

    Args:
        file_name: Base name of the file.

    Returns:
        str: Language id such as ``python`` or ``plaintext``.
    """
    extension = file_name.rsplit(".", 1)[-1].lower()
    return LANGUAGE_BY_EXTENSION.get(extension, DEFAULT_LANGUAGE)
