from __future__ import annotations

"""
Analysis Request Preparation.

Packages a snapshot file for the external language-model provider: content,
detected language, prompt and an up-front token estimate. The provider HTTP
clients live outside this package and only need to satisfy AnalysisProvider.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from snapshot4ai.core.services.tokenizer import count_tokens
from snapshot4ai.domain.constants import DEFAULT_MODEL_KEY
from snapshot4ai.domain.errors import ContentUnavailableError, FileTooLargeError
from snapshot4ai.domain.snapshot_models import ContentStatus, Snapshot
from snapshot4ai.domain.view_models import ChatMessage

logger = logging.getLogger(__name__)


class AnalysisProvider(Protocol):
    """Remote model able to analyze a piece of code."""

    async def analyze(self, code: str, prompt: str, language: str) -> str:
        ...


@dataclass(frozen=True)
class AnalysisRequest:
    """
    Everything needed to send one file to the provider.

    Attributes:
        generation: Snapshot generation the content was taken from.
        path: Snapshot path of the file.
        code: File content (possibly a truncated preview).
        language: Editor language identifier.
        prompt: User prompt.
        truncated: True if ``code`` is only a preview.
        token_count: Estimated prompt + code tokens for ``model``.
        model: Target model name.
    """
    generation: int
    path: str
    code: str
    language: str
    prompt: str
    truncated: bool
    token_count: int
    model: str = DEFAULT_MODEL_KEY


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_analysis_request(
        snapshot: Snapshot,
        path: str,
        prompt: str,
        model: str = DEFAULT_MODEL_KEY,
) -> AnalysisRequest:
    """
    Build a request for one file of ``snapshot``.

    Args:
        snapshot: Current snapshot.
        path: File path in the snapshot index.
        prompt: User prompt.
        model: Target model used for the token estimate.

    Returns:
        AnalysisRequest: The prepared request.

    Raises:
        KeyError: If ``path`` is not a file of the snapshot.
        FileTooLargeError: If the file exceeded the hard limit.
        ContentUnavailableError: If the file could not be read.
    """
    record = snapshot.index[path]

    if record.status is ContentStatus.TOO_LARGE:
        raise FileTooLargeError(path, record.size_bytes)
    if record.status is ContentStatus.READ_ERROR:
        raise ContentUnavailableError(f"Content of {path} could not be read")

    token_count = count_tokens(prompt, model) + count_tokens(record.content, model)
    logger.debug(f"Prepared analysis of {path}: ~{token_count} tokens for '{model}'")

    return AnalysisRequest(
        generation=snapshot.generation,
        path=path,
        code=record.content,
        language=record.language,
        prompt=prompt,
        truncated=record.truncated,
        token_count=token_count,
        model=model,
    )


async def run_analysis(provider: AnalysisProvider, request: AnalysisRequest) -> ChatMessage:
    """
    Send ``request`` to ``provider`` and wrap the answer as a transcript entry.

    Provider errors propagate to the caller.
    """
    response = await provider.analyze(request.code, request.prompt, request.language)
    return ChatMessage(prompt=request.prompt, response=response, file_path=request.path)
