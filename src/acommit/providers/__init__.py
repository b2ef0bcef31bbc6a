"""Model backends for commit message generation."""

from __future__ import annotations

import httpx

from ..selection import (
    GeminiSelection,
    OllamaSelection,
    OpenAICompatibleSelection,
    ProviderSelection,
)
from .base import FALLBACK_MESSAGE, AIProvider, BackendError, clean_message
from .gemini import GeminiProvider
from .ollama import OllamaProvider
from .openai import OpenAICompatibleProvider

__all__ = [
    "AIProvider",
    "BackendError",
    "FALLBACK_MESSAGE",
    "GeminiProvider",
    "OllamaProvider",
    "OpenAICompatibleProvider",
    "clean_message",
    "create_provider",
    "generate_commit_message",
]


def create_provider(
    selection: ProviderSelection,
    transport: httpx.BaseTransport | None = None,
) -> AIProvider:
    """Build the adapter matching a resolved selection.

    Args:
        selection: The resolved provider selection
        transport: Optional httpx transport, used by tests

    Returns:
        An AIProvider instance

    Raises:
        TypeError: If the selection type has no adapter
    """
    if isinstance(selection, GeminiSelection):
        return GeminiProvider(
            api_key=selection.api_key,
            model=selection.model,
            transport=transport,
        )
    elif isinstance(selection, OllamaSelection):
        return OllamaProvider(
            model=selection.model,
            base_url=selection.base_url,
            transport=transport,
        )
    elif isinstance(selection, OpenAICompatibleSelection):
        return OpenAICompatibleProvider(
            base_url=selection.base_url,
            model=selection.model,
            api_key=selection.api_key,
            transport=transport,
        )
    else:
        raise TypeError(f"No provider for selection {type(selection).__name__}")


def generate_commit_message(
    selection: ProviderSelection,
    prompt: str,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Generate a commit message with the selected backend.

    Args:
        selection: The resolved provider selection
        prompt: Prompt describing the pending changes
        transport: Optional httpx transport, used by tests

    Returns:
        The cleaned single-line commit message

    Raises:
        BackendError: If the backend request fails
    """
    return create_provider(selection, transport).generate_commit_message(prompt)
