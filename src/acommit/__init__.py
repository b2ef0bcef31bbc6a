"""AI-generated git commit messages using Gemini, Ollama or OpenAI-compatible APIs."""

__version__ = "0.1.0"

from .providers import BackendError, generate_commit_message
from .resolver import ResolvedConfig, resolve
from .selection import (
    GeminiSelection,
    OllamaSelection,
    OpenAICompatibleSelection,
    ProviderSelection,
)

__all__ = [
    "BackendError",
    "GeminiSelection",
    "OllamaSelection",
    "OpenAICompatibleSelection",
    "ProviderSelection",
    "ResolvedConfig",
    "generate_commit_message",
    "resolve",
    "__version__",
]
