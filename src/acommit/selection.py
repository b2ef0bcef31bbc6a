"""Resolved provider selection: one dataclass per backend."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar


class ProviderSelection(ABC):
    """A fully specified backend choice.

    Exactly one of the subclasses below is produced per run.
    """

    name: ClassVar[str]
    model: str

    @abstractmethod
    def describe(self) -> str:
        """Human-readable summary for status output."""
        ...


def _require(value: str | None, what: str) -> None:
    if not value:
        raise ValueError(f"{what} must be a non-empty string")


@dataclass(frozen=True)
class GeminiSelection(ProviderSelection):
    """Google Gemini generateContent API."""

    name: ClassVar[str] = "gemini"

    api_key: str
    model: str

    def __post_init__(self) -> None:
        _require(self.api_key, "Gemini api_key")
        _require(self.model, "model")

    def describe(self) -> str:
        return f"Gemini model: {self.model}"


@dataclass(frozen=True)
class OllamaSelection(ProviderSelection):
    """Local Ollama server."""

    name: ClassVar[str] = "ollama"

    base_url: str
    model: str

    def __post_init__(self) -> None:
        _require(self.base_url, "Ollama base_url")
        _require(self.model, "model")

    def describe(self) -> str:
        return f"Ollama model: {self.model} at {self.base_url}"


@dataclass(frozen=True)
class OpenAICompatibleSelection(ProviderSelection):
    """Any server exposing an OpenAI-style chat completions endpoint.

    ``api_key`` is None for self-hosted endpoints without authentication.
    """

    name: ClassVar[str] = "openai"

    base_url: str
    model: str
    api_key: str | None = None

    def __post_init__(self) -> None:
        _require(self.base_url, "OpenAI base_url")
        _require(self.model, "model")

    def describe(self) -> str:
        return f"OpenAI model: {self.model} at {self.base_url}"
