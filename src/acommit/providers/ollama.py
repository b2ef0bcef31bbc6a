"""Ollama local provider for commit message generation."""

from __future__ import annotations

from typing import Any

import httpx

from .base import AIProvider, dig


class OllamaProvider(AIProvider):
    """Ollama local provider using the non-streaming generate endpoint."""

    PROVIDER_NAME = "Ollama"
    TIMEOUT = 120.0  # Ollama can be slow

    def __init__(
        self,
        model: str = "llama3.2:3b",
        base_url: str = "http://localhost:11434",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize Ollama provider.

        Args:
            model: Model to use (default: llama3.2:3b)
            base_url: Ollama server URL (default: http://localhost:11434)
            transport: Optional httpx transport, used by tests
        """
        super().__init__(model, transport)
        self.base_url = base_url.rstrip("/")

    def _build_request(self, prompt: str) -> dict[str, Any]:
        return {
            "url": f"{self.base_url}/api/generate",
            "headers": {"Content-Type": "application/json"},
            "json": {
                "model": self.model,
                "prompt": prompt,
                "stream": False,
            },
        }

    def _extract_text(self, data: Any) -> Any:
        return dig(data, "response")
