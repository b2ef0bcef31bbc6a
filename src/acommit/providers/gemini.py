"""Google Gemini provider for commit message generation."""

from __future__ import annotations

from typing import Any

import httpx

from .base import AIProvider, dig


class GeminiProvider(AIProvider):
    """Gemini generateContent API provider.

    The whole answer is treated as one logical line: embedded newlines are
    folded into spaces rather than cut off.
    """

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
    PROVIDER_NAME = "Gemini"
    FIRST_LINE_ONLY = False

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash-lite",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize Gemini provider.

        Args:
            api_key: Gemini API key, sent as the ``key`` query parameter
            model: Model to use (default: gemini-2.5-flash-lite)
            transport: Optional httpx transport, used by tests
        """
        super().__init__(model, transport)
        self.api_key = api_key

    def _build_request(self, prompt: str) -> dict[str, Any]:
        return {
            "url": f"{self.BASE_URL}/{self.model}:generateContent",
            "params": {"key": self.api_key},
            "headers": {"Content-Type": "application/json"},
            "json": {"contents": [{"parts": [{"text": prompt}]}]},
        }

    def _extract_text(self, data: Any) -> Any:
        return dig(data, "candidates", 0, "content", "parts", 0, "text")
