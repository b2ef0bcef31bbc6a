"""OpenAI-compatible API provider for commit message generation."""

from __future__ import annotations

from typing import Any

import httpx

from .base import AIProvider, dig


class OpenAICompatibleProvider(AIProvider):
    """Provider for any OpenAI-style chat completions endpoint.

    Works with api.openai.com as well as self-hosted servers (llama.cpp,
    vLLM, LM Studio and the like). Without an API key no Authorization
    header is sent.
    """

    PROVIDER_NAME = "OpenAI"
    MAX_TOKENS = 100
    TEMPERATURE = 0.7

    def __init__(
        self,
        base_url: str,
        model: str = "gpt-3.5-turbo",
        api_key: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize OpenAI-compatible provider.

        Args:
            base_url: API root, e.g. https://api.openai.com/v1
            model: Model to use (default: gpt-3.5-turbo)
            api_key: Bearer token, None for unauthenticated servers
            transport: Optional httpx transport, used by tests
        """
        super().__init__(model, transport)
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    def _build_request(self, prompt: str) -> dict[str, Any]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        return {
            "url": f"{self.base_url}/chat/completions",
            "headers": headers,
            "json": {
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "max_tokens": self.MAX_TOKENS,
                "temperature": self.TEMPERATURE,
            },
        }

    def _extract_text(self, data: Any) -> Any:
        return dig(data, "choices", 0, "message", "content")
