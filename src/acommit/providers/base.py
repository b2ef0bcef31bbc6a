"""Base class, errors and response cleanup shared by the backend adapters."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from ..errors import AcommitError

log = logging.getLogger(__name__)

# Returned whenever a backend answers with nothing usable
FALLBACK_MESSAGE = "chore: update files"


class BackendError(AcommitError):
    """The request to the model backend failed.

    Attributes:
        status_code: HTTP status of the response, None if no response arrived
        reason: Reason phrase or transport error description
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


def collapse_whitespace(text: str) -> str:
    """Trim and replace every whitespace run, newlines included, with one space."""
    return " ".join(text.split())


def clean_message(text: Any, first_line_only: bool = False) -> str:
    """Reduce a raw model answer to a single-line commit message.

    Args:
        text: Text extracted from the response, or None if absent
        first_line_only: Drop everything after the first line instead of
            joining lines

    Returns:
        The cleaned message, or FALLBACK_MESSAGE if nothing usable remains
    """
    if not isinstance(text, str):
        return FALLBACK_MESSAGE

    text = text.strip()
    if first_line_only:
        lines = text.splitlines()
        text = lines[0] if lines else ""

    message = collapse_whitespace(text)
    return message or FALLBACK_MESSAGE


def dig(data: Any, *path: str | int) -> Any:
    """Follow keys and list indexes into decoded JSON.

    Returns None as soon as a step is missing or has the wrong type.
    """
    current = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or len(current) <= step:
                return None
        elif not isinstance(current, dict) or step not in current:
            return None
        current = current[step]
    return current


class AIProvider(ABC):
    """Abstract base class for model backends.

    Subclasses build the request and extract the text; sending the request,
    error translation and cleanup live here.
    """

    PROVIDER_NAME: str
    TIMEOUT: float = 60.0
    # Ollama and OpenAI-compatible models tend to add chatter after the message
    FIRST_LINE_ONLY: bool = True

    def __init__(self, model: str, transport: httpx.BaseTransport | None = None) -> None:
        """Initialize the provider.

        Args:
            model: Model to use
            transport: Optional httpx transport, used by tests
        """
        self.model = model
        self._transport = transport

    @abstractmethod
    def _build_request(self, prompt: str) -> dict[str, Any]:
        """Return keyword arguments for ``httpx.Client.post``."""
        ...

    @abstractmethod
    def _extract_text(self, data: Any) -> Any:
        """Pull the raw message text out of the decoded response."""
        ...

    def _post(self, prompt: str) -> httpx.Response:
        request = self._build_request(prompt)
        log.debug("POST %s (model %s)", request["url"], self.model)

        try:
            with httpx.Client(timeout=self.TIMEOUT, transport=self._transport) as client:
                response = client.post(**request)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            reason = e.response.reason_phrase
            raise BackendError(
                f"{self.PROVIDER_NAME} API request failed: {status} {reason}".rstrip(),
                status_code=status,
                reason=reason,
            ) from e
        except httpx.RequestError as e:
            reason = str(e) or type(e).__name__
            raise BackendError(
                f"{self.PROVIDER_NAME} API request failed: {reason}",
                reason=reason,
            ) from e

        return response

    def generate_commit_message(self, prompt: str) -> str:
        """Generate a commit message for the prompt.

        Args:
            prompt: The full prompt describing the changes

        Returns:
            A single-line commit message, FALLBACK_MESSAGE if the response
            held no usable text

        Raises:
            BackendError: If the request fails or the status is not 2xx
        """
        response = self._post(prompt)

        try:
            data = response.json()
        except ValueError:
            log.warning("%s returned a non-JSON body; using fallback message", self.PROVIDER_NAME)
            return FALLBACK_MESSAGE

        text = self._extract_text(data)
        if not isinstance(text, str) or not text.strip():
            log.warning("%s response had no message text; using fallback message", self.PROVIDER_NAME)

        return clean_message(text, first_line_only=self.FIRST_LINE_ONLY)

    def get_name(self) -> str:
        """Get the display name for this provider."""
        return f"{self.PROVIDER_NAME} ({self.model})"
