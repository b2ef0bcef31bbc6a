"""Schema of the acommit.json config file."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator


class ProviderBlock(BaseModel):
    """Settings shared by every provider block."""

    model_config = ConfigDict(extra="forbid", protected_namespaces=())

    model: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip() or None
        return value


class GeminiBlock(ProviderBlock):
    api_key: str | None = None


class OllamaBlock(ProviderBlock):
    url: str | None = None


class OpenAIBlock(ProviderBlock):
    url: str | None = None
    api_key: str | None = None


class AcommitConfig(BaseModel):
    """The whole config file. Every key is optional; unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")

    default_provider: Literal["gemini", "ollama", "openai"] | None = None
    verbose: StrictBool | None = None
    gemini: GeminiBlock = Field(default_factory=GeminiBlock)
    ollama: OllamaBlock = Field(default_factory=OllamaBlock)
    openai: OpenAIBlock = Field(default_factory=OpenAIBlock)

    @field_validator("default_provider", mode="before")
    @classmethod
    def _lowercase_provider(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower() or None
        return value
