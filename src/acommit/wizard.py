"""Interactive first-run setup that writes an acommit.json file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.prompt import Confirm, Prompt

from .config import CONFIG_FILENAME, GEMINI, OLLAMA, PROVIDER_NAMES, ConfigurationError
from .resolver import (
    DEFAULT_GEMINI_MODEL,
    DEFAULT_OLLAMA_MODEL,
    DEFAULT_OLLAMA_URL,
    DEFAULT_OPENAI_MODEL,
    DEFAULT_OPENAI_URL,
)


def build_config(provider: str, answers: dict[str, str]) -> dict[str, Any]:
    """Assemble a config record from the wizard's answers.

    Empty answers are left out so that defaults and environment variables
    still apply.
    """
    block = {key: value for key, value in answers.items() if value}
    return {
        "default_provider": provider,
        "verbose": False,
        provider: block,
    }


def _ask_provider_block(provider: str, console: Console) -> dict[str, str]:
    if provider == GEMINI:
        return {
            "model": Prompt.ask("Gemini model", default=DEFAULT_GEMINI_MODEL, console=console),
            "api_key": Prompt.ask(
                "Gemini API key (leave empty to use GEMINI_API_KEY)",
                default="",
                show_default=False,
                password=True,
                console=console,
            ),
        }
    if provider == OLLAMA:
        return {
            "model": Prompt.ask("Ollama model", default=DEFAULT_OLLAMA_MODEL, console=console),
            "url": Prompt.ask("Ollama URL", default=DEFAULT_OLLAMA_URL, console=console),
        }
    return {
        "model": Prompt.ask("Model", default=DEFAULT_OPENAI_MODEL, console=console),
        "url": Prompt.ask("API base URL", default=DEFAULT_OPENAI_URL, console=console),
        "api_key": Prompt.ask(
            "API key (leave empty for none or OPENAI_API_KEY)",
            default="",
            show_default=False,
            password=True,
            console=console,
        ),
    }


def run_setup(console: Console, path: str | Path | None = None) -> Path | None:
    """Ask for provider settings and write them to a config file.

    Args:
        console: Console used for prompts and output
        path: Target file (defaults to acommit.json in the current directory)

    Returns:
        The written path, or None if the user chose not to overwrite

    Raises:
        ConfigurationError: If the file cannot be written
    """
    target = Path(path) if path else Path.cwd() / CONFIG_FILENAME

    console.print("\n[bold cyan]🛠  acommit setup[/]\n")

    if target.exists() and not Confirm.ask(
        f"{target} already exists. Overwrite?", default=False, console=console
    ):
        console.print("[yellow]Setup cancelled[/]")
        return None

    provider = Prompt.ask(
        "Default provider", choices=list(PROVIDER_NAMES), default=OLLAMA, console=console
    )
    config = build_config(provider, _ask_provider_block(provider, console))

    try:
        target.write_text(json.dumps(config, indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot write config file {target}: {e.strerror or e}") from e

    console.print(f"[green]✅ Wrote {target}[/]")
    if "api_key" in config[provider]:
        console.print("[yellow]⚠️  The file contains an API key; keep it out of version control.[/]")
    return target
