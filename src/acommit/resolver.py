"""Merge CLI flags, config file, environment and defaults into one provider."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from .config import (
    GEMINI,
    OLLAMA,
    OPENAI,
    PROVIDER_NAMES,
    ConfigFragment,
    ConfigurationError,
    load_config_file,
    locate_config_file,
    read_environment,
)
from .selection import (
    GeminiSelection,
    OllamaSelection,
    OpenAICompatibleSelection,
    ProviderSelection,
)

log = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-lite"
DEFAULT_OLLAMA_MODEL = "llama3.2:3b"
DEFAULT_OPENAI_MODEL = "gpt-3.5-turbo"

DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_OPENAI_URL = "https://api.openai.com/v1"

# Path suffixes the adapters append themselves
OLLAMA_URL_SUFFIX = "/api/generate"
OPENAI_URL_SUFFIX = "/chat/completions"

T = TypeVar("T")


@dataclass(frozen=True)
class ResolvedConfig:
    """Outcome of resolution for one invocation."""

    selection: ProviderSelection
    verbose: bool = False
    config_path: str | None = None
    # Source fragments, kept for debug output: "cli", "file", "env"
    sources: dict[str, ConfigFragment] = field(default_factory=dict)


def first_present(*candidates: T | None) -> T | None:
    """Return the first candidate that is neither None nor an empty string."""
    for candidate in candidates:
        if candidate is None or candidate == "":
            continue
        return candidate
    return None


def normalize_base_url(url: str, suffix: str) -> str:
    """Strip trailing slashes and the endpoint path an adapter appends."""
    url = url.strip().rstrip("/")
    if url.endswith(suffix):
        url = url[: -len(suffix)].rstrip("/")
    return url


def check_provider_name(name: str, source: str) -> str:
    """Validate a provider name.

    Raises:
        ConfigurationError: If the name is not a supported provider
    """
    normalized = name.strip().lower()
    if normalized not in PROVIDER_NAMES:
        raise ConfigurationError(
            f"Unknown provider {name!r} from {source}. "
            f"Supported providers: {', '.join(PROVIDER_NAMES)}"
        )
    return normalized


def flag_provider(cli: ConfigFragment) -> str | None:
    """Provider implied by provider-identifying CLI flags.

    --openai outranks --ollama-url, which outranks --gemini-key.
    """
    present = [
        (OPENAI, "--openai", cli.openai_url),
        (OLLAMA, "--ollama-url", cli.ollama_url),
        (GEMINI, "--gemini-key", cli.gemini_api_key),
    ]
    given = [(name, flag) for name, flag, value in present if value]
    if not given:
        return None

    chosen, chosen_flag = given[0]
    if len(given) > 1:
        ignored = ", ".join(flag for _, flag in given[1:])
        log.warning("Several provider flags given; using %s and ignoring %s", chosen_flag, ignored)
    return chosen


def select_provider(
    cli: ConfigFragment,
    file: ConfigFragment,
    env: ConfigFragment,
) -> str:
    """Decide which backend to use.

    Order: provider-identifying flags, --provider, the config file's
    default_provider, GEMINI_API_KEY, then Ollama.
    """
    cli_choice = check_provider_name(cli.provider, "--provider") if cli.provider else None
    file_choice = check_provider_name(file.provider, "config file") if file.provider else None

    chosen = first_present(
        flag_provider(cli),
        cli_choice,
        file_choice,
        GEMINI if env.gemini_api_key else None,
    )
    return chosen or OLLAMA


def build_selection(
    provider: str,
    cli: ConfigFragment,
    file: ConfigFragment,
    env: ConfigFragment,
) -> ProviderSelection:
    """Fill every field of the chosen provider, CLI > file > env > default."""
    if provider == GEMINI:
        api_key = first_present(cli.gemini_api_key, file.gemini_api_key, env.gemini_api_key)
        if not api_key:
            raise ConfigurationError(
                "Gemini requires an API key. Pass --gemini-key, set GEMINI_API_KEY, "
                "or add gemini.api_key to the config file."
            )
        return GeminiSelection(
            api_key=api_key,
            model=first_present(cli.gemini_model, file.gemini_model, DEFAULT_GEMINI_MODEL),
        )

    if provider == OLLAMA:
        url = first_present(cli.ollama_url, file.ollama_url, DEFAULT_OLLAMA_URL)
        return OllamaSelection(
            base_url=normalize_base_url(url, OLLAMA_URL_SUFFIX),
            model=first_present(cli.ollama_model, file.ollama_model, DEFAULT_OLLAMA_MODEL),
        )

    if provider == OPENAI:
        url = first_present(cli.openai_url, file.openai_url, DEFAULT_OPENAI_URL)
        return OpenAICompatibleSelection(
            base_url=normalize_base_url(url, OPENAI_URL_SUFFIX),
            model=first_present(cli.openai_model, file.openai_model, DEFAULT_OPENAI_MODEL),
            api_key=first_present(cli.openai_api_key, file.openai_api_key, env.openai_api_key),
        )

    raise ConfigurationError(f"Unknown provider: {provider}")


def resolve(
    cli: ConfigFragment,
    environ: Mapping[str, str] | None = None,
    cwd: str | Path | None = None,
) -> ResolvedConfig:
    """Resolve the provider to use for this run.

    Args:
        cli: Fragment built from command-line flags
        environ: Environment mapping (defaults to os.environ)
        cwd: Directory searched for acommit.json (defaults to the current one)

    Returns:
        The resolved selection and verbosity

    Raises:
        ConfigurationError: If the config file is unreadable or malformed,
            a provider name is unknown, or a required key is missing
    """
    env = read_environment(environ)

    path, explicit = locate_config_file(cli.config_path, environ, cwd)
    if path is None:
        file = ConfigFragment()
    else:
        if explicit and not path.is_file():
            raise ConfigurationError(f"Config file not found: {path}")
        file = load_config_file(path)

    provider = select_provider(cli, file, env)
    selection = build_selection(provider, cli, file, env)

    return ResolvedConfig(
        selection=selection,
        verbose=bool(cli.verbose or file.verbose),
        config_path=file.config_path,
        sources={"cli": cli, "file": file, "env": env},
    )


def log_resolution(resolved: ResolvedConfig) -> None:
    """Log where the resolved values came from, API keys masked.

    Called once logging is configured, since verbosity itself may come
    from the config file.
    """
    if resolved.config_path:
        log.debug("Loaded config file %s", resolved.config_path)
    for name, label in (("cli", "CLI"), ("file", "Config file"), ("env", "Environment")):
        fragment = resolved.sources.get(name)
        if fragment is not None:
            log.debug("%s values: %s", label, fragment.redacted())
    log.debug("Resolved provider: %s", resolved.selection.describe())
