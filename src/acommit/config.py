"""Configuration sources: the JSON config file and environment variables."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .errors import AcommitError
from .models import AcommitConfig

CONFIG_FILENAME = "acommit.json"

CONFIG_ENV_VAR = "ACOMMIT_CONFIG"
GEMINI_KEY_ENV_VAR = "GEMINI_API_KEY"
OPENAI_KEY_ENV_VAR = "OPENAI_API_KEY"

GEMINI = "gemini"
OLLAMA = "ollama"
OPENAI = "openai"
PROVIDER_NAMES = (GEMINI, OLLAMA, OPENAI)

EXAMPLE_CONFIG: dict[str, Any] = {
    "default_provider": "ollama",
    "verbose": False,
    "gemini": {
        "model": "gemini-2.5-flash-lite",
        "api_key": "your-gemini-api-key",
    },
    "ollama": {
        "model": "llama3.2:3b",
        "url": "http://localhost:11434",
    },
    "openai": {
        "model": "gpt-3.5-turbo",
        "url": "https://api.openai.com/v1",
        "api_key": "sk-your-openai-key",
    },
}


class ConfigurationError(AcommitError):
    """Invalid or unreadable configuration."""

    pass


@dataclass
class ConfigFragment:
    """Partially filled configuration read from a single source.

    The CLI, the config file and the environment each produce one of these.
    Nothing here is validated as a whole; the resolver merges fragments into
    a single provider selection.
    """

    provider: str | None = None
    config_path: str | None = None

    gemini_api_key: str | None = None
    gemini_model: str | None = None

    ollama_url: str | None = None
    ollama_model: str | None = None

    openai_url: str | None = None
    openai_api_key: str | None = None
    openai_model: str | None = None

    verbose: bool | None = None

    def redacted(self) -> dict[str, Any]:
        """Return the populated fields with API keys masked, for debug output."""
        result: dict[str, Any] = {}
        for field in fields(self):
            value = getattr(self, field.name)
            if value is None:
                continue
            if field.name.endswith("api_key"):
                value = mask_secret(value)
            result[field.name] = value
        return result


def mask_secret(value: str) -> str:
    """Mask all but the last four characters of a secret."""
    if len(value) <= 4:
        return "****"
    return f"****{value[-4:]}"


def _env_value(environ: Mapping[str, str], name: str) -> str | None:
    value = environ.get(name, "").strip()
    return value or None


def read_environment(environ: Mapping[str, str] | None = None) -> ConfigFragment:
    """Read the configuration fragment held in environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Fragment with the API keys and config path found, empty values skipped
    """
    if environ is None:
        environ = os.environ

    return ConfigFragment(
        config_path=_env_value(environ, CONFIG_ENV_VAR),
        gemini_api_key=_env_value(environ, GEMINI_KEY_ENV_VAR),
        openai_api_key=_env_value(environ, OPENAI_KEY_ENV_VAR),
    )


def locate_config_file(
    cli_path: str | None,
    environ: Mapping[str, str] | None = None,
    cwd: str | Path | None = None,
) -> tuple[Path | None, bool]:
    """Find the config file to load.

    Looks at the --config flag, then ACOMMIT_CONFIG, then acommit.json in
    the working directory.

    Args:
        cli_path: Value of --config, if given
        environ: Environment mapping (defaults to os.environ)
        cwd: Directory searched for acommit.json (defaults to the current one)

    Returns:
        Tuple of (path or None, whether the path was named explicitly)
    """
    if cli_path:
        return Path(cli_path).expanduser(), True

    env_path = read_environment(environ).config_path
    if env_path:
        return Path(env_path).expanduser(), True

    base = Path(cwd) if cwd else Path.cwd()
    candidate = base / CONFIG_FILENAME
    if candidate.is_file():
        return candidate, False
    return None, False


def _describe_errors(error: ValidationError) -> str:
    """Flatten pydantic errors to one line per problem."""
    problems = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err["loc"])
        message = err["msg"]
        value = err.get("input")
        if isinstance(value, (str, int, float, bool)) and not loc.endswith("api_key"):
            message = f"{message} (got {value!r})"
        problems.append(f"{loc}: {message}" if loc else message)
    return "; ".join(problems)


def fragment_from_config(config: AcommitConfig) -> ConfigFragment:
    """Turn a validated config record into a fragment."""
    return ConfigFragment(
        provider=config.default_provider,
        gemini_api_key=config.gemini.api_key,
        gemini_model=config.gemini.model,
        ollama_url=config.ollama.url,
        ollama_model=config.ollama.model,
        openai_url=config.openai.url,
        openai_api_key=config.openai.api_key,
        openai_model=config.openai.model,
        verbose=config.verbose,
    )


def parse_config_data(data: Any, source: str = "config") -> ConfigFragment:
    """Validate a decoded config record and turn it into a fragment.

    Args:
        data: Decoded JSON document
        source: Name used in error messages

    Returns:
        Fragment holding the file's values

    Raises:
        ConfigurationError: If the record has the wrong shape
    """
    try:
        config = AcommitConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config {source}: {_describe_errors(e)}") from e
    return fragment_from_config(config)


def load_config_file(path: str | Path) -> ConfigFragment:
    """Read and validate a JSON config file.

    Args:
        path: Path to the file

    Returns:
        Fragment holding the file's values

    Raises:
        ConfigurationError: If the file cannot be read or is malformed
    """
    path = Path(path)
    try:
        # utf-8-sig also strips a leading BOM
        text = path.read_text(encoding="utf-8-sig")
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e.strerror or e}") from e

    try:
        config = AcommitConfig.model_validate_json(text)
    except ValidationError as e:
        if any(err["type"] == "json_invalid" for err in e.errors()):
            raise ConfigurationError(
                f"Invalid JSON in config file {path}: {e.errors()[0]['msg']}"
            ) from e
        raise ConfigurationError(f"Invalid config file {path}: {_describe_errors(e)}") from e

    fragment = fragment_from_config(config)
    fragment.config_path = str(path)
    return fragment


def example_config_json() -> str:
    """Return the example config file as pretty-printed JSON."""
    return json.dumps(EXAMPLE_CONFIG, indent=2)
