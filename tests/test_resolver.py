import json
import logging

import pytest

from acommit.config import ConfigFragment, ConfigurationError
from acommit.resolver import (
    DEFAULT_GEMINI_MODEL,
    DEFAULT_OLLAMA_MODEL,
    DEFAULT_OLLAMA_URL,
    DEFAULT_OPENAI_MODEL,
    DEFAULT_OPENAI_URL,
    first_present,
    log_resolution,
    normalize_base_url,
    resolve,
)
from acommit.selection import GeminiSelection, OllamaSelection, OpenAICompatibleSelection


@pytest.fixture
def workdir(tmp_path):
    """An empty directory with no acommit.json."""
    return tmp_path


def cli(model=None, **kwargs):
    """Build a CLI fragment the way the command does, --model filling every provider."""
    return ConfigFragment(gemini_model=model, ollama_model=model, openai_model=model, **kwargs)


def write_config(directory, data, name="acommit.json"):
    path = directory / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


FULL_CONFIG = {
    "default_provider": "openai",
    "gemini": {"model": "file-gemini", "api_key": "file-gemini-key"},
    "ollama": {"model": "file-ollama", "url": "http://file-ollama:11434"},
    "openai": {"model": "file-gpt", "url": "http://file-openai/v1", "api_key": "file-openai-key"},
}


def test_hard_default_is_local_ollama(workdir):
    resolved = resolve(cli(), environ={}, cwd=workdir)
    assert resolved.selection == OllamaSelection(
        base_url=DEFAULT_OLLAMA_URL, model=DEFAULT_OLLAMA_MODEL
    )
    assert resolved.verbose is False
    assert resolved.config_path is None


def test_gemini_key_in_environment_selects_gemini(workdir):
    resolved = resolve(cli(), environ={"GEMINI_API_KEY": "abc"}, cwd=workdir)
    assert resolved.selection == GeminiSelection(api_key="abc", model=DEFAULT_GEMINI_MODEL)


def test_openai_flag_without_key_sends_no_auth(workdir):
    resolved = resolve(
        cli(model="custom", openai_url="http://localhost:8080/v1"), environ={}, cwd=workdir
    )
    assert resolved.selection == OpenAICompatibleSelection(
        base_url="http://localhost:8080/v1", model="custom", api_key=None
    )


def test_openai_flag_defaults_to_chat_model(workdir):
    resolved = resolve(cli(openai_url="http://localhost:8080/v1"), environ={}, cwd=workdir)
    assert resolved.selection.model == DEFAULT_OPENAI_MODEL
    assert DEFAULT_OPENAI_MODEL not in (DEFAULT_GEMINI_MODEL, DEFAULT_OLLAMA_MODEL)


def test_openai_key_comes_from_environment_when_flag_missing(workdir):
    resolved = resolve(
        cli(openai_url="http://x/v1"), environ={"OPENAI_API_KEY": "sk-env"}, cwd=workdir
    )
    assert resolved.selection.api_key == "sk-env"


def test_openai_key_flag_beats_environment(workdir):
    resolved = resolve(
        cli(openai_url="http://x/v1", openai_api_key="sk-cli"),
        environ={"OPENAI_API_KEY": "sk-env"},
        cwd=workdir,
    )
    assert resolved.selection.api_key == "sk-cli"


def test_provider_flags_rank_openai_then_ollama_then_gemini(workdir, caplog):
    with caplog.at_level(logging.WARNING, logger="acommit.resolver"):
        resolved = resolve(
            cli(
                openai_url="http://openai/v1",
                ollama_url="http://ollama:11434",
                gemini_api_key="g",
            ),
            environ={},
            cwd=workdir,
        )
    assert isinstance(resolved.selection, OpenAICompatibleSelection)
    assert "ignoring --ollama-url, --gemini-key" in caplog.text

    resolved = resolve(
        cli(ollama_url="http://ollama:11434", gemini_api_key="g"), environ={}, cwd=workdir
    )
    assert resolved.selection == OllamaSelection(
        base_url="http://ollama:11434", model=DEFAULT_OLLAMA_MODEL
    )


def test_gemini_flag_beats_environment_key(workdir):
    resolved = resolve(
        cli(gemini_api_key="cli-key", model="gemini-2.5-flash"),
        environ={"GEMINI_API_KEY": "env-key"},
        cwd=workdir,
    )
    assert resolved.selection == GeminiSelection(api_key="cli-key", model="gemini-2.5-flash")


def test_model_flag_applies_to_default_provider(workdir):
    resolved = resolve(cli(model="llama3.2:3b-instruct"), environ={}, cwd=workdir)
    assert resolved.selection.model == "llama3.2:3b-instruct"


def test_config_file_default_provider_is_used(workdir):
    write_config(workdir, FULL_CONFIG)
    resolved = resolve(cli(), environ={}, cwd=workdir)
    assert resolved.selection == OpenAICompatibleSelection(
        base_url="http://file-openai/v1", model="file-gpt", api_key="file-openai-key"
    )
    assert resolved.config_path == str(workdir / "acommit.json")


def test_provider_flag_selects_another_block(workdir):
    write_config(workdir, FULL_CONFIG)
    resolved = resolve(cli(provider="ollama"), environ={}, cwd=workdir)
    assert resolved.selection == OllamaSelection(
        base_url="http://file-ollama:11434", model="file-ollama"
    )


def test_all_layers_populated_follow_precedence(workdir):
    write_config(workdir, FULL_CONFIG)
    environ = {"GEMINI_API_KEY": "env-gemini", "OPENAI_API_KEY": "env-openai"}

    # CLI signal beats the file's default_provider and the env key
    resolved = resolve(cli(gemini_api_key="cli-gemini"), environ=environ, cwd=workdir)
    assert resolved.selection == GeminiSelection(api_key="cli-gemini", model="file-gemini")

    # File beats environment, per field
    resolved = resolve(cli(provider="gemini"), environ=environ, cwd=workdir)
    assert resolved.selection == GeminiSelection(api_key="file-gemini-key", model="file-gemini")

    # CLI beats file, per field
    resolved = resolve(
        cli(model="cli-model", openai_api_key="cli-openai"), environ=environ, cwd=workdir
    )
    assert resolved.selection == OpenAICompatibleSelection(
        base_url="http://file-openai/v1", model="cli-model", api_key="cli-openai"
    )


def test_environment_fills_fields_the_file_lacks(workdir):
    write_config(workdir, {"default_provider": "gemini", "gemini": {"model": "gemini-pro"}})
    resolved = resolve(cli(), environ={"GEMINI_API_KEY": "env-key"}, cwd=workdir)
    assert resolved.selection == GeminiSelection(api_key="env-key", model="gemini-pro")


def test_file_without_default_provider_falls_through(workdir):
    write_config(workdir, {"ollama": {"model": "mistral"}})
    resolved = resolve(cli(), environ={}, cwd=workdir)
    assert resolved.selection == OllamaSelection(base_url=DEFAULT_OLLAMA_URL, model="mistral")


def test_gemini_without_any_key_fails(workdir):
    with pytest.raises(ConfigurationError, match="Gemini requires an API key"):
        resolve(cli(provider="gemini"), environ={}, cwd=workdir)


def test_provider_flag_without_config_file(workdir):
    resolved = resolve(cli(provider="openai"), environ={}, cwd=workdir)
    assert resolved.selection == OpenAICompatibleSelection(
        base_url=DEFAULT_OPENAI_URL, model=DEFAULT_OPENAI_MODEL
    )


def test_unknown_provider_flag_fails(workdir):
    write_config(workdir, FULL_CONFIG)
    with pytest.raises(ConfigurationError, match="Unknown provider 'anthropic'"):
        resolve(cli(provider="anthropic"), environ={}, cwd=workdir)


def test_unsupported_provider_in_file_fails(workdir):
    write_config(workdir, {"default_provider": "mistral"})
    with pytest.raises(ConfigurationError, match="mistral"):
        resolve(cli(), environ={"GEMINI_API_KEY": "abc"}, cwd=workdir)


def test_explicit_missing_config_fails(workdir):
    with pytest.raises(ConfigurationError, match="Config file not found"):
        resolve(cli(config_path=str(workdir / "nope.json")), environ={}, cwd=workdir)


def test_config_path_from_environment(workdir):
    path = write_config(workdir, {"default_provider": "ollama", "verbose": True}, name="custom.json")
    resolved = resolve(cli(), environ={"ACOMMIT_CONFIG": str(path)}, cwd=workdir / "..")
    assert isinstance(resolved.selection, OllamaSelection)
    assert resolved.verbose is True


def test_malformed_discovered_config_fails(workdir):
    (workdir / "acommit.json").write_text("{", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="Invalid JSON"):
        resolve(cli(), environ={}, cwd=workdir)


def test_verbose_from_cli(workdir):
    assert resolve(cli(verbose=True), environ={}, cwd=workdir).verbose is True


def test_base_urls_are_normalized(workdir):
    resolved = resolve(cli(ollama_url="http://host:11434/api/generate/"), environ={}, cwd=workdir)
    assert resolved.selection.base_url == "http://host:11434"

    resolved = resolve(
        cli(openai_url="http://host/v1/chat/completions"), environ={}, cwd=workdir
    )
    assert resolved.selection.base_url == "http://host/v1"


def test_normalize_base_url_keeps_plain_urls():
    assert normalize_base_url("http://localhost:11434", "/api/generate") == "http://localhost:11434"
    assert normalize_base_url("http://h/v1/", "/chat/completions") == "http://h/v1"


def test_first_present_skips_none_and_empty():
    assert first_present(None, "", "a", "b") == "a"
    assert first_present(None, None) is None


def test_log_resolution_masks_keys(workdir, caplog):
    write_config(workdir, {"default_provider": "gemini", "gemini": {"api_key": "secret-file-key"}})
    resolved = resolve(cli(), environ={"OPENAI_API_KEY": "sk-environment"}, cwd=workdir)

    with caplog.at_level(logging.DEBUG, logger="acommit.resolver"):
        log_resolution(resolved)

    assert "Loaded config file" in caplog.text
    assert "Resolved provider: Gemini model: gemini-2.5-flash-lite" in caplog.text
    assert "****-key" in caplog.text
    assert "secret-file-key" not in caplog.text
    assert "sk-environment" not in caplog.text


def test_resolve_itself_logs_nothing_at_debug(workdir, caplog):
    with caplog.at_level(logging.DEBUG, logger="acommit.resolver"):
        resolve(cli(), environ={}, cwd=workdir)
    assert caplog.text == ""
