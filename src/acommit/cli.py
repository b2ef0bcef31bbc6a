"""CLI interface for acommit."""

from __future__ import annotations

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Confirm

from . import __version__
from .config import ConfigFragment, example_config_json
from .git import GitRepo
from .prompts import build_prompt
from .providers import generate_commit_message
from .resolver import log_resolution, resolve
from .selection import GeminiSelection, OllamaSelection, ProviderSelection

console = Console()
err_console = Console(stderr=True)

log = logging.getLogger(__name__)

MAX_STATUS_LINES = 10

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


class AcommitCommand(click.Command):
    """Command that reports unknown flags as "Unknown argument"."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.NoSuchOption as e:
            raise click.UsageError(f"Unknown argument: {e.option_name}", ctx=ctx) from e


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def provider_banner(selection: ProviderSelection) -> str:
    """One-line description of the backend in use."""
    if isinstance(selection, GeminiSelection):
        icon = "🧠"
    elif isinstance(selection, OllamaSelection):
        icon = "🦙"
    else:
        icon = "🤖"
    return f"{icon} Using {selection.describe()}"


def confirm_commit() -> bool:
    """Ask whether to use the generated message."""
    try:
        return Confirm.ask("🤔 Use this commit message?", default=False, console=console)
    except (KeyboardInterrupt, EOFError):
        return False


def commit_with_ai(selection: ProviderSelection, repo: GitRepo | None = None) -> None:
    """Generate a message for the pending changes and commit after confirmation.

    Args:
        selection: The resolved provider selection
        repo: Repository to work on (defaults to the current directory)

    Raises:
        GitError: If a git command fails
        BackendError: If the model backend request fails
    """
    repo = repo or GitRepo()

    console.print(provider_banner(selection))
    console.print("🔍 Checking git status...")
    repo.check_repository()

    changes = repo.get_status_lines()
    if not changes:
        console.print("[green]✅ No changes to commit[/]")
        return

    console.print("📝 Found changes:")
    for line in changes[:MAX_STATUS_LINES]:
        console.print(f"  {line}", markup=False, highlight=False)

    prompt = build_prompt(repo.get_name_status_diff())

    with console.status("🤖 Generating commit message with AI..."):
        message = generate_commit_message(selection, prompt)

    console.print("📋 Generated commit message: ", end="")
    console.print(message, markup=False, highlight=False)

    if not confirm_commit():
        console.print("[yellow]❌ Commit cancelled[/]")
        return

    console.print("➕ Adding all changes...")
    repo.stage_all()

    console.print("💾 Creating commit...")
    repo.commit(message)

    console.print("[green]✅ Successfully committed with message:[/] ", end="")
    console.print(message, markup=False, highlight=False)


@click.command(cls=AcommitCommand, context_settings=CONTEXT_SETTINGS)
@click.option(
    "-gk",
    "--gemini-key",
    metavar="KEY",
    help="Use Gemini API with provided key",
)
@click.option(
    "-ou",
    "--ollama-url",
    metavar="URL",
    help="Use Ollama at specified URL",
)
@click.option(
    "--openai",
    "openai_url",
    metavar="URL",
    help="Use OpenAI-compatible API at specified URL",
)
@click.option(
    "-ok",
    "--openai-key",
    metavar="KEY",
    help="API key for OpenAI-compatible API (optional, defaults to OPENAI_API_KEY)",
)
@click.option(
    "-m",
    "--model",
    help="Model name to use (default varies by provider)",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show debug information",
)
@click.option(
    "--config",
    "config_path",
    metavar="PATH",
    help="Config file (defaults to ACOMMIT_CONFIG or ./acommit.json)",
)
@click.option(
    "--provider",
    metavar="NAME",
    help='Provider to use: "gemini", "ollama" or "openai"',
)
@click.option(
    "--setup",
    is_flag=True,
    help="Interactively create a config file",
)
@click.option(
    "--example-config",
    is_flag=True,
    help="Print an example config file and exit",
)
@click.argument("stray", nargs=-1)
@click.version_option(__version__)
def main(
    gemini_key: str | None,
    ollama_url: str | None,
    openai_url: str | None,
    openai_key: str | None,
    model: str | None,
    verbose: bool,
    config_path: str | None,
    provider: str | None,
    setup: bool,
    example_config: bool,
    stray: tuple[str, ...],
) -> None:
    """Generate a git commit message with AI and commit all changes.

    \b
    Examples:
      # Use GEMINI_API_KEY env var or default Ollama
      acommit

      # Use local Ollama
      acommit --ollama-url http://localhost:11434

      # Use an OpenAI-compatible API
      acommit --openai http://localhost:8080/v1 --model bitnet-model

      # Use OpenAI with an API key
      acommit --openai https://api.openai.com/v1 --openai-key sk-xxx --model gpt-4

      # Use Gemini with a specific key and model
      acommit --gemini-key xyz --model gemini-2.5-flash

      # Remote Ollama with CodeLlama
      acommit -ou http://server:11434 -m codellama:7b

      # Pick a provider block from the config file
      acommit --config ~/acommit.json --provider openai

    \b
    Environment variables:
      GEMINI_API_KEY   Used as fallback if no provider specified
      OPENAI_API_KEY   Used for OpenAI-compatible APIs when --openai-key not provided
      ACOMMIT_CONFIG   Config file path when --config is not given
    """
    setup_logging(verbose)
    show_traceback = verbose

    try:
        if example_config:
            click.echo(example_config_json())
            return

        if setup:
            from .wizard import run_setup

            run_setup(console, config_path)
            return

        cli_values = ConfigFragment(
            provider=provider,
            config_path=config_path,
            gemini_api_key=gemini_key,
            gemini_model=model,
            ollama_url=ollama_url,
            ollama_model=model,
            openai_url=openai_url,
            openai_api_key=openai_key,
            openai_model=model,
            verbose=verbose or None,
        )
        resolved = resolve(cli_values)

        if resolved.verbose and not verbose:
            setup_logging(True)
            show_traceback = True
        log_resolution(resolved)
        if stray:
            log.debug("Ignoring stray arguments: %s", " ".join(stray))

        commit_with_ai(resolved.selection)

    except Exception as e:
        if show_traceback:
            err_console.print_exception()
        else:
            err_console.print(f"❌ Error: {e}", style="red", markup=False, highlight=False)
        sys.exit(1)


if __name__ == "__main__":
    main()
