from __future__ import annotations

import asyncio
import sys

import click
from rich.markup import escape

from gemini_client import __version__
from gemini_client.ai.errors import CountTokensError, GenerateContentError


@click.group()
@click.version_option(version=__version__, prog_name="gemini-client")
def cli() -> None:
    """Send prompts to a Gemini model."""


@cli.command()
@click.argument("prompt")
@click.option("--model", "-m", help="Model name, e.g. gemini-1.5-pro.")
@click.option("--stream", "-s", is_flag=True, help="Print the response as it arrives.")
@click.option("--verbose", "-v", is_flag=True, help="Verbose logging.")
def generate(
    prompt: str,
    model: str | None = None,
    stream: bool = False,
    verbose: bool = False,
) -> None:
    """Generate content for PROMPT."""
    from gemini_client.main import err_console, run_generate

    try:
        asyncio.run(run_generate(prompt, model=model, stream=stream, verbose=verbose))
    except (GenerateContentError, ValueError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)


@cli.command("count-tokens")
@click.argument("prompt")
@click.option("--model", "-m", help="Model name, e.g. gemini-1.5-pro.")
def count_tokens(prompt: str, model: str | None = None) -> None:
    """Count the tokens in PROMPT."""
    from gemini_client.main import err_console, run_count_tokens

    try:
        asyncio.run(run_count_tokens(prompt, model=model))
    except (CountTokensError, ValueError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)
