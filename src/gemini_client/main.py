from __future__ import annotations

from pathlib import Path

from rich.console import Console

from gemini_client.ai.model import GenerativeModel
from gemini_client.config.loader import load_settings
from gemini_client.logging_setup import configure_logging

console = Console()
err_console = Console(stderr=True)


async def _create_model(model: str | None, verbose: bool) -> GenerativeModel:
    """Create a model from layered settings, with CLI overrides applied."""
    settings = await load_settings(project_dir=Path.cwd(), user_dir=Path.home())
    configure_logging(verbose or settings.verbose)

    kwargs = settings.to_model_kwargs()
    if model:
        kwargs["name"] = model
    return GenerativeModel(**kwargs)


async def run_generate(
    prompt: str,
    model: str | None = None,
    stream: bool = False,
    verbose: bool = False,
) -> None:
    """Generate a response for *prompt* and print its text."""
    generative_model = await _create_model(model, verbose)

    if not stream:
        response = await generative_model.generate_content(prompt)
        console.print(response.text or "", markup=False, highlight=False)
        return

    async with generative_model.generate_content_stream(prompt) as chunks:
        async for chunk in chunks:
            console.print(chunk.text or "", end="", markup=False, highlight=False)
    console.print()


async def run_count_tokens(prompt: str, model: str | None = None) -> None:
    """Print the number of tokens in *prompt*."""
    generative_model = await _create_model(model, verbose=False)
    result = await generative_model.count_tokens(prompt)
    console.print(f"{result.total_tokens:,}")


def main() -> None:
    """CLI entry point."""
    from gemini_client.cli.args import cli
    cli()


if __name__ == "__main__":
    main()
