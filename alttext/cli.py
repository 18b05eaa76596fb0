"""Typer CLI: analyze or generate from the terminal, inspect providers, run the API server."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from alttext.ai.facade import AltTextService, GenerationUnavailableError
from alttext.ai.gateway import GatewayError
from alttext.ai.providers import VISION_CAPABILITIES
from alttext.ai.schema import Capability
from alttext.core.config import get_config
from alttext.core.errors import AltTextError
from alttext.core.html import generate_html_snippet
from alttext.core.logging import setup_logging
from alttext.core.uploads import validate_image_upload, validate_prompt

app = typer.Typer(no_args_is_help=True)


@app.callback()
def main(
    config: Path | None = typer.Option(None, "--config", help="Path to alttext_config.yml"),
    log_level: str | None = typer.Option(None, "--log-level", help="Override the configured log level"),
) -> None:
    """Alt text, captions, and text-to-image from hosted inference models."""
    if config is not None:
        get_config(config_path=config, apply_env_override=True)
    setup_logging(log_level)


def _service() -> AltTextService:
    return AltTextService(get_config())


@app.command("analyze")
def analyze(
    path: Path = typer.Argument(..., help="Image file to describe"),
    html: bool = typer.Option(False, "--html", help="Also print a <figure> snippet"),
) -> None:
    """Generate alt text and a caption for an image."""
    cfg = get_config()
    try:
        content = path.read_bytes()
        validate_image_upload(path.name, content, cfg)
    except (OSError, AltTextError) as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)
    if not cfg.has_credential:
        typer.secho(
            "No API token configured; showing the placeholder result.", fg=typer.colors.YELLOW
        )
    result = _service().analyze(content)

    table = Table(title=None, show_header=False)
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Alt text", result.alt_text)
    table.add_row("Caption", result.caption)
    for key, value in (result.model_extra or {}).items():
        table.add_row(key, str(value))
    console = Console()
    console.print(table)
    if html:
        typer.echo(generate_html_snippet(path.name, result.alt_text, result.caption))


@app.command("generate")
def generate(
    prompt: str = typer.Argument(..., help="Text prompt describing the image"),
    output: Path = typer.Option(Path("generated_image.png"), "--output", "-o", help="Where to write the PNG"),
) -> None:
    """Generate an image from a text prompt."""
    try:
        image = _service().generate(validate_prompt(prompt))
    except (GenerationUnavailableError, GatewayError) as e:
        typer.secho(f"Failed to generate image: {e}", fg=typer.colors.RED)
        raise typer.Exit(1)
    except AltTextError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)
    output.write_bytes(image)
    typer.secho(f"Wrote {len(image)} bytes to {output}", fg=typer.colors.GREEN)


@app.command("providers")
def providers() -> None:
    """List configured providers per capability, in the order they are tried."""
    cfg = get_config()
    table = Table(title=None)
    table.add_column("Capability")
    table.add_column("Order")
    table.add_column("Provider")
    for capability in (*VISION_CAPABILITIES, Capability.text_to_image):
        for i, provider_id in enumerate(cfg.provider_lists.for_capability(capability.value), start=1):
            table.add_row(capability.value, str(i), provider_id)
    console = Console()
    console.print(table)
    policy = "on" if cfg.enrich_only_after_caption else "off"
    typer.echo(f"Enrich only after caption: {policy}")


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int | None = typer.Option(None, "--port", help="Port (default from config / PORT)"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    cfg = get_config()
    uvicorn.run(
        "alttext.api.main:app",
        host=host or cfg.host,
        port=port or cfg.port,
        log_config=None,
    )


if __name__ == "__main__":
    app()
