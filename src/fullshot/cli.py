"""CLI entry point for fullshot."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape

from fullshot.config import FullshotConfig, get_config
from fullshot.driver import ChromeSession
from fullshot.errors import FullshotError
from fullshot.logging import configure_logging
from fullshot.output import FileOutput, WebpOutput
from fullshot.transport import HttpSessionTransport

app = typer.Typer(
    name="fullshot",
    help="Full-page Chrome screenshots over an existing WebDriver session.",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()
_stderr_console = Console(stderr=True)

# Exit code when the transport failed and no image was captured
EXIT_NO_IMAGE = 2


def _version_callback(value: bool) -> None:
    if value:
        import fullshot

        console.print(f"fullshot [bold]{fullshot.__version__}[/bold]")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Full-page Chrome screenshots over an existing WebDriver session.

    Commands:
        capture - Capture the whole scrollable page of a session
        send    - Relay one debugging-protocol command
    """


def _load(config_path: Path | None, driver_url: str | None) -> FullshotConfig:
    try:
        config = get_config(config_path, reload=config_path is not None)
    except FullshotError as e:
        _stderr_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    if driver_url:
        config = config.model_copy(update={"driver_url": driver_url})
    configure_logging(config.log_level)
    return config


@app.command()
def capture(
    session_id: str = typer.Argument(..., help="WebDriver session id"),
    driver_url: str | None = typer.Option(None, "--driver-url", "-u", help="chromedriver base URL"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file path"),
    image_format: str = typer.Option("png", "--format", "-f", help="png or webp"),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Capture the whole scrollable page of a session."""
    if image_format not in ("png", "webp"):
        _stderr_console.print(f"[red]Error:[/red] unsupported format '{image_format}'")
        raise typer.Exit(1)

    config = _load(config_path, driver_url)
    with HttpSessionTransport(config.driver_url, timeout=config.timeout) as transport:
        session = ChromeSession(transport, session_id, config)
        try:
            if image_format == "webp":
                data = session.get_screenshot_as(WebpOutput(config.webp_quality))
                path = None
                if data is not None:
                    path = output or config.get_screenshot_path() / f"{session_id}.webp"
                    path.parent.mkdir(parents=True, exist_ok=True)
                    path.write_bytes(data)
            elif output is not None:
                path = session.get_screenshot_as(FileOutput(output))
            else:
                path = session.get_screenshot_as(FileOutput(directory=config.get_screenshot_path()))
        except FullshotError as e:
            _stderr_console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1) from e

    if path is None:
        _stderr_console.print("[yellow]No screenshot captured[/yellow] (transport failure)")
        raise typer.Exit(EXIT_NO_IMAGE)
    console.print(f"Saved [green]{path}[/green]")


@app.command()
def send(
    session_id: str = typer.Argument(..., help="WebDriver session id"),
    cmd: str = typer.Argument(..., help="Debugging-protocol command, e.g. Page.getLayoutMetrics"),
    params: str = typer.Option("{}", "--params", "-p", help="Command parameters as JSON"),
    driver_url: str | None = typer.Option(None, "--driver-url", "-u", help="chromedriver base URL"),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Relay one debugging-protocol command and print its value as JSON."""
    try:
        parsed: Any = json.loads(params)
    except json.JSONDecodeError as e:
        _stderr_console.print(f"[red]Error:[/red] invalid --params JSON: {escape(str(e))}")
        raise typer.Exit(1) from e
    if not isinstance(parsed, dict):
        _stderr_console.print("[red]Error:[/red] --params must be a JSON object")
        raise typer.Exit(1)

    config = _load(config_path, driver_url)
    with HttpSessionTransport(config.driver_url, timeout=config.timeout) as transport:
        session = ChromeSession(transport, session_id, config)
        try:
            value = session.send(cmd, parsed)
        except FullshotError as e:
            _stderr_console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1) from e

    console.print_json(json.dumps(value, ensure_ascii=False))


def cli() -> None:
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    cli()
