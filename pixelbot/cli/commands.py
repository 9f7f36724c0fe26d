"""CLI commands for pixelbot."""

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from pixelbot import __logo__, __version__

app = typer.Typer(
    name="pixelbot",
    help=f"{__logo__} pixelbot - chat bots for PixelMug devices",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} pixelbot v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """pixelbot - chat bots for PixelMug devices."""
    pass


# ============================================================================
# Config Commands
# ============================================================================


config_app = typer.Typer(help="Manage pixelbot config")
app.add_typer(config_app, name="config")


@config_app.command("check")
def config_check(
    config: Path | None = typer.Option(None, "--config", help="Config path to validate"),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Fail when unknown keys are detected (possible typos)",
    ),
):
    """Validate config JSON structure and schema."""
    from pixelbot.config.loader import convert_keys, get_config_path, unknown_keys
    from pixelbot.config.schema import Config

    config_path = (config or get_config_path()).expanduser()
    if not config_path.exists():
        console.print(f"[red]Config file not found:[/red] {config_path}")
        raise typer.Exit(2)

    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        console.print(f"[red]Invalid JSON:[/red] {exc}")
        raise typer.Exit(2) from exc
    except Exception as exc:
        console.print(f"[red]Failed to read config:[/red] {exc}")
        raise typer.Exit(2) from exc

    try:
        cfg = Config.model_validate(convert_keys(raw))
    except Exception as exc:
        console.print(f"[red]Schema validation failed:[/red] {exc}")
        raise typer.Exit(1) from exc

    unknown_paths = unknown_keys(raw)
    if unknown_paths:
        console.print(
            f"[yellow]Unknown config keys detected ({len(unknown_paths)}):[/yellow]"
        )
        for item in unknown_paths[:10]:
            console.print(f"  - {item}")
        if len(unknown_paths) > 10:
            console.print(f"  - ... ({len(unknown_paths) - 10} more)")
        if strict:
            raise typer.Exit(1)

    console.print("[green]✓[/green] Config validation passed")
    console.print(f"path={config_path}")
    console.print(
        f"transport={cfg.transport.kind} "
        f"listen={cfg.transport.host}:{cfg.transport.port} "
        f"rpc_timeout={cfg.rpc.timeout_seconds:g}s"
    )
    console.print(
        f"content=max_bytes={cfg.content.max_bytes} "
        f"size={cfg.content.width}x{cfg.content.height}"
    )


# ============================================================================
# Bot Commands
# ============================================================================


@app.command("apps")
def list_apps():
    """List the bundled bots."""
    from pixelbot.apps import APP_DESCRIPTIONS, APPS

    table = Table(title="Bundled bots")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for name in APPS:
        table.add_row(name, APP_DESCRIPTIONS.get(name, ""))
    console.print(table)


@app.command()
def run(
    name: str = typer.Argument(..., help="Bundled bot to run (see `pixelbot apps`)"),
    transport: str | None = typer.Option(None, "--transport", "-t", help="websocket | mock"),
    host: str | None = typer.Option(None, "--host", help="Transport listen host"),
    port: int | None = typer.Option(None, "--port", "-p", help="Transport listen port"),
    config: Path | None = typer.Option(None, "--config", help="Config path"),
    logs: bool = typer.Option(False, "--logs/--no-logs", help="Show pixelbot runtime logs"),
):
    """Run one bundled bot until interrupted."""
    from loguru import logger

    from pixelbot.apps import APPS
    from pixelbot.bot.runtime import BotRuntime
    from pixelbot.config.loader import load_config
    from pixelbot.hardware.adapter import MockTransport, WebSocketTransport

    setup = APPS.get(name)
    if setup is None:
        console.print(f"[red]Unknown bot:[/red] {name}")
        console.print(f"Available: {', '.join(APPS)}")
        raise typer.Exit(2)

    if logs:
        logger.enable("pixelbot")
    else:
        logger.disable("pixelbot")

    cfg = load_config(config.expanduser() if config else None)
    kind = (transport or cfg.transport.kind).strip().lower()
    if kind == "mock":
        chat_transport = MockTransport()
    elif kind == "websocket":
        chat_transport = WebSocketTransport(
            host=host or cfg.transport.host,
            port=port or cfg.transport.port,
            require_token=cfg.transport.require_token,
            token=cfg.transport.token,
        )
    else:
        console.print(f"[red]Unknown transport:[/red] {kind}")
        raise typer.Exit(2)

    runtime = BotRuntime(transport=chat_transport, rpc_timeout_s=cfg.rpc.timeout_seconds)
    setup(runtime, cfg)
    console.print(f"{__logo__} Starting [cyan]{name}[/cyan] on {kind} transport")

    async def serve():
        try:
            await runtime.start()
            while runtime.running:
                await asyncio.sleep(1)
        finally:
            await runtime.stop()

    try:
        asyncio.run(serve())
    except KeyboardInterrupt:
        console.print("\nShutting down...")


@app.command()
def validate(
    source: str = typer.Argument(..., help="Local GIF path or http(s) URL"),
    config: Path | None = typer.Option(None, "--config", help="Config path"),
):
    """Check a GIF against the device content limits."""
    from pixelbot.config.loader import load_config
    from pixelbot.content import ContentFetcher, ContentValidator
    from pixelbot.errors import PixelBotError

    cfg = load_config(config.expanduser() if config else None)
    validator = ContentValidator.from_config(cfg)

    try:
        if source.startswith(("http://", "https://")):
            fetcher = ContentFetcher(timeout_seconds=cfg.content.fetch_timeout_seconds)
            data = asyncio.run(fetcher.fetch(source))
        else:
            path = Path(source).expanduser()
            if not path.exists():
                console.print(f"[red]File not found:[/red] {path}")
                raise typer.Exit(2)
            data = path.read_bytes()
        content = validator(data)
    except PixelBotError as exc:
        console.print(f"[red]✗[/red] {exc.describe()}")
        raise typer.Exit(1) from exc

    console.print(
        f"[green]✓[/green] Valid: {content.size} bytes, "
        f"{content.width}x{content.height}, {content.signature.decode('ascii')}"
    )


if __name__ == "__main__":
    app()
