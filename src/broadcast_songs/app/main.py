"""CLI entry point for broadcast-songs.

Provides the `broadcast-songs` command for launching the Textual interface
and for checking notification routing and song colors from the shell.
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from broadcast_songs import __version__
from broadcast_songs.app.app import BroadcastSongsApp
from broadcast_songs.app.config import AppConfig, ensure_app_config_exists, get_app_config_path
from broadcast_songs.app.logging_config import LOG_FILENAME, setup_logging
from broadcast_songs.app.models import CatalogLoadError, Song
from broadcast_songs.app.services.catalog import CatalogService
from broadcast_songs.app.services.colors import resolve_color
from broadcast_songs.app.services.notifications import extract_title, route_notification

app = typer.Typer(
    name="broadcast-songs",
    help="Broadcast Songs - setlist poster and lyrics driven by push notifications",
    no_args_is_help=False,
)
console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"broadcast-songs version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Broadcast Songs - show the setlist and follow song broadcasts."""


def _load_config(config_path: Optional[Path]) -> AppConfig:
    """Load the config from a path, or the default location.

    Raises:
        typer.Exit: If the config cannot be loaded
    """
    try:
        if config_path:
            return AppConfig.load(config_path)
        return ensure_app_config_exists()
    except FileNotFoundError as e:
        console.print(f"[red]Config file not found: {e}[/red]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Error loading config: {e}[/red]")
        raise typer.Exit(1)


def _read_payload(path: Path) -> dict:
    """Read a notification payload JSON file.

    Raises:
        typer.Exit: If the file is missing or not JSON
    """
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        console.print(f"[red]Cannot read notification payload: {e}[/red]")
        raise typer.Exit(1)
    except json.JSONDecodeError as e:
        console.print(f"[red]Notification payload is not valid JSON: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def run(
    config_path: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
    notification: Path = typer.Option(
        None,
        "--notification",
        "-n",
        help="Notification payload (JSON) to open the app from",
    ),
) -> None:
    """Launch the TUI application."""
    config = _load_config(config_path)
    launch_payload = _read_payload(notification) if notification else None

    logger = setup_logging(config.log_dir)
    logger.info(f"Setlist source: {'remote ' + config.remote_setlist_url if config.use_remote_setlist else 'bundled'}")
    logger.info(f"Push: {config.push_server + '/' + config.push_topic if config.push_enabled else 'disabled'}")
    console.print(f"[dim]Session log: {config.log_dir / LOG_FILENAME}[/dim]")

    try:
        app_instance = BroadcastSongsApp(config, launch_notification=launch_payload)
        logger.info("Launching TUI application")
        app_instance.run()
        logger.info("Application exited normally")
    except KeyboardInterrupt:
        logger.info("Application interrupted by user (Ctrl+C)")
        console.print("\n[yellow]Interrupted by user[/yellow]")
        raise typer.Exit(0)
    except Exception as e:
        logger.exception(f"Application error: {e}")
        console.print(f"[red]Error running app: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def config(
    config_path: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
) -> None:
    """Show the current configuration."""
    path = config_path or get_app_config_path()
    if not path.exists():
        console.print(f"[yellow]No config file at {path}[/yellow]")
        console.print("Run [bold]broadcast-songs run[/bold] to create default config.")
        return

    cfg = _load_config(path)
    console.print(f"[bold]Config file:[/bold] {path}")
    console.print(f"[bold]Remote setlist:[/bold] {cfg.use_remote_setlist}")
    console.print(f"[bold]Remote URL:[/bold] {cfg.remote_setlist_url}")
    console.print(f"[bold]Local setlist:[/bold] {cfg.local_setlist_path or 'bundled'}")
    console.print(f"[bold]Case-sensitive titles:[/bold] {cfg.case_sensitive_titles}")
    console.print(f"[bold]Push server:[/bold] {cfg.push_server or 'disabled'}")
    console.print(f"[bold]Push topic:[/bold] {cfg.push_topic}")
    console.print(f"[bold]Log dir:[/bold] {cfg.log_dir}")


def _optional_config(config_path: Optional[Path]) -> AppConfig:
    """Load the given or default config, or defaults when neither exists.

    Unlike `run`, this never creates a config file.
    """
    if config_path:
        return _load_config(config_path)
    default_path = get_app_config_path()
    if default_path.exists():
        return _load_config(default_path)
    return AppConfig()


def _load_songs(cfg: AppConfig, setlist: Optional[Path]) -> list[Song]:
    """Load the setlist the app would show, or an explicit setlist file.

    Raises:
        typer.Exit: If the setlist cannot be loaded
    """
    service = CatalogService(cfg)
    try:
        if setlist:
            return service.load_bundled(setlist)
        return service.load()
    except CatalogLoadError as e:
        console.print(f"[red]Cannot load setlist: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def route(
    payload_path: Path = typer.Argument(..., help="Notification payload (JSON)"),
    config_path: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (defaults to the user config, if any)",
    ),
    setlist: Path = typer.Option(
        None,
        "--setlist",
        "-s",
        help="Setlist JSON file (defaults to the configured setlist)",
    ),
    case_sensitive: Optional[bool] = typer.Option(
        None,
        "--case-sensitive/--ignore-case",
        help="Match titles case-sensitively (defaults to the configured setting)",
    ),
) -> None:
    """Show which song a notification payload would open."""
    payload = _read_payload(payload_path)
    cfg = _optional_config(config_path)
    songs = _load_songs(cfg, setlist)

    if case_sensitive is None:
        case_sensitive = cfg.case_sensitive_titles

    song = route_notification(payload, songs, case_sensitive=case_sensitive)
    if song is None:
        title = extract_title(payload)
        console.print(f"No matching song (title: {escape(repr(title))})")
        return

    console.print(
        Panel.fit(
            f"[bold]{escape(song.title)}[/bold]\n"
            f"id: {song.id}\n"
            f"colors: {escape(song.background_color)} / {escape(song.foreground_color)}",
            title="Matched song",
            border_style="green",
        )
    )


@app.command()
def export(
    config_path: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (defaults to the user config, if any)",
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the setlist JSON to this file instead of stdout",
    ),
) -> None:
    """Export the configured setlist as JSON."""
    cfg = _optional_config(config_path)
    songs = _load_songs(cfg, None)
    data = json.dumps([song.to_dict() for song in songs], indent=2, ensure_ascii=False)

    if output is None:
        typer.echo(data)
        return

    try:
        output.write_text(data + "\n", encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Cannot write {output}: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Exported {len(songs)} song(s) to {output}[/green]")


@app.command()
def color(
    text: str = typer.Argument(..., help="Color name (English or German) or hex string"),
) -> None:
    """Resolve a color name or hex string."""
    resolved = resolve_color(text)
    if resolved is None:
        console.print(f"[red]Cannot resolve color: {escape(repr(text))}[/red]")
        raise typer.Exit(1)

    console.print(
        f"{resolved.to_hex()}  "
        f"(r={resolved.red:.3f}, g={resolved.green:.3f}, b={resolved.blue:.3f}, a={resolved.alpha:.3f})"
    )


def cli_entry() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    cli_entry()
