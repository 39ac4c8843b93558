"""
Command Line Interface

Typer commands that load the YAML configuration, set up logging, and run
the copy engine once (`run`), keep re-running it on source changes
(`watch`), or print the configuration fingerprint (`fingerprint`).

Author: filecopy Project
License: MIT
"""

from threading import Event
from typing import Optional

import typer
from rich.console import Console

from .config.config_loader import DEFAULT_CONFIG_NAME, load_config
from .config.schema import Config
from .core.copy_engine import CopyEngine
from .core.errors import ConfigError, CopyFilesError
from .monitoring.watcher import CopyFilesWatcher
from .sync_engine.fingerprint import compute_config_fingerprint
from .utils.logger import setup_logging

app = typer.Typer(help="filecopy - incremental, content-addressed file copies")
console = Console(stderr=True)

CONFIG_OPTION = typer.Option(
    None, "--config", "-c",
    help=f"Path to the YAML configuration (default: $FILECOPY_CONFIG or {DEFAULT_CONFIG_NAME})"
)
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Log every copy, link and skip decision")
JSON_LOGS_OPTION = typer.Option(False, "--json-logs", help="Emit JSON log records")


def _load(config_path: Optional[str], verbose: bool = False, json_logs: bool = False) -> Config:
    """Load configuration and configure logging, exiting on bad config."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2) from e

    app_config = config.app
    setup_logging(
        log_level="DEBUG" if verbose else app_config.log_level,
        log_to_file=app_config.log_to_file,
        log_file_path=app_config.log_file_path,
        log_rotation_size=app_config.log_rotation_size,
        log_retention_count=app_config.log_retention_count,
        json_format=json_logs or app_config.json_format,
    )
    return config


def _engine(config: Config) -> CopyEngine:
    return CopyEngine(config.state_path, max_parallelism=config.app.max_parallelism)


def _watch(config: Config, engine: CopyEngine, debounce_seconds: float) -> None:
    watcher = CopyFilesWatcher(engine, config.copy_operations, debounce_seconds=debounce_seconds)
    stop_event = Event()
    try:
        watcher.run_forever(poll_interval=config.watch.poll_interval, stop_event=stop_event)
    except KeyboardInterrupt:
        stop_event.set()
        console.print("Stopped watching.")


@app.command()
def run(
    config: Optional[str] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
    json_logs: bool = JSON_LOGS_OPTION,
):
    """Bring every destination up to date once (and keep watching if watch.enabled)."""
    cfg = _load(config, verbose, json_logs)
    engine = _engine(cfg)
    try:
        engine.run(cfg.copy_operations)
    except CopyFilesError as e:
        console.print(f"[red]Copy failed:[/red] {e}")
        raise typer.Exit(1) from e

    if cfg.watch.enabled:
        _watch(cfg, engine, cfg.watch.debounce_seconds)


@app.command()
def watch(
    config: Optional[str] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
    json_logs: bool = JSON_LOGS_OPTION,
    debounce: Optional[float] = typer.Option(None, "--debounce", help="Override watch.debounce_seconds"),
):
    """Run once, then re-run whenever a source folder changes (Ctrl-C to stop)."""
    cfg = _load(config, verbose, json_logs)
    engine = _engine(cfg)
    try:
        engine.run(cfg.copy_operations)
    except CopyFilesError as e:
        console.print(f"[red]Copy failed:[/red] {e}")

    _watch(cfg, engine, cfg.watch.debounce_seconds if debounce is None else debounce)


@app.command()
def fingerprint(config: Optional[str] = CONFIG_OPTION):
    """Print the fingerprint of the configured copy operations."""
    cfg = _load(config)
    typer.echo(compute_config_fingerprint(cfg.copy_operations))


def main():
    app()


if __name__ == "__main__":
    main()
