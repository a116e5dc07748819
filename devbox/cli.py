from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from .bootstrap import build_pipeline, print_summary
from .config import Config
from .errors import DevboxError, PrivilegeError
from .logs import LOGGER_NAME, setup_logging
from .preflight import check_user
from .shell import Shell

app = typer.Typer(
    name="devbox",
    help="Bootstrap a local development environment on Red Hat-based systems.",
    add_completion=False,
)
logger = logging.getLogger(LOGGER_NAME)


def cmd_setup(config_path: Optional[Path], verbose: bool, show: bool, console: Optional[Console] = None) -> int:
    # Nothing may touch the filesystem before the root check.
    try:
        check_user()
    except PrivilegeError as e:
        typer.echo(f"Error: {e}", err=True)
        return 1

    try:
        config = Config(config_path=config_path)
        timeout = config.command_timeout
    except RuntimeError as e:
        typer.echo(f"Error: {e}", err=True)
        return 1

    try:
        log_path = setup_logging(config.log_dir, verbose=verbose)
    except OSError as e:
        typer.echo(f"Error: cannot create log file in {config.log_dir}: {e}", err=True)
        return 1
    logger.debug(f"Logging to {log_path}")
    shell = Shell(show=show, timeout=timeout)
    try:
        results = build_pipeline(config, shell=shell).execute()
    except DevboxError as e:
        logger.error(str(e))
        return 1
    except Exception as e:  # noqa: BLE001
        logger.exception(f"Unexpected error: {e}")
        return 1

    print_summary(config, results, console)
    logger.info(f"Log written to {log_path}")
    return 0


@app.command()
def main(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a YAML config file (default ~/.devbox.yaml)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    show: bool = typer.Option(False, "--show", help="Stream command output while running"),
) -> None:
    """Validate the host, install tools, configure Docker and set up the sample project."""
    code = cmd_setup(config, verbose, show)
    raise typer.Exit(code)


if __name__ == "__main__":
    app()
