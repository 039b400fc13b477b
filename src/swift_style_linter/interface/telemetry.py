"""Terminal telemetry: progress and problems on stderr, mirrored to logging."""

import logging

import typer


class TyperTelemetry:
    """TelemetryPort implementation that writes through typer.secho."""

    def __init__(self, quiet: bool = False) -> None:
        self.quiet = quiet

    def step(self, message: str) -> None:
        logging.debug(message)
        if not self.quiet:
            typer.secho(message, fg=typer.colors.CYAN, err=True)

    def warning(self, message: str) -> None:
        logging.debug(message)
        typer.secho(f"warning: {message}", fg=typer.colors.YELLOW, err=True)

    def error(self, message: str) -> None:
        logging.debug(message)
        typer.secho(f"error: {message}", fg=typer.colors.RED, err=True)
