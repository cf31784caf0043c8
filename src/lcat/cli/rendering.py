import logging

import typer

from lcat.common.messaging import protocols


class CliRenderer(protocols.Renderer):
    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def render(self, message: str, level: str):
        if level == "debug" and not self.verbose:
            return

        color = None
        if level == "success":
            color = typer.colors.GREEN
        elif level == "warning":
            color = typer.colors.YELLOW
        elif level == "error":
            color = typer.colors.RED
        elif level == "debug":
            color = typer.colors.BRIGHT_BLACK

        typer.secho(message, fg=color, err=level == "error")


class TyperLogHandler(logging.Handler):
    """Sends log records to stderr through typer, dimmed."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            typer.secho(self.format(record), fg=typer.colors.BRIGHT_BLACK, err=True)
        except Exception:
            self.handleError(record)


def configure_logging(verbose: bool) -> None:
    logger = logging.getLogger("lcat")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, TyperLogHandler) for h in logger.handlers):
        handler = TyperLogHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
