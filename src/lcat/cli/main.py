import typer

from lcat.common import L, bus, catalog
from .rendering import CliRenderer, configure_logging

from .commands.build import build_command
from .commands.check import check_command

app = typer.Typer(
    name="lcat",
    help=catalog.get(L.cli.app.description),
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help=catalog.get(L.cli.option.verbose.help)
    ),
):
    # The CLI is the composition root. It decides *which* renderer to use.
    bus.set_renderer(CliRenderer(verbose=verbose))
    configure_logging(verbose)


app.command(name="build", help=catalog.get(L.cli.command.build.help))(build_command)
app.command(name="check", help=catalog.get(L.cli.command.check.help))(check_command)


if __name__ == "__main__":
    app()
