from typing import List, Optional

import typer

from lcat.cli.factories import make_app
from lcat.common import L, catalog


def check_command(
    directory: Optional[str] = typer.Option(
        None, "--dir", "-d", help=catalog.get(L.cli.option.dir.help)
    ),
    files: Optional[List[str]] = typer.Option(
        None, "--files", "-f", help=catalog.get(L.cli.option.files.help)
    ),
    strict: bool = typer.Option(
        False, "--strict", help=catalog.get(L.cli.option.strict.help)
    ),
    jobs: Optional[int] = typer.Option(
        None, "--jobs", "-j", min=1, help=catalog.get(L.cli.option.jobs.help)
    ),
):
    app_instance = make_app(directory=directory, files=files or None, jobs=jobs)
    # Without the flag the configured `strict` value applies.
    if not app_instance.run_check(strict=strict or None):
        raise typer.Exit(code=1)
