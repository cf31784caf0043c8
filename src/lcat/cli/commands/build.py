from pathlib import Path
from typing import List, Optional

import typer

from lcat.cli.factories import make_app
from lcat.common import L, catalog


def build_command(
    directory: Optional[str] = typer.Option(
        None, "--dir", "-d", help=catalog.get(L.cli.option.dir.help)
    ),
    files: Optional[List[str]] = typer.Option(
        None, "--files", "-f", help=catalog.get(L.cli.option.files.help)
    ),
    out: Optional[Path] = typer.Option(
        None, "--out", "-o", help=catalog.get(L.cli.option.out.help)
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help=catalog.get(L.cli.option.base_url.help)
    ),
    jobs: Optional[int] = typer.Option(
        None, "--jobs", "-j", min=1, help=catalog.get(L.cli.option.jobs.help)
    ),
):
    app_instance = make_app(
        directory=directory,
        files=files or None,
        output_dir=str(out.resolve()) if out else None,
        base_url=base_url,
        jobs=jobs,
    )
    if not app_instance.run_build():
        raise typer.Exit(code=1)
