from pathlib import Path
from typing import Any

import typer

from lcat.app import LcatApp
from lcat.common import L, bus
from lcat.config import ConfigError, load_config_from_path


def get_project_root() -> Path:
    return Path.cwd()


def make_app(**overrides: Any) -> LcatApp:
    # Composition root: command line values win over the configuration file.
    try:
        config = load_config_from_path(get_project_root())
    except ConfigError as e:
        bus.error(L.error.config, error=e)
        raise typer.Exit(code=1)
    return LcatApp(config.override(**overrides))
