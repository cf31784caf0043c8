import logging
import sys
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib

log = logging.getLogger(__name__)

CONFIG_FILE_NAME = "lcat.toml"
PYPROJECT_FILE_NAME = "pyproject.toml"


class ConfigError(Exception):
    pass


@dataclass
class LcatConfig:
    directory: Optional[str] = None
    files: List[str] = field(default_factory=list)
    output_dir: str = "docs"
    base_url: str = "/"
    jobs: int = 1
    strict: bool = False
    # Directory the relative paths above are resolved against.
    root_path: Path = field(default_factory=Path.cwd)

    def override(self, **values: Any) -> "LcatConfig":
        """Returns a copy where every value that is not None replaces the file's."""
        changes = {key: value for key, value in values.items() if value is not None}
        return replace(self, **changes)

    @property
    def output_path(self) -> Path:
        return self.root_path / self.output_dir


def _find_config_file(search_path: Path) -> Tuple[Path, Dict[str, Any]]:
    current_dir = search_path.resolve()
    while True:
        candidate = current_dir / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate, _read_toml(candidate)

        candidate = current_dir / PYPROJECT_FILE_NAME
        if candidate.is_file():
            tool_data = _read_toml(candidate).get("tool", {}).get("lcat")
            if tool_data is not None:
                return candidate, tool_data

        if current_dir.parent == current_dir:
            break
        current_dir = current_dir.parent
    raise FileNotFoundError(
        f"Could not find {CONFIG_FILE_NAME} or [tool.lcat] in any parent directory."
    )


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: {e}") from e


def _validate(data: Dict[str, Any], path: Path) -> Dict[str, Any]:
    known = {f.name for f in fields(LcatConfig)} - {"root_path"}
    for key in sorted(set(data) - known):
        log.warning(f"{path}: ignoring unknown option '{key}'")

    values = {key: value for key, value in data.items() if key in known}
    if isinstance(values.get("files"), str):
        values["files"] = [values["files"]]
    if "jobs" in values and (not isinstance(values["jobs"], int) or values["jobs"] < 1):
        raise ConfigError(f"{path}: 'jobs' must be a positive integer")
    return values


def load_config_from_path(search_path: Path) -> LcatConfig:
    try:
        config_path, data = _find_config_file(search_path)
    except FileNotFoundError:
        log.debug(f"No configuration found above {search_path}, using defaults")
        return LcatConfig(root_path=search_path.resolve())

    log.debug(f"Loading configuration from {config_path}")
    return LcatConfig(root_path=config_path.parent, **_validate(data, config_path))
