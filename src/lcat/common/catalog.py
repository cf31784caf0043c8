import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Union

from .pointer import SemanticPointer

log = logging.getLogger(__name__)

LANG_ENV_VAR = "LCAT_LANG"
DEFAULT_LANG = "en"


def find_project_root(start_dir: Optional[Path] = None) -> Path:
    """Searches upwards for lcat.toml, pyproject.toml or .git."""
    current_dir = (start_dir or Path.cwd()).resolve()
    while current_dir.parent != current_dir:
        if (current_dir / "lcat.toml").is_file():
            return current_dir
        if (current_dir / "pyproject.toml").is_file():
            return current_dir
        if (current_dir / ".git").is_dir():
            return current_dir
        current_dir = current_dir.parent
    return start_dir or Path.cwd()


def load_json_directory(directory: Path) -> Dict[str, str]:
    """Merges every `*.json` file below `directory` into one flat id -> text map."""
    registry: Dict[str, str] = {}
    if not directory.is_dir():
        return registry

    for path in sorted(directory.rglob("*.json")):
        try:
            with path.open("r", encoding="utf-8") as f:
                content = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            log.warning(f"Skipping unreadable message file {path}: {e}")
            continue
        for key, value in content.items():
            registry[str(key)] = str(value)
    return registry


class MessageCatalog:
    """
    Resolves message ids to text templates.

    Templates live in `needle/<lang>/*.json` below each root. Later roots
    are defaults, earlier roots override them, so a project can reword any
    message from `<project>/.lcat/needle/<lang>`.
    """

    def __init__(self, roots: List[Path]):
        self.roots = roots
        self._registry: Dict[str, Dict[str, str]] = {}

    def _ensure_loaded(self, lang: str) -> Dict[str, str]:
        if lang not in self._registry:
            merged: Dict[str, str] = {}
            for root in reversed(self.roots):
                merged.update(load_json_directory(root / "needle" / lang))
            self._registry[lang] = merged
        return self._registry[lang]

    def get(
        self, pointer: Union[SemanticPointer, str], lang: Optional[str] = None
    ) -> str:
        """
        Looks a template up in the target language, then in English, and
        finally falls back to the id itself.
        """
        key = str(pointer)
        target_lang = lang or os.getenv(LANG_ENV_VAR, DEFAULT_LANG)

        value = self._ensure_loaded(target_lang).get(key)
        if value is None and target_lang != DEFAULT_LANG:
            value = self._ensure_loaded(DEFAULT_LANG).get(key)
        return key if value is None else value
