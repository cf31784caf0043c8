from pathlib import Path
from textwrap import dedent
from typing import Any, Dict, List

import tomli_w


class WorkspaceFactory:
    """Builds a throwaway Lua project on disk for tests."""

    def __init__(self, root_path: Path):
        self.root_path = root_path
        self._files_to_create: List[Dict[str, Any]] = []
        self._pyproject_data: Dict[str, Any] = {}
        self._lcat_toml: Dict[str, Any] = {}

    def with_config(self, lcat_config: Dict[str, Any]) -> "WorkspaceFactory":
        """Writes `lcat_config` as `[tool.lcat]` of pyproject.toml."""
        tool = self._pyproject_data.setdefault("tool", {})
        tool["lcat"] = lcat_config
        return self

    def with_lcat_toml(self, lcat_config: Dict[str, Any]) -> "WorkspaceFactory":
        self._lcat_toml = lcat_config
        return self

    def with_project_name(self, name: str) -> "WorkspaceFactory":
        project = self._pyproject_data.setdefault("project", {})
        project["name"] = name
        return self

    def with_source(self, path: str, content: str) -> "WorkspaceFactory":
        self._files_to_create.append(
            {"path": path, "content": dedent(content), "format": "raw"}
        )
        return self

    def build(self) -> Path:
        if self._pyproject_data:
            self._files_to_create.append(
                {"path": "pyproject.toml", "content": self._pyproject_data, "format": "toml"}
            )
        if self._lcat_toml:
            self._files_to_create.append(
                {"path": "lcat.toml", "content": self._lcat_toml, "format": "toml"}
            )

        for file_spec in self._files_to_create:
            output_path = self.root_path / file_spec["path"]
            output_path.parent.mkdir(parents=True, exist_ok=True)

            if file_spec["format"] == "toml":
                with output_path.open("wb") as f:
                    tomli_w.dump(file_spec["content"], f)
            else:
                output_path.write_text(file_spec["content"], encoding="utf-8")

        return self.root_path
