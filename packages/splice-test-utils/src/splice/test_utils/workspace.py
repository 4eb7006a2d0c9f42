from pathlib import Path
from textwrap import dedent
from typing import Any, Dict, List, Optional

import tomli_w
import yaml


class WorkspaceFactory:
    def __init__(self, root_path: Path):
        self.root_path = root_path
        self._files_to_create: List[Dict[str, Any]] = []
        self._pyproject_data: Dict[str, Any] = {}
        self._index_data: Optional[Dict[str, Any]] = None
        self._index_path = "splice-index.yaml"

    def with_project_name(self, name: str) -> "WorkspaceFactory":
        project = self._pyproject_data.setdefault("project", {})
        project["name"] = name
        return self

    def with_config(self, splice_config: Dict[str, Any]) -> "WorkspaceFactory":
        tool = self._pyproject_data.setdefault("tool", {})
        tool["splice"] = splice_config
        if "index_path" in splice_config:
            self._index_path = splice_config["index_path"]
        return self

    def with_source(self, path: str, content: str) -> "WorkspaceFactory":
        self._files_to_create.append(
            {"path": path, "content": dedent(content), "format": "raw"}
        )
        return self

    def with_symbol(
        self,
        symbol_id: str,
        definition: Optional[Dict[str, Any]] = None,
        references: Optional[List[Dict[str, Any]]] = None,
        dependents: Optional[List[str]] = None,
    ) -> "WorkspaceFactory":
        data = self._index_data if self._index_data is not None else {}
        self._index_data = data
        entry: Dict[str, Any] = {}
        if definition is not None:
            entry["definition"] = definition
        if references:
            entry["references"] = references
        if dependents:
            entry["dependents"] = dependents
        data.setdefault("symbols", {})[symbol_id] = entry
        return self

    def with_reserved(self, *words: str) -> "WorkspaceFactory":
        data = self._index_data if self._index_data is not None else {}
        self._index_data = data
        data.setdefault("reserved", []).extend(words)
        return self

    def with_yaml(self, path: str, data: Any) -> "WorkspaceFactory":
        self._files_to_create.append({"path": path, "content": data, "format": "yaml"})
        return self

    def build(self) -> Path:
        if self._pyproject_data:
            self._files_to_create.append(
                {
                    "path": "pyproject.toml",
                    "content": self._pyproject_data,
                    "format": "toml",
                }
            )
        if self._index_data is not None:
            self._files_to_create.append(
                {"path": self._index_path, "content": self._index_data, "format": "yaml"}
            )

        for file_spec in self._files_to_create:
            output_path = self.root_path / file_spec["path"]
            output_path.parent.mkdir(parents=True, exist_ok=True)

            content = file_spec["content"]
            fmt = file_spec["format"]

            if fmt == "toml":
                with output_path.open("wb") as f:
                    tomli_w.dump(content, f)
            elif fmt == "yaml":
                output_path.write_text(
                    yaml.safe_dump(content, indent=2, sort_keys=False), encoding="utf-8"
                )
            else:
                output_path.write_text(content, encoding="utf-8")

        return self.root_path
