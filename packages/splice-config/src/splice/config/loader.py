import logging
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib

from splice.spec import ConfigError

log = logging.getLogger(__name__)


@dataclass
class SpliceConfig:
    index_path: str = "splice-index.yaml"
    max_edits_per_file: int = 50
    large_rename_threshold: int = 50
    many_dependents_threshold: int = 10
    large_edit_chars: int = 5000
    reserved_keywords: List[str] = field(default_factory=list)
    hot_reload_extensions: List[str] = field(default_factory=lambda: [".gml"])
    # Directory holding the pyproject.toml the values came from, if any.
    root_path: Optional[Path] = None


_INT_FIELDS = {
    "max_edits_per_file",
    "large_rename_threshold",
    "many_dependents_threshold",
    "large_edit_chars",
}
_LIST_FIELDS = {"reserved_keywords", "hot_reload_extensions"}


def _find_pyproject_toml(search_path: Path) -> Path:
    current_dir = search_path.resolve()
    while True:
        pyproject_path = current_dir / "pyproject.toml"
        if pyproject_path.is_file():
            return pyproject_path
        if current_dir.parent == current_dir:
            break
        current_dir = current_dir.parent
    raise FileNotFoundError("Could not find pyproject.toml in any parent directory.")


def _coerce(data: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(SpliceConfig)} - {"root_path"}
    values: Dict[str, Any] = {}

    for key, value in data.items():
        name = key.replace("-", "_")
        if name not in known:
            log.warning(f"Ignoring unknown [tool.splice] option '{key}'")
            continue

        if name in _INT_FIELDS:
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigError(
                    f"[tool.splice] {key} must be a non-negative integer, got {value!r}"
                )
        elif name in _LIST_FIELDS:
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError(f"[tool.splice] {key} must be a list of strings")
        elif not isinstance(value, str):
            raise ConfigError(f"[tool.splice] {key} must be a string, got {value!r}")

        values[name] = value

    return values


def load_config_from_path(search_path: Path) -> SpliceConfig:
    try:
        config_path = _find_pyproject_toml(search_path)
    except FileNotFoundError:
        return SpliceConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Could not parse {config_path}: {e}") from e

    splice_data: Dict[str, Any] = data.get("tool", {}).get("splice", {})
    return SpliceConfig(root_path=config_path.parent, **_coerce(splice_data))
