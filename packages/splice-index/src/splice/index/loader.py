import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from splice.spec import IndexLoadError

from .store import SymbolIndex
from .types import LocationRecord, SymbolRecord

log = logging.getLogger(__name__)


def _parse_location(data: Any) -> Optional[LocationRecord]:
    if not isinstance(data, dict):
        return None
    path, start, end = data.get("path"), data.get("start"), data.get("end")
    if not isinstance(path, str) or not path:
        return None
    # bool is an int subclass; `start: true` is not an offset.
    for offset in (start, end):
        if not isinstance(offset, int) or isinstance(offset, bool) or offset < 0:
            return None
    if start > end:
        return None
    scope = data.get("scope")
    return LocationRecord(
        path=path, start=start, end=end, scope=None if scope is None else str(scope)
    )


def _parse_symbol(symbol_id: str, data: Any) -> Optional[SymbolRecord]:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        log.warning(f"Skipping index entry '{symbol_id}': expected a mapping.")
        return None

    definition = None
    if data.get("definition") is not None:
        definition = _parse_location(data["definition"])
        if definition is None:
            log.warning(f"Skipping index entry '{symbol_id}': malformed definition.")
            return None

    references: List[LocationRecord] = []
    for raw in data.get("references") or []:
        location = _parse_location(raw)
        if location is None:
            log.warning(f"Ignoring malformed reference of '{symbol_id}': {raw!r}")
            continue
        references.append(location)

    dependents = data.get("dependents") or []
    if not isinstance(dependents, list):
        log.warning(f"Ignoring non-list dependents of '{symbol_id}'.")
        dependents = []

    return SymbolRecord(
        id=symbol_id,
        name=symbol_id.split("/")[-1],
        definition=definition,
        references=references,
        dependents=[str(d) for d in dependents],
    )


def parse_symbol_index(content: Dict[str, Any]) -> SymbolIndex:
    reserved = content.get("reserved") or []
    if not isinstance(reserved, list):
        raise IndexLoadError("'reserved' must be a list of words")

    symbols = content.get("symbols") or {}
    if not isinstance(symbols, dict):
        raise IndexLoadError("'symbols' must be a mapping of symbol id to entry")

    records: List[SymbolRecord] = []
    for symbol_id, data in symbols.items():
        record = _parse_symbol(str(symbol_id), data)
        if record is not None:
            records.append(record)

    return SymbolIndex(records, reserved=[str(w) for w in reserved])


def load_symbol_index(path: Path) -> SymbolIndex:
    """Loads a YAML symbol index. Unusable entries are skipped with a warning."""
    if not path.is_file():
        raise IndexLoadError(f"Symbol index not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise IndexLoadError(f"Could not parse symbol index {path}: {e}") from e

    if content is None:
        content = {}
    if not isinstance(content, dict):
        raise IndexLoadError(f"Symbol index {path} must contain a mapping")

    return parse_symbol_index(content)
