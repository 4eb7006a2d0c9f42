from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from splice.spec import (
    DependentSymbol,
    FileSymbol,
    OccurrenceKind,
    SymbolBinding,
    SymbolLocation,
    SymbolOccurrence,
    TextRange,
)

from .types import LocationRecord, SymbolRecord


class SymbolIndex:
    """
    A read-only semantic analyzer over a pre-computed symbol index.

    Symbols are keyed by id; occurrence and binding queries go through the
    base name (last id segment), since that is the text the rename touches.
    """

    def __init__(
        self, symbols: Iterable[SymbolRecord], reserved: Iterable[str] = ()
    ):
        self._symbols: Dict[str, SymbolRecord] = {s.id: s for s in symbols}
        self._reserved: List[str] = list(reserved)
        self._by_name: Dict[str, List[SymbolRecord]] = defaultdict(list)
        for record in self._symbols.values():
            self._by_name[record.name].append(record)

    def __len__(self) -> int:
        return len(self._symbols)

    @property
    def symbol_ids(self) -> List[str]:
        return list(self._symbols)

    def has_symbol(self, symbol_id: str) -> bool:
        return symbol_id in self._symbols

    def get_symbol_occurrences(self, name: str) -> List[SymbolOccurrence]:
        occurrences: List[SymbolOccurrence] = []
        for record in self._by_name.get(name, []):
            if record.definition:
                occurrences.append(
                    _occurrence(record.definition, OccurrenceKind.DEFINITION)
                )
            occurrences.extend(
                _occurrence(ref, OccurrenceKind.REFERENCE) for ref in record.references
            )
        return occurrences

    def lookup(self, name: str, scope_id: Optional[str]) -> Optional[SymbolBinding]:
        for record in self._by_name.get(name, []):
            scope = record.definition.scope if record.definition else None
            if scope is None or scope == scope_id:
                return SymbolBinding(name=name, symbol_id=record.id)
        return None

    def get_reserved_keywords(self) -> List[str]:
        return list(self._reserved)

    def get_file_symbols(self, path: str) -> List[FileSymbol]:
        return [
            FileSymbol(id=record.id)
            for record in self._symbols.values()
            if record.definition and record.definition.path == path
        ]

    def get_dependents(self, symbol_ids: List[str]) -> List[DependentSymbol]:
        result: List[DependentSymbol] = []
        for symbol_id in symbol_ids:
            record = self._symbols.get(symbol_id)
            if record is None:
                continue
            for dependent_id in record.dependents:
                dependent = self._symbols.get(dependent_id)
                file_path = (
                    dependent.definition.path
                    if dependent and dependent.definition
                    else None
                )
                result.append(DependentSymbol(symbol_id=dependent_id, file_path=file_path))
        return result

    def get_symbol_at_position(self, path: str, offset: int) -> Optional[SymbolLocation]:
        for record in self._symbols.values():
            locations = [record.definition] if record.definition else []
            locations.extend(record.references)
            for location in locations:
                if location.path == path and location.start <= offset <= location.end:
                    return SymbolLocation(
                        symbol_id=record.id,
                        name=record.name,
                        range=TextRange(start=location.start, end=location.end),
                    )
        return None


def _occurrence(location: LocationRecord, kind: OccurrenceKind) -> SymbolOccurrence:
    return SymbolOccurrence(
        path=location.path,
        start=location.start,
        end=location.end,
        scope_id=location.scope,
        kind=kind,
    )
