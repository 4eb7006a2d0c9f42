from typing import Dict, Iterable, List, Optional, Tuple

from splice.spec import (
    DependentSymbol,
    FileSymbol,
    SymbolBinding,
    SymbolLocation,
    SymbolOccurrence,
    ValidationSummary,
)

_CAPABILITIES = (
    "has_symbol",
    "get_symbol_occurrences",
    "lookup",
    "get_reserved_keywords",
    "validate_edits",
    "get_file_symbols",
    "get_dependents",
    "get_symbol_at_position",
)


class StubAnalyzer:
    """
    An in-memory semantic analyzer for tests.

    Every capability is backed by a plain dict or list the test fills in.
    Pass `without=("lookup", ...)` to remove capabilities entirely, so the
    engine sees an analyzer that genuinely lacks them. Every call is
    appended to `calls` as `(method, args)`.
    """

    def __init__(self, without: Iterable[str] = ()):
        self.symbols: List[str] = []
        self.occurrences: Dict[str, List[SymbolOccurrence]] = {}
        # (name, scope_id) -> binding; scope None acts as the global scope.
        self.bindings: Dict[Tuple[str, Optional[str]], SymbolBinding] = {}
        self.reserved: List[str] = []
        self.file_symbols: Dict[str, List[str]] = {}
        self.dependents: Dict[str, List[DependentSymbol]] = {}
        self.positions: Dict[Tuple[str, int], SymbolLocation] = {}
        self.validation: Optional[ValidationSummary] = None
        self.calls: List[Tuple[str, tuple]] = []

        for name in without:
            if name not in _CAPABILITIES:
                raise ValueError(f"Unknown analyzer capability: {name}")
            # An instance attribute set to None hides the method from has_capability.
            setattr(self, name, None)

    # --- Builders ---

    def with_symbol(
        self, symbol_id: str, *occurrences: SymbolOccurrence
    ) -> "StubAnalyzer":
        self.symbols.append(symbol_id)
        name = symbol_id.split("/")[-1]
        self.occurrences.setdefault(name, []).extend(occurrences)
        return self

    def with_binding(
        self, name: str, scope_id: Optional[str], symbol_id: Optional[str] = None
    ) -> "StubAnalyzer":
        self.bindings[(name, scope_id)] = SymbolBinding(name=name, symbol_id=symbol_id)
        return self

    def with_dependents(
        self, symbol_id: str, *dependents: str, path: Optional[str] = None
    ) -> "StubAnalyzer":
        entries = self.dependents.setdefault(symbol_id, [])
        entries.extend(DependentSymbol(symbol_id=d, file_path=path) for d in dependents)
        return self

    # --- SemanticAnalyzerProtocol ---

    def has_symbol(self, symbol_id: str) -> bool:
        self.calls.append(("has_symbol", (symbol_id,)))
        return symbol_id in self.symbols

    def get_symbol_occurrences(self, name: str) -> List[SymbolOccurrence]:
        self.calls.append(("get_symbol_occurrences", (name,)))
        return list(self.occurrences.get(name, []))

    def lookup(self, name: str, scope_id: Optional[str]) -> Optional[SymbolBinding]:
        self.calls.append(("lookup", (name, scope_id)))
        return self.bindings.get((name, scope_id)) or self.bindings.get((name, None))

    def get_reserved_keywords(self) -> List[str]:
        return list(self.reserved)

    def validate_edits(self, workspace) -> Optional[ValidationSummary]:
        self.calls.append(("validate_edits", (workspace,)))
        return self.validation

    def get_file_symbols(self, path: str) -> List[FileSymbol]:
        return [FileSymbol(id=s) for s in self.file_symbols.get(path, [])]

    def get_dependents(self, symbol_ids: List[str]) -> List[DependentSymbol]:
        self.calls.append(("get_dependents", tuple(symbol_ids)))
        result: List[DependentSymbol] = []
        for symbol_id in symbol_ids:
            result.extend(self.dependents.get(symbol_id, []))
        return result

    def get_symbol_at_position(self, path: str, offset: int) -> Optional[SymbolLocation]:
        return self.positions.get((path, offset))
