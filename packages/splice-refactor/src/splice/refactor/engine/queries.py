"""
Thin, capability-checked wrappers around the semantic analyzer and parser.

Every helper degrades to a permissive default when the collaborator or the
specific method is missing: the symbol is assumed to exist, and occurrence,
file-symbol and dependent lists are empty.
"""

from typing import List, Optional

from splice.spec import (
    AstNode,
    DependentSymbol,
    FileSymbol,
    InputValidationError,
    SymbolLocation,
    SymbolOccurrence,
    TextRange,
    has_capability,
)

from .context import RefactorContext


def validate_symbol_exists(ctx: RefactorContext, symbol_id: str) -> bool:
    if has_capability(ctx.analyzer, "has_symbol"):
        return bool(ctx.analyzer.has_symbol(symbol_id))
    return True


def gather_symbol_occurrences(
    ctx: RefactorContext, symbol_name: str
) -> List[SymbolOccurrence]:
    if has_capability(ctx.analyzer, "get_symbol_occurrences"):
        return list(ctx.analyzer.get_symbol_occurrences(symbol_name) or [])
    return []


def get_file_symbols(ctx: RefactorContext, path: str) -> List[FileSymbol]:
    if not path or not isinstance(path, str):
        raise InputValidationError("get_file_symbols requires a valid file path string")
    if has_capability(ctx.analyzer, "get_file_symbols"):
        return list(ctx.analyzer.get_file_symbols(path) or [])
    return []


def get_symbol_dependents(
    ctx: RefactorContext, symbol_ids: List[str]
) -> List[DependentSymbol]:
    if not isinstance(symbol_ids, (list, tuple)):
        raise InputValidationError(
            "get_symbol_dependents requires a list of symbol ids"
        )
    if not symbol_ids:
        return []
    if has_capability(ctx.analyzer, "get_dependents"):
        return list(ctx.analyzer.get_dependents(list(symbol_ids)) or [])
    return []


def find_symbol_at_location(
    ctx: RefactorContext, path: str, offset: int
) -> Optional[SymbolLocation]:
    if has_capability(ctx.analyzer, "get_symbol_at_position"):
        return ctx.analyzer.get_symbol_at_position(path, offset)

    if has_capability(ctx.parser, "parse"):
        try:
            ast = ctx.parser.parse(path)
        except Exception:
            # An unparsable file simply has no symbol under the cursor.
            return None
        return _find_identifier_at(ast, offset)

    return None


def _find_identifier_at(node: Optional[AstNode], offset: int) -> Optional[SymbolLocation]:
    if node is None or not (node.start <= offset <= node.end):
        return None

    # Children first, so the innermost identifier wins.
    for child in node.children or []:
        found = _find_identifier_at(child, offset)
        if found:
            return found

    if node.type == "identifier" and node.name:
        return SymbolLocation(
            symbol_id=f"gml/identifier/{node.name}",
            name=node.name,
            range=TextRange(start=node.start, end=node.end),
        )
    return None
