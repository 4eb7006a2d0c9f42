from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from splice.spec import (
    Conflict,
    ConflictType,
    RefactorError,
    SemanticAnalyzerProtocol,
    SymbolOccurrence,
    has_capability,
)

from .identifiers import (
    assert_valid_identifier_name,
    build_reserved_set,
    extract_symbol_name,
)

# More occurrences than this in one file earns a "review carefully" warning.
CROSS_FILE_OCCURRENCE_LIMIT = 20


def _reserved_suggestions(name: str) -> List[str]:
    capitalized = name[:1].upper() + name[1:]
    return [
        f"Try '{name}_value' or 'my{capitalized}' instead",
        "Add a prefix or suffix that describes the symbol's purpose",
    ]


def _shadow_suggestions(new_name: str) -> List[str]:
    return [
        "Choose a different name that is not already bound in this scope",
        f"Rename the existing '{new_name}' first, then retry",
    ]


def analyzer_reserved_keywords(
    analyzer: Optional[SemanticAnalyzerProtocol],
) -> List[str]:
    if has_capability(analyzer, "get_reserved_keywords"):
        return list(analyzer.get_reserved_keywords() or [])
    return []


def detect_rename_conflicts(
    old_name: str,
    new_name: str,
    occurrences: Iterable[SymbolOccurrence],
    analyzer: Optional[SemanticAnalyzerProtocol],
    extra_reserved: Iterable[str] = (),
) -> List[Conflict]:
    """
    Reports every conflict a rename of `old_name` to `new_name` would cause.

    An invalid target name is reported alone. Otherwise the shadow and
    reserved-word checks both run, so the caller sees the full set at once.
    Shadowing is reported once per distinct scope.
    """
    conflicts: List[Conflict] = []

    try:
        name = assert_valid_identifier_name(new_name)
    except RefactorError as e:
        conflicts.append(
            Conflict(
                type=ConflictType.INVALID_IDENTIFIER,
                message=str(e),
                suggestions=[
                    "Identifiers must start with a letter or underscore",
                    "Use only letters, digits and underscores",
                ],
            )
        )
        return conflicts

    if has_capability(analyzer, "lookup"):
        seen_scopes = set()
        for occurrence in occurrences:
            if occurrence.scope_id in seen_scopes:
                continue
            existing = analyzer.lookup(name, occurrence.scope_id)
            if existing is not None and existing.name != old_name:
                seen_scopes.add(occurrence.scope_id)
                conflicts.append(
                    Conflict(
                        type=ConflictType.SHADOW,
                        message=(
                            f"Renaming '{old_name}' to '{name}' would shadow "
                            "existing symbol in scope"
                        ),
                        path=occurrence.path,
                        suggestions=_shadow_suggestions(name),
                    )
                )

    reserved = build_reserved_set(analyzer_reserved_keywords(analyzer), extra_reserved)
    if name.lower() in reserved:
        conflicts.append(
            Conflict(
                type=ConflictType.RESERVED,
                message=f"'{name}' is a reserved keyword and cannot be used as an identifier",
                suggestions=_reserved_suggestions(name),
            )
        )

    return conflicts


def validate_cross_file_consistency(
    symbol_id: str,
    new_name: str,
    occurrences: Iterable[SymbolOccurrence],
    analyzer: Optional[SemanticAnalyzerProtocol],
) -> List[Conflict]:
    """
    Flags files that already define a symbol named `new_name`, and files
    with enough occurrences that a missed reference becomes likely.
    """
    occurrences = list(occurrences)
    if not has_capability(analyzer, "get_file_symbols"):
        return []
    if not symbol_id or not new_name or not occurrences:
        return []

    try:
        name = assert_valid_identifier_name(new_name)
    except RefactorError as e:
        return [Conflict(type=ConflictType.INVALID_IDENTIFIER, message=str(e))]

    by_file: Dict[str, List[SymbolOccurrence]] = defaultdict(list)
    for occurrence in occurrences:
        if occurrence.path:
            by_file[occurrence.path].append(occurrence)

    errors: List[Conflict] = []
    for path, file_occurrences in by_file.items():
        for symbol in analyzer.get_file_symbols(path) or []:
            if extract_symbol_name(symbol.id) == name and symbol.id != symbol_id:
                errors.append(
                    Conflict(
                        type=ConflictType.SHADOW,
                        message=(
                            f"File '{path}' already defines symbol '{name}' ({symbol.id})"
                        ),
                        path=path,
                        suggestions=[
                            f"Rename the existing '{symbol.id}' first",
                            "Pick a different target name",
                        ],
                    )
                )
                break

        if len(file_occurrences) > CROSS_FILE_OCCURRENCE_LIMIT:
            errors.append(
                Conflict(
                    type=ConflictType.LARGE_RENAME,
                    message=(
                        f"File '{path}' contains {len(file_occurrences)} occurrences "
                        "- verify all references are updated"
                    ),
                    severity="warning",
                    path=path,
                    suggestions=[
                        "Review the diff for this file before committing",
                        "Run the project's tests after applying the rename",
                    ],
                )
            )

    return errors
