from typing import Any, List, Optional

from splice.spec import (
    ConflictType,
    HotReloadSafetySummary,
    RefactorError,
    SymbolKind,
    ValidationSummary,
    has_capability,
    parse_symbol_kind,
)

from .conflicts import detect_rename_conflicts
from .context import RefactorContext
from .edit import WorkspaceEdit
from .identifiers import (
    assert_valid_identifier_name,
    extract_symbol_kind,
    extract_symbol_name,
)
from .queries import gather_symbol_occurrences, validate_symbol_exists

# Replacement text constructs the runtime cannot swap in place.
_RELOAD_SENSITIVE_CONSTRUCTS = (
    ("globalvar", "globalvar"),
    ("#macro", "#macro"),
    ("enum ", "enum"),
)


def _unsafe(
    reason: str,
    requires_restart: bool,
    can_auto_fix: bool = False,
    suggestions: Optional[List[str]] = None,
) -> HotReloadSafetySummary:
    return HotReloadSafetySummary(
        safe=False,
        reason=reason,
        requires_restart=requires_restart,
        can_auto_fix=can_auto_fix,
        suggestions=list(suggestions or []),
    )


def _safe(reason: str, suggestions: List[str]) -> HotReloadSafetySummary:
    return HotReloadSafetySummary(
        safe=True,
        reason=reason,
        requires_restart=False,
        can_auto_fix=True,
        suggestions=suggestions,
    )


def check_hot_reload_safety(ctx: RefactorContext, request: Any) -> HotReloadSafetySummary:
    """
    Decides whether a rename can be applied to a running game.

    Structural problems short-circuit first. After that the verdict depends
    only on the symbol kind (second segment of the symbol id).
    """
    symbol_id = getattr(request, "symbol_id", None)
    new_name = getattr(request, "new_name", None)

    if not symbol_id or not new_name or not isinstance(symbol_id, str):
        return _unsafe(
            "Invalid rename request: missing symbol_id or new_name",
            requires_restart=True,
        )

    try:
        assert_valid_identifier_name(new_name)
    except RefactorError as e:
        return _unsafe(f"Invalid identifier name: {e}", requires_restart=True)

    if ctx.analyzer is None:
        return _unsafe(
            "Hot reload safety checks require a semantic analyzer to verify the rename",
            requires_restart=True,
            suggestions=[
                "Run the semantic analysis pass before requesting hot reload safety",
                "Provide a semantic analyzer when constructing the refactor engine",
            ],
        )

    if not validate_symbol_exists(ctx, symbol_id):
        return _unsafe(
            f"Symbol '{symbol_id}' not found in semantic index",
            requires_restart=True,
            suggestions=[
                "Ensure the project has been analyzed before attempting renames",
                "Verify the symbol id is correct",
            ],
        )

    symbol_name = extract_symbol_name(symbol_id)
    if symbol_name == new_name:
        return _unsafe(
            "New name matches the existing identifier",
            requires_restart=False,
            suggestions=["Choose a different name"],
        )

    occurrences = gather_symbol_occurrences(ctx, symbol_name)
    conflicts = detect_rename_conflicts(
        symbol_name,
        new_name,
        occurrences,
        ctx.analyzer,
        extra_reserved=ctx.config.reserved_keywords,
    )
    conflict_types = {c.type for c in conflicts}

    if ConflictType.RESERVED in conflict_types:
        return _unsafe(
            "Cannot rename to a reserved keyword",
            requires_restart=True,
            suggestions=["Choose a different name that isn't a reserved keyword"],
        )
    if ConflictType.SHADOW in conflict_types:
        return _unsafe(
            "Rename would introduce shadowing conflicts",
            requires_restart=False,
            can_auto_fix=True,
            suggestions=[
                "Qualify the conflicting identifiers to avoid shadowing",
                "Consider using a less common name to avoid conflicts",
            ],
        )

    raw_kind = extract_symbol_kind(symbol_id)
    kind = parse_symbol_kind(raw_kind)

    if kind is SymbolKind.SCRIPT:
        return _safe(
            "Script renames are hot-reload-safe",
            [
                "All script call sites will be updated atomically",
                "The hot reload system will recompile dependent scripts",
            ],
        )

    if kind is SymbolKind.VAR:
        if "::" in symbol_id:
            return _safe(
                "Instance variable renames are hot-reload-safe",
                [
                    "All references will be updated with proper scope qualification",
                    "Existing instances will retain their current values",
                ],
            )
        return _safe(
            "Global variable renames are hot-reload-safe",
            ["Global state will be preserved during hot reload"],
        )

    if kind is SymbolKind.EVENT:
        return _safe(
            "Event renames are hot-reload-safe with reinit",
            [
                "Event dispatch will be updated to use the new name",
                "Existing instances will have their event handlers reinitialized",
            ],
        )

    if kind in (SymbolKind.MACRO, SymbolKind.ENUM):
        return _unsafe(
            "Macro/enum renames require dependent script recompilation",
            requires_restart=False,
            can_auto_fix=True,
            suggestions=[
                "The hot reload system will recompile all dependent scripts",
                "Consider a batch rename to update related symbols together",
            ],
        )

    return _safe(
        f"Symbol kind '{raw_kind}' can be renamed",
        ["Symbol kind not recognized, proceeding with caution"],
    )


def validate_hot_reload_compatibility(
    ctx: RefactorContext, workspace: WorkspaceEdit, check_transpiler: bool = False
) -> ValidationSummary:
    """Advisory scan of a planned edit for changes a live reload may not absorb."""
    errors: List[str] = []
    warnings: List[str] = []

    if not isinstance(workspace, WorkspaceEdit):
        return ValidationSummary(valid=False, errors=["Invalid workspace edit"])

    if not workspace:
        warnings.append("Workspace edit contains no changes - hot reload not needed")
        return ValidationSummary(valid=True, warnings=warnings)

    extensions = tuple(ctx.config.hot_reload_extensions)
    limit = ctx.config.large_edit_chars

    for path, edits in workspace.group_by_file().items():
        if not path.endswith(extensions):
            warnings.append(f"File {path} is not a GML script - hot reload may not apply")

        for edit in edits:
            for needle, label in _RELOAD_SENSITIVE_CONSTRUCTS:
                if needle in edit.new_text:
                    warnings.append(
                        f"Edit in {path} introduces '{label}' - may require full reload"
                    )

        total_chars = sum(len(edit.new_text) for edit in edits)
        if total_chars > limit:
            warnings.append(
                f"Large edit in {path} ({total_chars} characters) - consider full reload"
            )

    if check_transpiler and has_capability(ctx.transpiler, "transpile_script"):
        warnings.append(
            "Transpiler compatibility check requested - ensure changed symbols can be transpiled"
        )

    return ValidationSummary(valid=not errors, errors=errors, warnings=warnings)
