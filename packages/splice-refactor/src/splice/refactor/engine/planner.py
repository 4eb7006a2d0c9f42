from typing import Any, List, Tuple

from splice.spec import (
    ConflictError,
    InputValidationError,
    NoOpRenameError,
    RefactorError,
    SymbolNotFoundError,
    ValidationSummary,
)

from .conflicts import detect_rename_conflicts
from .context import RefactorContext
from .edit import WorkspaceEdit
from .identifiers import assert_valid_identifier_name, extract_symbol_name
from .queries import gather_symbol_occurrences, validate_symbol_exists
from .safety import check_hot_reload_safety


def unpack_request(request: Any, operation: str) -> Tuple[str, Any]:
    symbol_id = getattr(request, "symbol_id", None)
    new_name = getattr(request, "new_name", None)
    if not symbol_id or not new_name:
        raise InputValidationError(f"{operation} requires symbol_id and new_name")
    if not isinstance(symbol_id, str):
        raise InputValidationError(
            f"symbol_id must be a string, got {type(symbol_id).__name__}"
        )
    return symbol_id, new_name


def plan_rename(ctx: RefactorContext, request: Any) -> WorkspaceEdit:
    """
    Turns one rename request into a WorkspaceEdit with exactly one edit per
    reported occurrence of the symbol.

    Raises before producing anything when the request is malformed, the
    symbol is unknown, the rename is a no-op, or a blocking conflict
    (shadowing, reserved word) is detected. ConflictError carries every
    conflict found, blocking or not.
    """
    symbol_id, new_name = unpack_request(request, "plan_rename")
    name = assert_valid_identifier_name(new_name)

    if not validate_symbol_exists(ctx, symbol_id):
        raise SymbolNotFoundError(symbol_id)

    old_name = extract_symbol_name(symbol_id)
    if old_name == name:
        raise NoOpRenameError(name)

    occurrences = gather_symbol_occurrences(ctx, old_name)

    conflicts = detect_rename_conflicts(
        old_name,
        name,
        occurrences,
        ctx.analyzer,
        extra_reserved=ctx.config.reserved_keywords,
    )
    if any(c.type.is_blocking for c in conflicts):
        raise ConflictError(old_name, name, conflicts)

    workspace = WorkspaceEdit()
    for occurrence in occurrences:
        workspace.add_edit(occurrence.path, occurrence.start, occurrence.end, name)
    return workspace


def validate_rename_request(
    ctx: RefactorContext, request: Any, include_hot_reload: bool = False
) -> ValidationSummary:
    """The non-raising counterpart of `plan_rename`, for UI feedback."""
    errors: List[str] = []
    warnings: List[str] = []

    symbol_id = getattr(request, "symbol_id", None)
    new_name = getattr(request, "new_name", None)
    if not symbol_id or not new_name:
        return ValidationSummary(
            valid=False, errors=["Both symbol_id and new_name are required"]
        )
    if not isinstance(symbol_id, str):
        return ValidationSummary(
            valid=False,
            errors=[f"symbol_id must be a string, received {type(symbol_id).__name__}"],
        )

    try:
        name = assert_valid_identifier_name(new_name)
    except RefactorError as e:
        return ValidationSummary(valid=False, errors=[str(e)])

    if ctx.analyzer is not None:
        if not validate_symbol_exists(ctx, symbol_id):
            return ValidationSummary(
                valid=False,
                errors=[
                    f"Symbol '{symbol_id}' not found in semantic index. "
                    "Ensure the project has been analyzed."
                ],
            )
    else:
        warnings.append("No semantic analyzer available - cannot verify symbol existence")

    symbol_name = extract_symbol_name(symbol_id)
    if symbol_name == name:
        return ValidationSummary(
            valid=False,
            errors=[f"The new name '{name}' matches the existing identifier"],
            warnings=warnings,
        )

    occurrences = gather_symbol_occurrences(ctx, symbol_name)
    if not occurrences:
        warnings.append(
            f"No occurrences found for symbol '{symbol_name}' - rename will have no effect"
        )

    conflicts = detect_rename_conflicts(
        symbol_name,
        name,
        occurrences,
        ctx.analyzer,
        extra_reserved=ctx.config.reserved_keywords,
    )
    for conflict in conflicts:
        if conflict.type.is_blocking:
            errors.append(conflict.message)
        else:
            warnings.append(conflict.message)

    hot_reload = None
    if include_hot_reload and not errors:
        hot_reload = check_hot_reload_safety(ctx, request)
        if not hot_reload.safe:
            prefix = (
                "Hot reload unavailable"
                if hot_reload.requires_restart
                else "Hot reload limitations detected"
            )
            warnings.append(f"{prefix}: {hot_reload.reason}")

    return ValidationSummary(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        symbol_name=symbol_name,
        occurrence_count=len(occurrences),
        hot_reload=hot_reload,
    )
