from collections import defaultdict
from typing import Any, Dict, List, Sequence

from splice.analysis.graph.algorithms import find_first_cycle
from splice.spec import (
    BatchCollisionError,
    BatchRenameValidation,
    CircularRenameError,
    InputValidationError,
    OverlapValidationError,
    ValidationSummary,
)

from .applier import validate_rename
from .context import RefactorContext
from .edit import WorkspaceEdit
from .identifiers import (
    assert_valid_identifier_name,
    extract_symbol_name,
    is_valid_identifier,
    retarget_symbol_id,
)
from .planner import plan_rename, unpack_request, validate_rename_request


def _well_formed(rename: Any) -> bool:
    symbol_id = getattr(rename, "symbol_id", None)
    new_name = getattr(rename, "new_name", None)
    return (
        isinstance(symbol_id, str)
        and bool(symbol_id)
        and isinstance(new_name, str)
        and bool(new_name)
    )


def detect_circular_renames(renames: Sequence[Any]) -> List[str]:
    """
    Returns the first rename cycle found, e.g. `[A, B, C, A]`, or `[]`.

    Each rename is an edge from its symbol id to the id it will have
    afterwards. An edge is only followed when its target is itself being
    renamed in the same batch.
    """
    graph: Dict[str, str] = {}
    for rename in renames:
        graph[rename.symbol_id] = retarget_symbol_id(rename.symbol_id, rename.new_name)

    def successors(node: str) -> List[str]:
        target = graph.get(node)
        return [target] if target in graph else []

    return find_first_cycle(graph.keys(), successors)


def plan_batch_rename(ctx: RefactorContext, renames: Sequence[Any]) -> WorkspaceEdit:
    """
    Plans several renames as one atomic edit.

    Collisions between target names and circular rename chains are rejected
    before any single rename is planned. The merged edit is validated for
    overlaps before it is returned.
    """
    if not isinstance(renames, (list, tuple)):
        raise InputValidationError("plan_batch_rename requires a list of renames")
    if not renames:
        raise InputValidationError("plan_batch_rename requires at least one rename")

    for rename in renames:
        unpack_request(rename, "Each rename")
        assert_valid_identifier_name(rename.new_name)

    targets: Dict[str, List[str]] = defaultdict(list)
    for rename in renames:
        targets[rename.new_name].append(rename.symbol_id)
    for new_name, symbol_ids in targets.items():
        if len(symbol_ids) > 1:
            raise BatchCollisionError(new_name, symbol_ids)

    cycle = detect_circular_renames(renames)
    if cycle:
        raise CircularRenameError(cycle)

    merged = WorkspaceEdit()
    for rename in renames:
        merged.merge(plan_rename(ctx, rename))

    validation = validate_rename(ctx, merged)
    if not validation.valid:
        raise OverlapValidationError(
            validation.errors, prefix="Batch rename validation failed"
        )

    return merged


def validate_batch_rename_request(
    ctx: RefactorContext, renames: Sequence[Any], include_hot_reload: bool = False
) -> BatchRenameValidation:
    errors: List[str] = []
    warnings: List[str] = []
    rename_validations: Dict[str, ValidationSummary] = {}
    conflicting_sets: List[List[str]] = []

    if not isinstance(renames, (list, tuple)):
        return BatchRenameValidation(
            valid=False, errors=["Batch rename requires a list of rename requests"]
        )
    if not renames:
        return BatchRenameValidation(
            valid=False, errors=["Batch rename requires at least one rename request"]
        )

    for rename in renames:
        symbol_id = getattr(rename, "symbol_id", None)
        if not symbol_id or not isinstance(symbol_id, str):
            errors.append("Each rename must have a valid symbol_id string")
            continue

        validation = validate_rename_request(ctx, rename, include_hot_reload)
        rename_validations[symbol_id] = validation
        if not validation.valid:
            errors.append(
                f"Rename validation failed for '{symbol_id}': {', '.join(validation.errors)}"
            )
        warnings.extend(f"{symbol_id}: {w}" for w in validation.warnings)

    valid_renames = [r for r in renames if _well_formed(r)]

    targets: Dict[str, List[str]] = defaultdict(list)
    for rename in valid_renames:
        if is_valid_identifier(rename.new_name):
            targets[rename.new_name].append(rename.symbol_id)
    for new_name, symbol_ids in targets.items():
        if len(symbol_ids) > 1:
            errors.append(
                f"Multiple symbols cannot be renamed to '{new_name}': {', '.join(symbol_ids)}"
            )
            conflicting_sets.append(symbol_ids)

    cycle = detect_circular_renames(valid_renames)
    if cycle:
        chain = " -> ".join(extract_symbol_name(s) for s in cycle)
        errors.append(
            f"Circular rename chain detected: {chain}. Cannot rename symbols in a cycle."
        )
        conflicting_sets.append(cycle)

    # A target that is another rename's original name reads confusingly.
    old_names = {extract_symbol_name(r.symbol_id) for r in valid_renames}
    for rename in valid_renames:
        if not is_valid_identifier(rename.new_name):
            continue
        old_name = extract_symbol_name(rename.symbol_id)
        if rename.new_name in old_names and rename.new_name != old_name:
            warnings.append(
                f"Rename introduces potential confusion: '{rename.symbol_id}' renamed to "
                f"'{rename.new_name}' which was an original symbol name in this batch"
            )

    return BatchRenameValidation(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        rename_validations=rename_validations,
        conflicting_sets=conflicting_sets,
    )
