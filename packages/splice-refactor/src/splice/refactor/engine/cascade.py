import logging
import time
from typing import Dict, List, Sequence

from splice.analysis.graph.algorithms import (
    build_graph,
    kahn_order,
    traverse_with_cycles,
)
from splice.spec import (
    CascadeEntry,
    CascadeMetadata,
    HotReloadCascadeResult,
    HotReloadUpdate,
    InputValidationError,
    ReadFile,
    TextRange,
    TranspilerPatch,
    UpdateAction,
    has_capability,
)

from .context import RefactorContext
from .edit import WorkspaceEdit
from .identifiers import extract_symbol_name
from .queries import get_file_symbols, get_symbol_dependents

log = logging.getLogger(__name__)


def compute_hot_reload_cascade(
    ctx: RefactorContext, changed_symbol_ids: Sequence[str]
) -> HotReloadCascadeResult:
    """
    Computes everything that must be reloaded after `changed_symbol_ids` change.

    The changed symbols sit at distance 0. Dependents are discovered depth
    first, one analyzer query per symbol, each at its parent's distance + 1.
    `order` is a topological order of the discovered dependency edges;
    symbols caught in a cycle are appended after the ordered ones in
    discovery order.
    """
    if not isinstance(changed_symbol_ids, (list, tuple)):
        raise InputValidationError(
            "compute_hot_reload_cascade requires a list of symbol ids"
        )
    if not changed_symbol_ids:
        return HotReloadCascadeResult()

    cascade: Dict[str, CascadeEntry] = {}
    for symbol_id in changed_symbol_ids:
        cascade.setdefault(
            symbol_id, CascadeEntry(symbol_id=symbol_id, distance=0, reason="direct change")
        )

    file_paths: Dict[str, str] = {}

    def successors(symbol_id: str) -> List[str]:
        dependents = get_symbol_dependents(ctx, [symbol_id])
        for dep in dependents:
            if dep.file_path and dep.symbol_id not in file_paths:
                file_paths[dep.symbol_id] = dep.file_path
        return [dep.symbol_id for dep in dependents]

    def on_discover(parent: str, child: str) -> None:
        if child in cascade:
            return
        parent_entry = cascade[parent]
        parent_reason = "initial change" if parent_entry.distance == 0 else parent_entry.reason
        cascade[child] = CascadeEntry(
            symbol_id=child,
            distance=parent_entry.distance + 1,
            reason=f"depends on {extract_symbol_name(parent)} ({parent_reason})",
            file_path=file_paths.get(child),
        )

    traversal = traverse_with_cycles(list(cascade), successors, on_discover)

    graph = build_graph(cascade.keys(), traversal.edges)
    order, leftover = kahn_order(graph)
    order.extend(leftover)

    entries = list(cascade.values())
    return HotReloadCascadeResult(
        cascade=entries,
        order=order,
        circular=traversal.cycles,
        metadata=CascadeMetadata(
            total_symbols=len(entries),
            max_distance=max(e.distance for e in entries),
            has_circular=bool(traversal.cycles) or bool(leftover),
        ),
    )


def prepare_hot_reload_updates(
    ctx: RefactorContext, workspace: WorkspaceEdit
) -> List[HotReloadUpdate]:
    """
    Recompile updates for every symbol defined in an edited file, followed by
    notify updates for their transitive dependents.

    A file the analyzer knows no symbols for is recompiled as a whole under
    the id `file://<path>`.
    """
    updates: List[HotReloadUpdate] = []
    if not workspace:
        return updates

    by_symbol: Dict[str, HotReloadUpdate] = {}
    for path, edits in workspace.group_by_file().items():
        ranges = [TextRange(start=e.start, end=e.end) for e in edits]
        symbol_ids = [s.id for s in get_file_symbols(ctx, path)] or [f"file://{path}"]
        for symbol_id in symbol_ids:
            update = HotReloadUpdate(
                symbol_id=symbol_id,
                action=UpdateAction.RECOMPILE,
                file_path=path,
                affected_ranges=list(ranges),
            )
            updates.append(update)
            by_symbol[symbol_id] = update

    cascade = compute_hot_reload_cascade(ctx, list(by_symbol))
    for entry in cascade.cascade:
        if entry.symbol_id in by_symbol or not entry.file_path:
            continue
        update = HotReloadUpdate(
            symbol_id=entry.symbol_id,
            action=UpdateAction.NOTIFY,
            file_path=entry.file_path,
        )
        updates.append(update)
        by_symbol[entry.symbol_id] = update

    return updates


def generate_transpiler_patches(
    ctx: RefactorContext, updates: Sequence[HotReloadUpdate], read_file: ReadFile
) -> List[TranspilerPatch]:
    """
    Builds one patch descriptor per `recompile` update.

    Without a transpiler the patch is the raw script source. An update whose
    file cannot be read or transpiled is logged and skipped.
    """
    if not isinstance(updates, (list, tuple)):
        raise InputValidationError(
            "generate_transpiler_patches requires a list of hot reload updates"
        )
    if not callable(read_file):
        raise InputValidationError("generate_transpiler_patches requires a read_file function")

    patches: List[TranspilerPatch] = []
    can_transpile = has_capability(ctx.transpiler, "transpile_script")

    for update in updates:
        if update.action != UpdateAction.RECOMPILE:
            continue

        try:
            source_text = read_file(update.file_path)
            if can_transpile:
                patch = ctx.transpiler.transpile_script(
                    source_text=source_text, symbol_id=update.symbol_id
                )
            else:
                patch = {
                    "kind": "script",
                    "id": update.symbol_id,
                    "source_text": source_text,
                    "version": int(time.time() * 1000),
                }
        except Exception as e:
            log.warning(f"Failed to generate patch for {update.symbol_id}: {e}")
            continue

        patches.append(
            TranspilerPatch(symbol_id=update.symbol_id, patch=patch, file_path=update.file_path)
        )

    return patches
