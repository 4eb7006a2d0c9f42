"""
Plain-text renderings of rename plans for terminals and reviews.

Reports are line oriented and use ASCII markers only: `x` for errors,
`!` for warnings, `*` for suggestions.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from splice.spec import InputValidationError, SymbolOccurrence

from .core import BatchRenamePlanSummary, RenamePlanSummary
from .edit import WorkspaceEdit
from .identifiers import extract_symbol_name
from .occurrences import group_occurrences_by_file


@dataclass
class EditPreview:
    start: int
    end: int
    old_text: str
    new_text: str


@dataclass
class FilePreview:
    path: str
    edit_count: int
    edits: List[EditPreview] = field(default_factory=list)


@dataclass
class PreviewSummary:
    total_edits: int
    affected_files: int
    old_name: str
    new_name: str


@dataclass
class RenamePreview:
    summary: PreviewSummary
    files: List[FilePreview] = field(default_factory=list)


def _require_name(value: str, label: str, operation: str) -> None:
    if not isinstance(value, str) or not value:
        raise InputValidationError(f"{operation} requires a non-empty {label} string")


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def _plural(count: int, word: str) -> str:
    return word if count == 1 else f"{word}s"


def _title(text: str) -> List[str]:
    return [text, "=" * len(text), ""]


def _append_errors_and_warnings(
    lines: List[str], errors: Sequence[str], warnings: Sequence[str]
) -> None:
    if errors:
        lines.append("  Errors:")
        lines.extend(f"    x {e}" for e in errors)
    if warnings:
        lines.append("  Warnings:")
        lines.extend(f"    ! {w}" for w in warnings)


def _append_workspace_changes(lines: List[str], workspace: WorkspaceEdit) -> None:
    lines.extend(
        [
            "Workspace Changes:",
            f"  Total Edits: {len(workspace)}",
            f"  Files Modified: {len(workspace.group_by_file())}",
            "",
        ]
    )


def generate_rename_preview(
    workspace: WorkspaceEdit, old_name: str, new_name: str
) -> RenamePreview:
    if not isinstance(workspace, WorkspaceEdit):
        raise InputValidationError("generate_rename_preview requires a WorkspaceEdit")
    _require_name(old_name, "old_name", "generate_rename_preview")
    _require_name(new_name, "new_name", "generate_rename_preview")

    grouped = workspace.group_by_file()
    files = [
        FilePreview(
            path=path,
            edit_count=len(edits),
            edits=[
                EditPreview(start=e.start, end=e.end, old_text=old_name, new_text=e.new_text)
                for e in edits
            ],
        )
        for path, edits in grouped.items()
    ]
    return RenamePreview(
        summary=PreviewSummary(
            total_edits=len(workspace),
            affected_files=len(grouped),
            old_name=old_name,
            new_name=new_name,
        ),
        files=files,
    )


def format_rename_report(plan: RenamePlanSummary) -> str:
    summary = plan.analysis.summary
    lines = _title("Rename Plan Report")
    lines.extend(
        [
            f"Symbol: {summary.old_name} -> {summary.new_name}",
            f"Status: {'VALID' if plan.validation.valid else 'INVALID'}",
            "",
        ]
    )

    if not plan.validation.valid:
        lines.append("Validation Errors:")
        lines.extend(f"  x {e}" for e in plan.validation.errors)
        lines.append("")

    if plan.validation.warnings:
        lines.append("Validation Warnings:")
        lines.extend(f"  ! {w}" for w in plan.validation.warnings)
        lines.append("")

    lines.extend(
        [
            "Impact Summary:",
            f"  Total Occurrences: {summary.total_occurrences}",
            f"  Definitions: {summary.definition_count}",
            f"  References: {summary.reference_count}",
            f"  Affected Files: {len(summary.affected_files)}",
            f"  Hot Reload Required: {_yes_no(summary.hot_reload_required)}",
            f"  Dependent Symbols: {len(summary.dependent_symbols)}",
            "",
        ]
    )

    if plan.analysis.conflicts:
        lines.append("Conflicts:")
        for conflict in plan.analysis.conflicts:
            lines.append(f"  x [{conflict.type.value}] {conflict.message}")
            if conflict.path:
                lines.append(f"    in {conflict.path}")
        lines.append("")

    if plan.analysis.warnings:
        lines.append("Analysis Warnings:")
        lines.extend(
            f"  ! [{w.type.value}] {w.message}" for w in plan.analysis.warnings
        )
        lines.append("")

    _append_workspace_changes(lines, plan.workspace)

    if plan.hot_reload is not None:
        lines.append(f"Hot Reload Status: {'SAFE' if plan.hot_reload.valid else 'UNSAFE'}")
        safety = plan.hot_reload.hot_reload
        if safety is not None:
            lines.extend(
                [
                    f"  Reason: {safety.reason}",
                    f"  Requires Restart: {_yes_no(safety.requires_restart)}",
                    f"  Can Auto-Fix: {_yes_no(safety.can_auto_fix)}",
                ]
            )
            if safety.suggestions:
                lines.append("  Suggestions:")
                lines.extend(f"    * {s}" for s in safety.suggestions)
        _append_errors_and_warnings(
            lines, plan.hot_reload.errors, plan.hot_reload.warnings
        )

    return "\n".join(lines)


def format_batch_rename_report(plan: BatchRenamePlanSummary) -> str:
    batch = plan.batch_validation
    lines = _title("Batch Rename Plan Report")
    lines.extend(
        [
            f"Status: {'VALID' if batch.valid else 'INVALID'}",
            f"Total Renames: {len(plan.impact_analyses)}",
            "",
        ]
    )

    if not batch.valid:
        lines.append("Batch Validation Errors:")
        lines.extend(f"  x {e}" for e in batch.errors)
        lines.append("")

    if batch.warnings:
        lines.append("Batch Validation Warnings:")
        lines.extend(f"  ! {w}" for w in batch.warnings)
        lines.append("")

    if batch.conflicting_sets:
        lines.append("Conflicting Symbol Sets:")
        lines.extend(f"  x {', '.join(s)}" for s in batch.conflicting_sets)
        lines.append("")

    lines.append("Per-Symbol Impact:")
    for symbol_id, analysis in plan.impact_analyses.items():
        summary = analysis.summary
        lines.extend(
            [
                f"  {summary.old_name} -> {summary.new_name} ({symbol_id})",
                f"    Occurrences: {summary.total_occurrences} "
                f"({summary.definition_count} def, {summary.reference_count} ref)",
                f"    Affected Files: {len(summary.affected_files)}",
                f"    Dependent Symbols: {len(summary.dependent_symbols)}",
            ]
        )
        if analysis.conflicts:
            lines.append(f"    Conflicts: {len(analysis.conflicts)}")
            lines.extend(
                f"      x [{c.type.value}] {c.message}" for c in analysis.conflicts
            )
        if analysis.warnings:
            lines.append(f"    Warnings: {len(analysis.warnings)}")
            lines.extend(
                f"      ! [{w.type.value}] {w.message}" for w in analysis.warnings
            )
        lines.append("")

    _append_workspace_changes(lines, plan.workspace)

    cascade = plan.cascade
    if cascade is not None:
        lines.extend(
            [
                "Hot Reload Dependency Cascade:",
                f"  Total Symbols to Reload: {cascade.metadata.total_symbols}",
                f"  Max Dependency Distance: {cascade.metadata.max_distance}",
                f"  Has Circular Dependencies: {_yes_no(cascade.metadata.has_circular)}",
            ]
        )
        if cascade.circular:
            lines.append("  Circular Dependency Chains:")
            for cycle in cascade.circular:
                chain = " -> ".join(extract_symbol_name(s) for s in cycle)
                lines.append(f"    ! {chain}")
        lines.extend([f"  Reload Order: {len(cascade.order)} symbols", ""])

    if plan.hot_reload is not None:
        lines.append(f"Hot Reload Status: {'SAFE' if plan.hot_reload.valid else 'UNSAFE'}")
        _append_errors_and_warnings(
            lines, plan.hot_reload.errors, plan.hot_reload.warnings
        )

    return "\n".join(lines)


def format_occurrence_preview(
    occurrences: Sequence[SymbolOccurrence], old_name: str, new_name: str
) -> str:
    _require_name(old_name, "old_name", "format_occurrence_preview")
    _require_name(new_name, "new_name", "format_occurrence_preview")
    grouped = group_occurrences_by_file(occurrences)

    lines = [
        f"Symbol Occurrences: {old_name} -> {new_name}",
        f"Total: {len(occurrences)} {_plural(len(occurrences), 'occurrence')} "
        f"in {len(grouped)} {_plural(len(grouped), 'file')}",
        "",
    ]
    for path, file_occurrences in grouped.items():
        count = len(file_occurrences)
        lines.append(f"{path} ({count} {_plural(count, 'occurrence')}):")
        for occurrence in file_occurrences:
            kind = getattr(occurrence.kind, "value", occurrence.kind)
            lines.append(f"  [{kind}] Position {occurrence.start}-{occurrence.end}")
        lines.append("")

    return "\n".join(lines)
