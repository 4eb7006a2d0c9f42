import re
from typing import Any, Dict, List

from splice.spec import (
    Conflict,
    ConflictType,
    OccurrenceKind,
    ReadFile,
    RenameImpactAnalysis,
    RenameImpactSummary,
    ValidationSummary,
    has_capability,
)

from .conflicts import analyzer_reserved_keywords, detect_rename_conflicts
from .context import RefactorContext
from .edit import WorkspaceEdit
from .identifiers import (
    assert_valid_identifier_name,
    build_reserved_set,
    extract_symbol_name,
)
from .planner import unpack_request
from .queries import (
    gather_symbol_occurrences,
    get_symbol_dependents,
    validate_symbol_exists,
)


def analyze_rename_impact(ctx: RefactorContext, request: Any) -> RenameImpactAnalysis:
    """
    Previews a rename without planning any edit.

    Malformed requests raise like `plan_rename`. Anything the analyzer raises
    while gathering data is reported as an `analysis_error` conflict instead.
    """
    symbol_id, new_name = unpack_request(request, "analyze_rename_impact")
    name = assert_valid_identifier_name(new_name)

    summary = RenameImpactSummary(
        symbol_id=symbol_id, old_name=extract_symbol_name(symbol_id), new_name=name
    )
    conflicts: List[Conflict] = []
    warnings: List[Conflict] = []
    affected: Dict[str, None] = {}
    dependents: Dict[str, None] = {}

    try:
        if not validate_symbol_exists(ctx, symbol_id):
            conflicts.append(
                Conflict(
                    type=ConflictType.MISSING_SYMBOL,
                    message=f"Symbol '{symbol_id}' not found in semantic index",
                    severity="error",
                )
            )
            return RenameImpactAnalysis(valid=False, summary=summary, conflicts=conflicts)

        occurrences = gather_symbol_occurrences(ctx, summary.old_name)
        summary.total_occurrences = len(occurrences)
        for occurrence in occurrences:
            affected.setdefault(occurrence.path, None)
            if occurrence.kind == OccurrenceKind.DEFINITION:
                summary.definition_count += 1
            else:
                summary.reference_count += 1

        conflicts.extend(
            detect_rename_conflicts(
                summary.old_name,
                name,
                occurrences,
                ctx.analyzer,
                extra_reserved=ctx.config.reserved_keywords,
            )
        )

        if occurrences:
            summary.hot_reload_required = True
            for dep in get_symbol_dependents(ctx, [symbol_id]):
                dependents.setdefault(dep.symbol_id, None)

        if summary.total_occurrences > ctx.config.large_rename_threshold:
            warnings.append(
                Conflict(
                    type=ConflictType.LARGE_RENAME,
                    message=(
                        f"This rename will affect {summary.total_occurrences} occurrences "
                        f"across {len(affected)} files"
                    ),
                    severity="warning",
                )
            )

        if len(dependents) > ctx.config.many_dependents_threshold:
            warnings.append(
                Conflict(
                    type=ConflictType.MANY_DEPENDENTS,
                    message=f"{len(dependents)} other symbols depend on this symbol",
                    severity="info",
                )
            )
    except Exception as e:
        conflicts.append(
            Conflict(
                type=ConflictType.ANALYSIS_ERROR,
                message=f"Failed to analyze impact: {e}",
                severity="error",
            )
        )
    finally:
        summary.affected_files = list(affected)
        summary.dependent_symbols = list(dependents)

    return RenameImpactAnalysis(
        valid=not conflicts, summary=summary, conflicts=conflicts, warnings=warnings
    )


def _word_pattern(name: str) -> "re.Pattern[str]":
    return re.compile(rf"\b{re.escape(name)}\b")


def _only_in_comments(content: str, pattern: "re.Pattern[str]") -> bool:
    # Line-based heuristic; block comments are detected by their markers only.
    for line in content.split("\n"):
        if "/*" in line or "*/" in line:
            continue
        comment_index = line.find("//")
        for match in pattern.finditer(line):
            if comment_index == -1 or match.start() < comment_index:
                return False
    return True


def verify_post_edit_integrity(
    ctx: RefactorContext,
    symbol_id: str,
    old_name: str,
    new_name: str,
    workspace: WorkspaceEdit,
    read_file: ReadFile,
) -> ValidationSummary:
    """
    Double-checks files after a rename has been written.

    Per touched file: the old name must be gone outside comments and the new
    name must be present. Then, when the collaborators allow it, looks for
    the new name in untouched files, re-checks reserved words and re-parses
    every touched file.
    """
    errors: List[str] = []
    warnings: List[str] = []

    for label, value in (
        ("symbol_id", symbol_id),
        ("old_name", old_name),
        ("new_name", new_name),
    ):
        if not isinstance(value, str) or not value.strip():
            return ValidationSummary(valid=False, errors=[f"Invalid {label}"])
    if not isinstance(workspace, WorkspaceEdit):
        return ValidationSummary(valid=False, errors=["Invalid workspace edit"])
    if not callable(read_file):
        return ValidationSummary(valid=False, errors=["Invalid read_file function"])

    affected_files = list(workspace.group_by_file())
    old_pattern = _word_pattern(old_name)
    new_pattern = _word_pattern(new_name)

    for path in affected_files:
        try:
            content = read_file(path)
        except Exception as e:
            errors.append(f"Failed to read {path} for post-edit validation: {e}")
            continue

        if old_pattern.search(content):
            if _only_in_comments(content, old_pattern):
                warnings.append(
                    f"Old name '{old_name}' still appears in comments in {path} "
                    "- may need manual update"
                )
            else:
                errors.append(
                    f"Old name '{old_name}' still exists in {path} after rename "
                    "- edits may be incomplete"
                )

        if not new_pattern.search(content):
            warnings.append(
                f"New name '{new_name}' does not appear in {path} - verify edits were applied"
            )

    analyzer = ctx.analyzer
    if has_capability(analyzer, "get_symbol_occurrences"):
        try:
            stray_paths: Dict[str, None] = {}
            for occurrence in analyzer.get_symbol_occurrences(new_name) or []:
                if occurrence.path not in affected_files:
                    stray_paths.setdefault(occurrence.path, None)
        except Exception as e:
            warnings.append(f"Could not verify occurrences of new name: {e}")
        else:
            if stray_paths:
                warnings.append(
                    f"New name '{new_name}' already exists in {len(stray_paths)} other "
                    f"file(s): {', '.join(stray_paths)} - verify no shadowing occurred"
                )

    try:
        reserved = build_reserved_set(
            analyzer_reserved_keywords(analyzer), ctx.config.reserved_keywords
        )
    except Exception as e:
        warnings.append(f"Could not verify reserved keywords: {e}")
    else:
        if new_name.lower() in reserved:
            errors.append(f"New name '{new_name}' conflicts with reserved keyword")

    if has_capability(ctx.parser, "parse"):
        for path in affected_files:
            try:
                ctx.parser.parse(path)
            except Exception as e:
                errors.append(
                    f"Parse error in {path} after rename: {e} - edits may have broken syntax"
                )

    if analyzer is None:
        warnings.append("No semantic analyzer available - skipping deep semantic validation")

    return ValidationSummary(valid=not errors, errors=errors, warnings=warnings)
