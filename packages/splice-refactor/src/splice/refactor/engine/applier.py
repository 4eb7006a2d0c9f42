from typing import Dict, List, Optional

from splice.spec import (
    ApplicationError,
    InputValidationError,
    OverlapValidationError,
    ReadFile,
    ValidationSummary,
    WriteFile,
    has_capability,
)

from .context import RefactorContext
from .edit import WorkspaceEdit


def validate_rename(ctx: RefactorContext, workspace: WorkspaceEdit) -> ValidationSummary:
    """
    Structural checks on a planned edit.

    Overlapping edits within one file are errors. A file with more edits than
    `max_edits_per_file` only warns. The analyzer's `validate_edits` hook, when
    present, contributes its own errors and warnings; if the hook itself
    raises, that is downgraded to a warning.
    """
    errors: List[str] = []
    warnings: List[str] = []

    if not isinstance(workspace, WorkspaceEdit):
        return ValidationSummary(valid=False, errors=["Invalid workspace edit"])

    if not workspace:
        return ValidationSummary(
            valid=False, errors=["Workspace edit contains no changes"]
        )

    threshold = ctx.config.max_edits_per_file
    for path, edits in workspace.group_by_file().items():
        # Sorted by descending start: each edit must end before the previous one starts.
        for current, following in zip(edits, edits[1:]):
            if following.end > current.start:
                errors.append(
                    f"Overlapping edits detected in {path} at positions "
                    f"{current.start}-{following.end}"
                )

        if len(edits) > threshold:
            warnings.append(
                f"Large number of edits ({len(edits)}) planned for {path}. "
                "Consider reviewing the scope of this refactoring."
            )

    if has_capability(ctx.analyzer, "validate_edits"):
        try:
            deeper = ctx.analyzer.validate_edits(workspace)
        except Exception as e:
            warnings.append(
                f"Semantic validation failed: {e}. Proceeding with basic validation only."
            )
        else:
            if deeper is not None:
                errors.extend(deeper.errors or [])
                warnings.extend(deeper.warnings or [])

    return ValidationSummary(valid=not errors, errors=errors, warnings=warnings)


def apply_workspace_edit(
    ctx: RefactorContext,
    workspace: WorkspaceEdit,
    read_file: Optional[ReadFile] = None,
    write_file: Optional[WriteFile] = None,
    dry_run: bool = False,
) -> Dict[str, str]:
    """
    Applies a validated edit file by file and returns the new content per path.

    Each file is read once and patched from its tail towards its head. With
    `dry_run` nothing is written and `write_file` may be omitted; the returned
    mapping is identical either way.
    """
    if not isinstance(workspace, WorkspaceEdit):
        raise InputValidationError("apply_workspace_edit requires a WorkspaceEdit")
    if not callable(read_file):
        raise InputValidationError("apply_workspace_edit requires a read_file function")
    if not dry_run and not callable(write_file):
        raise InputValidationError(
            "apply_workspace_edit requires a write_file function when not in dry-run mode"
        )

    validation = validate_rename(ctx, workspace)
    if not validation.valid:
        raise OverlapValidationError(validation.errors)

    results: Dict[str, str] = {}
    written: List[str] = []

    for path, edits in workspace.group_by_file().items():
        try:
            content = read_file(path)
        except Exception as e:
            raise ApplicationError(path, f"read failed: {e}", written) from e

        for edit in edits:
            content = content[: edit.start] + edit.new_text + content[edit.end :]
        results[path] = content

        if not dry_run:
            try:
                write_file(path, content)
            except Exception as e:
                raise ApplicationError(path, f"write failed: {e}", written) from e
            written.append(path)

    return results
