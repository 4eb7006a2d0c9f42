from .context import RefactorContext
from .core import (
    BatchRenamePlanSummary,
    ExecuteRenameResult,
    RefactorEngine,
    RenamePlanSummary,
    create_refactor_engine,
)
from .edit import WorkspaceEdit
from .identifiers import (
    DEFAULT_RESERVED_KEYWORDS,
    assert_valid_identifier_name,
    extract_symbol_kind,
    extract_symbol_name,
    is_valid_identifier,
)
from .occurrences import classify_occurrences, group_occurrences_by_file
from .preview import (
    format_batch_rename_report,
    format_occurrence_preview,
    format_rename_report,
    generate_rename_preview,
)

__all__ = [
    "RefactorContext",
    "RefactorEngine",
    "create_refactor_engine",
    "RenamePlanSummary",
    "BatchRenamePlanSummary",
    "ExecuteRenameResult",
    "WorkspaceEdit",
    "DEFAULT_RESERVED_KEYWORDS",
    "assert_valid_identifier_name",
    "extract_symbol_kind",
    "extract_symbol_name",
    "is_valid_identifier",
    "classify_occurrences",
    "group_occurrences_by_file",
    "format_rename_report",
    "format_batch_rename_report",
    "format_occurrence_preview",
    "generate_rename_preview",
]
