from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .errors import InputValidationError


class OccurrenceKind(str, Enum):
    DEFINITION = "definition"
    REFERENCE = "reference"


class SymbolKind(str, Enum):
    SCRIPT = "script"
    VAR = "var"
    EVENT = "event"
    MACRO = "macro"
    ENUM = "enum"


def parse_symbol_kind(raw: Optional[str]) -> Optional[SymbolKind]:
    try:
        return SymbolKind(raw)
    except ValueError:
        return None


class ConflictType(str, Enum):
    INVALID_IDENTIFIER = "invalid_identifier"
    SHADOW = "shadow"
    RESERVED = "reserved"
    MISSING_SYMBOL = "missing_symbol"
    LARGE_RENAME = "large_rename"
    MANY_DEPENDENTS = "many_dependents"
    ANALYSIS_ERROR = "analysis_error"

    @property
    def is_blocking(self) -> bool:
        # Only shadowing and reserved words stop a rename; the rest is advisory.
        return self in (ConflictType.SHADOW, ConflictType.RESERVED)


class UpdateAction(str, Enum):
    RECOMPILE = "recompile"
    NOTIFY = "notify"


@dataclass(frozen=True)
class TextRange:
    start: int
    end: int


@dataclass(frozen=True)
class SymbolOccurrence:
    """
    One source span where a symbol is defined or referenced.
    """

    path: str
    start: int
    end: int
    scope_id: Optional[str] = None
    kind: OccurrenceKind = OccurrenceKind.REFERENCE


@dataclass(frozen=True)
class TextEdit:
    path: str
    start: int
    end: int
    new_text: str

    def __post_init__(self):
        if self.start < 0 or self.end < 0:
            raise InputValidationError(
                f"Edit offsets must be non-negative, got {self.start}-{self.end}"
            )
        if self.start > self.end:
            raise InputValidationError(
                f"Edit start {self.start} is after its end {self.end} in {self.path}"
            )


@dataclass(frozen=True)
class RenameRequest:
    symbol_id: str
    new_name: str


@dataclass
class Conflict:
    type: ConflictType
    message: str
    severity: Optional[str] = None
    path: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)


# --- Collaborator records ---


@dataclass(frozen=True)
class SymbolBinding:
    name: str
    symbol_id: Optional[str] = None


@dataclass(frozen=True)
class FileSymbol:
    id: str


@dataclass(frozen=True)
class DependentSymbol:
    symbol_id: str
    file_path: Optional[str] = None


@dataclass(frozen=True)
class SymbolLocation:
    symbol_id: str
    name: str
    range: TextRange


@dataclass
class AstNode:
    start: int
    end: int
    type: Optional[str] = None
    name: Optional[str] = None
    children: List["AstNode"] = field(default_factory=list)


# --- Hot reload ---


@dataclass
class CascadeEntry:
    symbol_id: str
    distance: int
    reason: str
    file_path: Optional[str] = None


@dataclass
class CascadeMetadata:
    total_symbols: int = 0
    max_distance: int = 0
    has_circular: bool = False


@dataclass
class HotReloadCascadeResult:
    cascade: List[CascadeEntry] = field(default_factory=list)
    order: List[str] = field(default_factory=list)
    circular: List[List[str]] = field(default_factory=list)
    metadata: CascadeMetadata = field(default_factory=CascadeMetadata)


@dataclass
class HotReloadUpdate:
    symbol_id: str
    action: UpdateAction
    file_path: str
    affected_ranges: List[TextRange] = field(default_factory=list)


@dataclass
class HotReloadSafetySummary:
    safe: bool
    reason: str
    requires_restart: bool
    can_auto_fix: bool
    suggestions: List[str] = field(default_factory=list)


@dataclass
class TranspilerPatch:
    symbol_id: str
    patch: Dict[str, Any]
    file_path: str


# --- Validation and analysis summaries ---


@dataclass
class ValidationSummary:
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    symbol_name: Optional[str] = None
    occurrence_count: Optional[int] = None
    hot_reload: Optional[HotReloadSafetySummary] = None


@dataclass
class BatchRenameValidation:
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    rename_validations: Dict[str, ValidationSummary] = field(default_factory=dict)
    conflicting_sets: List[List[str]] = field(default_factory=list)


@dataclass
class RenameImpactSummary:
    symbol_id: str
    old_name: str
    new_name: str
    affected_files: List[str] = field(default_factory=list)
    total_occurrences: int = 0
    definition_count: int = 0
    reference_count: int = 0
    hot_reload_required: bool = False
    dependent_symbols: List[str] = field(default_factory=list)


@dataclass
class RenameImpactAnalysis:
    valid: bool
    summary: RenameImpactSummary
    conflicts: List[Conflict] = field(default_factory=list)
    warnings: List[Conflict] = field(default_factory=list)
