# This must be the very first line to allow this package to coexist with other
# namespace packages in editable installs.
__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .errors import (
    RefactorError,
    InputValidationError,
    IdentifierGrammarError,
    SymbolNotFoundError,
    NoOpRenameError,
    ConflictError,
    OverlapValidationError,
    BatchCollisionError,
    CircularRenameError,
    ApplicationError,
    ConfigError,
    IndexLoadError,
)
from .models import (
    OccurrenceKind,
    SymbolKind,
    parse_symbol_kind,
    ConflictType,
    UpdateAction,
    TextRange,
    SymbolOccurrence,
    TextEdit,
    RenameRequest,
    Conflict,
    SymbolBinding,
    FileSymbol,
    DependentSymbol,
    SymbolLocation,
    AstNode,
    CascadeEntry,
    CascadeMetadata,
    HotReloadCascadeResult,
    HotReloadUpdate,
    HotReloadSafetySummary,
    TranspilerPatch,
    ValidationSummary,
    BatchRenameValidation,
    RenameImpactSummary,
    RenameImpactAnalysis,
)
from .protocols import (
    ReadFile,
    WriteFile,
    ParserProtocol,
    SemanticAnalyzerProtocol,
    TranspilerProtocol,
    has_capability,
)

__all__ = [
    "RefactorError",
    "InputValidationError",
    "IdentifierGrammarError",
    "SymbolNotFoundError",
    "NoOpRenameError",
    "ConflictError",
    "OverlapValidationError",
    "BatchCollisionError",
    "CircularRenameError",
    "ApplicationError",
    "ConfigError",
    "IndexLoadError",
    "OccurrenceKind",
    "SymbolKind",
    "parse_symbol_kind",
    "ConflictType",
    "UpdateAction",
    "TextRange",
    "SymbolOccurrence",
    "TextEdit",
    "RenameRequest",
    "Conflict",
    "SymbolBinding",
    "FileSymbol",
    "DependentSymbol",
    "SymbolLocation",
    "AstNode",
    "CascadeEntry",
    "CascadeMetadata",
    "HotReloadCascadeResult",
    "HotReloadUpdate",
    "HotReloadSafetySummary",
    "TranspilerPatch",
    "ValidationSummary",
    "BatchRenameValidation",
    "RenameImpactSummary",
    "RenameImpactAnalysis",
    "ReadFile",
    "WriteFile",
    "ParserProtocol",
    "SemanticAnalyzerProtocol",
    "TranspilerProtocol",
    "has_capability",
]
