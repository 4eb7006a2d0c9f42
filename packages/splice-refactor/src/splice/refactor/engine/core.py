from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from splice.config import SpliceConfig
from splice.spec import (
    BatchRenameValidation,
    Conflict,
    ConflictType,
    HotReloadCascadeResult,
    HotReloadSafetySummary,
    HotReloadUpdate,
    OverlapValidationError,
    ParserProtocol,
    ReadFile,
    RenameImpactAnalysis,
    RenameImpactSummary,
    SemanticAnalyzerProtocol,
    SymbolLocation,
    SymbolOccurrence,
    TranspilerPatch,
    TranspilerProtocol,
    ValidationSummary,
    WriteFile,
)

from .applier import apply_workspace_edit, validate_rename
from .batch import (
    detect_circular_renames,
    plan_batch_rename,
    validate_batch_rename_request,
)
from .cascade import (
    compute_hot_reload_cascade,
    generate_transpiler_patches,
    prepare_hot_reload_updates,
)
from .conflicts import detect_rename_conflicts, validate_cross_file_consistency
from .context import RefactorContext
from .edit import WorkspaceEdit
from .identifiers import extract_symbol_name
from .impact import analyze_rename_impact, verify_post_edit_integrity
from .planner import plan_rename, validate_rename_request
from .queries import (
    find_symbol_at_location,
    gather_symbol_occurrences,
    get_file_symbols,
    get_symbol_dependents,
    validate_symbol_exists,
)
from .safety import check_hot_reload_safety, validate_hot_reload_compatibility


@dataclass
class RenamePlanSummary:
    workspace: WorkspaceEdit
    validation: ValidationSummary
    analysis: RenameImpactAnalysis
    # Compatibility scan of the edit; its `hot_reload` field carries the
    # symbol-level safety verdict.
    hot_reload: Optional[ValidationSummary] = None


@dataclass
class BatchRenamePlanSummary:
    workspace: WorkspaceEdit
    validation: ValidationSummary
    batch_validation: BatchRenameValidation
    impact_analyses: Dict[str, RenameImpactAnalysis] = field(default_factory=dict)
    hot_reload: Optional[ValidationSummary] = None
    cascade: Optional[HotReloadCascadeResult] = None


@dataclass
class ExecuteRenameResult:
    workspace: WorkspaceEdit
    applied: Dict[str, str]
    hot_reload_updates: List[HotReloadUpdate] = field(default_factory=list)


class RefactorEngine:
    """
    Facade over the rename and hot-reload operations.

    The engine owns nothing but its collaborators and configuration; every
    method delegates to a module-level operation with the shared context.
    """

    def __init__(
        self,
        parser: Optional[ParserProtocol] = None,
        analyzer: Optional[SemanticAnalyzerProtocol] = None,
        transpiler: Optional[TranspilerProtocol] = None,
        config: Optional[SpliceConfig] = None,
    ):
        self.ctx = RefactorContext(
            parser=parser,
            analyzer=analyzer,
            transpiler=transpiler,
            config=config or SpliceConfig(),
        )

    @property
    def parser(self) -> Optional[ParserProtocol]:
        return self.ctx.parser

    @property
    def analyzer(self) -> Optional[SemanticAnalyzerProtocol]:
        return self.ctx.analyzer

    @property
    def transpiler(self) -> Optional[TranspilerProtocol]:
        return self.ctx.transpiler

    @property
    def config(self) -> SpliceConfig:
        return self.ctx.config

    # --- Queries ---

    def validate_symbol_exists(self, symbol_id: str) -> bool:
        return validate_symbol_exists(self.ctx, symbol_id)

    def gather_symbol_occurrences(self, symbol_name: str) -> List[SymbolOccurrence]:
        return gather_symbol_occurrences(self.ctx, symbol_name)

    def get_file_symbols(self, path: str):
        return get_file_symbols(self.ctx, path)

    def get_symbol_dependents(self, symbol_ids: List[str]):
        return get_symbol_dependents(self.ctx, symbol_ids)

    def find_symbol_at_location(self, path: str, offset: int) -> Optional[SymbolLocation]:
        return find_symbol_at_location(self.ctx, path, offset)

    # --- Conflicts & validation ---

    def detect_rename_conflicts(
        self, old_name: str, new_name: str, occurrences: Sequence[SymbolOccurrence]
    ) -> List[Conflict]:
        return detect_rename_conflicts(
            old_name,
            new_name,
            occurrences,
            self.ctx.analyzer,
            extra_reserved=self.ctx.config.reserved_keywords,
        )

    def validate_cross_file_consistency(
        self, symbol_id: str, new_name: str, occurrences: Sequence[SymbolOccurrence]
    ) -> List[Conflict]:
        return validate_cross_file_consistency(
            symbol_id, new_name, occurrences, self.ctx.analyzer
        )

    def validate_rename_request(
        self, request: Any, include_hot_reload: bool = False
    ) -> ValidationSummary:
        return validate_rename_request(self.ctx, request, include_hot_reload)

    def validate_batch_rename_request(
        self, renames: Sequence[Any], include_hot_reload: bool = False
    ) -> BatchRenameValidation:
        return validate_batch_rename_request(self.ctx, renames, include_hot_reload)

    def validate_rename(self, workspace: WorkspaceEdit) -> ValidationSummary:
        return validate_rename(self.ctx, workspace)

    def detect_circular_renames(self, renames: Sequence[Any]) -> List[str]:
        return detect_circular_renames(renames)

    # --- Planning & application ---

    def plan_rename(self, request: Any) -> WorkspaceEdit:
        return plan_rename(self.ctx, request)

    def plan_batch_rename(self, renames: Sequence[Any]) -> WorkspaceEdit:
        return plan_batch_rename(self.ctx, renames)

    def apply_workspace_edit(
        self,
        workspace: WorkspaceEdit,
        read_file: Optional[ReadFile] = None,
        write_file: Optional[WriteFile] = None,
        dry_run: bool = False,
    ) -> Dict[str, str]:
        return apply_workspace_edit(
            self.ctx, workspace, read_file=read_file, write_file=write_file, dry_run=dry_run
        )

    # --- Hot reload ---

    def check_hot_reload_safety(self, request: Any) -> HotReloadSafetySummary:
        return check_hot_reload_safety(self.ctx, request)

    def validate_hot_reload_compatibility(
        self, workspace: WorkspaceEdit, check_transpiler: bool = False
    ) -> ValidationSummary:
        return validate_hot_reload_compatibility(self.ctx, workspace, check_transpiler)

    def compute_hot_reload_cascade(
        self, changed_symbol_ids: Sequence[str]
    ) -> HotReloadCascadeResult:
        return compute_hot_reload_cascade(self.ctx, changed_symbol_ids)

    def prepare_hot_reload_updates(self, workspace: WorkspaceEdit) -> List[HotReloadUpdate]:
        return prepare_hot_reload_updates(self.ctx, workspace)

    def generate_transpiler_patches(
        self, updates: Sequence[HotReloadUpdate], read_file: ReadFile
    ) -> List[TranspilerPatch]:
        return generate_transpiler_patches(self.ctx, updates, read_file)

    # --- Impact ---

    def analyze_rename_impact(self, request: Any) -> RenameImpactAnalysis:
        return analyze_rename_impact(self.ctx, request)

    def verify_post_edit_integrity(
        self,
        symbol_id: str,
        old_name: str,
        new_name: str,
        workspace: WorkspaceEdit,
        read_file: ReadFile,
    ) -> ValidationSummary:
        return verify_post_edit_integrity(
            self.ctx, symbol_id, old_name, new_name, workspace, read_file
        )

    # --- Composite flows ---

    def _hot_reload_summary(
        self, workspace: WorkspaceEdit, safety: HotReloadSafetySummary
    ) -> ValidationSummary:
        compatibility = validate_hot_reload_compatibility(
            self.ctx, workspace, check_transpiler=True
        )
        compatibility.hot_reload = safety
        if not safety.safe:
            compatibility.warnings.append(f"Hot reload safety: {safety.reason}")
        return compatibility

    def prepare_rename_plan(
        self, request: Any, validate_hot_reload: bool = False
    ) -> RenamePlanSummary:
        """
        Plans a rename and bundles everything a caller needs to review it.

        Planning errors propagate. Validation, hot reload checks and impact
        analysis never raise for a plannable request.
        """
        workspace = plan_rename(self.ctx, request)
        validation = validate_rename(self.ctx, workspace)

        hot_reload = None
        if validate_hot_reload:
            hot_reload = self._hot_reload_summary(
                workspace, check_hot_reload_safety(self.ctx, request)
            )

        analysis = analyze_rename_impact(self.ctx, request)
        return RenamePlanSummary(
            workspace=workspace,
            validation=validation,
            analysis=analysis,
            hot_reload=hot_reload,
        )

    def prepare_batch_rename_plan(
        self, renames: Sequence[Any], validate_hot_reload: bool = False
    ) -> BatchRenamePlanSummary:
        """
        Validates and plans a batch without raising for planning failures.

        A batch that cannot be planned yields an empty workspace and an
        invalid `validation` carrying the reason. The cascade is only
        computed for a successfully planned batch.
        """
        batch_validation = validate_batch_rename_request(
            self.ctx, renames, validate_hot_reload
        )

        planned = True
        try:
            workspace = plan_batch_rename(self.ctx, renames)
        except Exception as e:
            planned = False
            workspace = WorkspaceEdit()
            validation = ValidationSummary(valid=False, errors=[f"Planning failed: {e}"])
            hot_reload = None
            if validate_hot_reload:
                hot_reload = ValidationSummary(
                    valid=False, errors=[f"Cannot validate hot reload: {e}"]
                )
        else:
            validation = validate_rename(self.ctx, workspace)
            hot_reload = None
            if validate_hot_reload:
                hot_reload = validate_hot_reload_compatibility(
                    self.ctx, workspace, check_transpiler=True
                )

        impact_analyses: Dict[str, RenameImpactAnalysis] = {}
        for rename in renames if isinstance(renames, (list, tuple)) else []:
            symbol_id = getattr(rename, "symbol_id", None)
            if not isinstance(symbol_id, str):
                continue
            try:
                impact_analyses[symbol_id] = analyze_rename_impact(self.ctx, rename)
            except Exception as e:
                new_name = getattr(rename, "new_name", None)
                impact_analyses[symbol_id] = RenameImpactAnalysis(
                    valid=False,
                    summary=RenameImpactSummary(
                        symbol_id=symbol_id,
                        old_name=extract_symbol_name(symbol_id),
                        new_name=new_name if isinstance(new_name, str) else "",
                    ),
                    conflicts=[
                        Conflict(
                            type=ConflictType.ANALYSIS_ERROR,
                            message=f"Failed to analyze {symbol_id}: {e}",
                            severity="error",
                        )
                    ],
                )

        cascade = None
        if validate_hot_reload and planned:
            try:
                cascade = compute_hot_reload_cascade(self.ctx, list(impact_analyses))
            except Exception as e:
                if hot_reload is not None:
                    hot_reload.warnings.append(
                        f"Failed to compute hot reload cascade: {e}"
                    )

        return BatchRenamePlanSummary(
            workspace=workspace,
            validation=validation,
            batch_validation=batch_validation,
            impact_analyses=impact_analyses,
            hot_reload=hot_reload,
            cascade=cascade,
        )

    def _execute(
        self,
        workspace: WorkspaceEdit,
        read_file: ReadFile,
        write_file: WriteFile,
        prepare_hot_reload: bool,
    ) -> ExecuteRenameResult:
        validation = validate_rename(self.ctx, workspace)
        if not validation.valid:
            raise OverlapValidationError(validation.errors)

        applied = apply_workspace_edit(
            self.ctx, workspace, read_file=read_file, write_file=write_file
        )
        updates: List[HotReloadUpdate] = []
        if prepare_hot_reload:
            updates = prepare_hot_reload_updates(self.ctx, workspace)
        return ExecuteRenameResult(
            workspace=workspace, applied=applied, hot_reload_updates=updates
        )

    def execute_rename(
        self,
        request: Any,
        read_file: ReadFile,
        write_file: WriteFile,
        prepare_hot_reload: bool = False,
    ) -> ExecuteRenameResult:
        """Plan, validate, write and optionally prepare hot reload updates."""
        workspace = plan_rename(self.ctx, request)
        return self._execute(workspace, read_file, write_file, prepare_hot_reload)

    def execute_batch_rename(
        self,
        renames: Sequence[Any],
        read_file: ReadFile,
        write_file: WriteFile,
        prepare_hot_reload: bool = False,
    ) -> ExecuteRenameResult:
        workspace = plan_batch_rename(self.ctx, renames)
        return self._execute(workspace, read_file, write_file, prepare_hot_reload)


def create_refactor_engine(
    parser: Optional[ParserProtocol] = None,
    analyzer: Optional[SemanticAnalyzerProtocol] = None,
    transpiler: Optional[TranspilerProtocol] = None,
    config: Optional[SpliceConfig] = None,
) -> RefactorEngine:
    return RefactorEngine(
        parser=parser, analyzer=analyzer, transpiler=transpiler, config=config
    )
