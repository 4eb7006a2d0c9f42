from pathlib import Path
from typing import Callable, List, Optional

import yaml

from splice.common import FileSystemStorage, bus
from splice.config import SpliceConfig, load_config_from_path
from splice.index import load_symbol_index
from splice.refactor.engine import (
    RefactorEngine,
    WorkspaceEdit,
    create_refactor_engine,
    extract_symbol_name,
)
from splice.spec import (
    ConflictError,
    HotReloadSafetySummary,
    IndexLoadError,
    RefactorError,
    RenameRequest,
)

ConfirmCallback = Callable[[int], bool]


class RenameRunner:
    def __init__(self, root_path: Path, config: Optional[SpliceConfig] = None):
        self.root_path = root_path
        self.config = config or load_config_from_path(root_path)
        self.storage = FileSystemStorage(root_path)

    # --- Bootstrap ---

    def _load_engine(self) -> Optional[RefactorEngine]:
        index_path = self.root_path / self.config.index_path
        if not index_path.is_file():
            bus.error("error.index_missing", path=self.config.index_path)
            return None
        try:
            index = load_symbol_index(index_path)
        except IndexLoadError as e:
            bus.error("error.index_load", error=str(e))
            return None
        bus.debug("debug.log.index_loaded", count=len(index), path=self.config.index_path)
        return create_refactor_engine(analyzer=index, config=self.config)

    def _load_plan(self, plan_path: Path) -> Optional[List[RenameRequest]]:
        try:
            with plan_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            bus.error("batch.run.invalid_plan", path=str(plan_path), error=str(e))
            return None

        if not isinstance(data, list) or not data:
            bus.error(
                "batch.run.invalid_plan",
                path=str(plan_path),
                error="expected a non-empty list of {symbol, new_name} entries",
            )
            return None

        renames: List[RenameRequest] = []
        for i, entry in enumerate(data):
            if not isinstance(entry, dict) or not {"symbol", "new_name"} <= entry.keys():
                bus.error(
                    "batch.run.invalid_plan",
                    path=str(plan_path),
                    error=f"entry {i + 1} needs 'symbol' and 'new_name'",
                )
                return None
            renames.append(RenameRequest(str(entry["symbol"]), str(entry["new_name"])))
        return renames

    # --- Reporting ---

    def _report_conflicts(self, e: ConflictError) -> None:
        bus.error("rename.run.blocked", old_name=e.old_name, new_name=e.new_name)
        for conflict in e.conflicts:
            bus.error("rename.run.conflict", type=conflict.type.value, message=conflict.message)
            for suggestion in conflict.suggestions:
                bus.info("rename.run.suggestion", suggestion=suggestion)

    def _report_preview(self, workspace: WorkspaceEdit) -> None:
        grouped = workspace.group_by_file()
        bus.warning("rename.run.preview_header", count=len(workspace), files=len(grouped))
        for path, edits in grouped.items():
            bus.info("rename.run.preview_file", path=path, count=len(edits))

    def _report_safety(self, summary: HotReloadSafetySummary) -> None:
        if summary.safe:
            bus.success("safety.run.safe", reason=summary.reason)
        else:
            bus.warning("safety.run.unsafe", reason=summary.reason)
        if summary.requires_restart:
            bus.warning("safety.run.restart")
        elif not summary.safe and summary.can_auto_fix:
            bus.info("safety.run.auto_fix")
        for suggestion in summary.suggestions:
            bus.info("safety.run.suggestion", suggestion=suggestion)

    def _report_hot_reload_updates(
        self, engine: RefactorEngine, workspace: WorkspaceEdit
    ) -> None:
        updates = engine.prepare_hot_reload_updates(workspace)
        bus.info("rename.hot_reload.header", count=len(updates))
        for update in updates:
            bus.info(
                "rename.hot_reload.update",
                action=update.action.value,
                symbol=update.symbol_id,
                path=update.file_path,
            )

    # --- Shared apply flow ---

    def _apply(
        self,
        engine: RefactorEngine,
        workspace: WorkspaceEdit,
        dry_run: bool,
        confirm_callback: Optional[ConfirmCallback],
    ) -> Optional[bool]:
        """Returns None once the edits are written, else the final verdict."""
        validation = engine.validate_rename(workspace)
        for warning in validation.warnings:
            bus.warning("rename.run.validation_warning", message=warning)

        self._report_preview(workspace)

        if dry_run:
            # Still read every file, so a dry run surfaces the same read errors.
            engine.apply_workspace_edit(
                workspace, read_file=self.storage.read_file, dry_run=True
            )
            bus.info("rename.run.dry_run")
            return True

        if confirm_callback and not confirm_callback(len(workspace)):
            bus.error("rename.run.aborted")
            return False

        bus.info("rename.run.applying")
        engine.apply_workspace_edit(
            workspace, read_file=self.storage.read_file, write_file=self.storage.write_file
        )
        return None

    # --- Commands ---

    def run_rename(
        self,
        symbol_id: str,
        new_name: str,
        dry_run: bool = False,
        confirm_callback: Optional[ConfirmCallback] = None,
        hot_reload: bool = False,
    ) -> bool:
        try:
            engine = self._load_engine()
            if engine is None:
                return False

            request = RenameRequest(symbol_id, new_name)
            bus.info("rename.run.planning", symbol=symbol_id, new_name=new_name)

            if hot_reload:
                self._report_safety(engine.check_hot_reload_safety(request))

            try:
                workspace = engine.plan_rename(request)
            except ConflictError as e:
                self._report_conflicts(e)
                return False

            bus.debug("debug.log.planned_edits", count=len(workspace), symbol=symbol_id)
            if not workspace:
                bus.success("rename.run.no_ops", symbol=symbol_id)
                return True

            verdict = self._apply(engine, workspace, dry_run, confirm_callback)
            if verdict is not None:
                return verdict

            old_name = extract_symbol_name(symbol_id)
            integrity = engine.verify_post_edit_integrity(
                symbol_id, old_name, new_name, workspace, self.storage.read_file
            )
            for error in integrity.errors:
                bus.error("rename.integrity.error", message=error)
            for warning in integrity.warnings:
                bus.warning("rename.integrity.warning", message=warning)

            bus.success(
                "rename.run.success",
                old_name=old_name,
                new_name=new_name,
                files=len(workspace.paths),
            )
            if hot_reload:
                self._report_hot_reload_updates(engine, workspace)
            return integrity.valid

        except RefactorError as e:
            bus.error("error.generic", error=str(e))
            return False
        except Exception as e:
            bus.error("error.generic", error=f"An unexpected error occurred: {e}")
            return False

    def run_batch(
        self,
        plan_path: Path,
        dry_run: bool = False,
        confirm_callback: Optional[ConfirmCallback] = None,
        hot_reload: bool = False,
    ) -> bool:
        try:
            renames = self._load_plan(plan_path)
            if renames is None:
                return False

            engine = self._load_engine()
            if engine is None:
                return False

            bus.info("batch.run.planning", count=len(renames))
            validation = engine.validate_batch_rename_request(renames, hot_reload)
            for warning in validation.warnings:
                bus.warning("rename.run.validation_warning", message=warning)
            if not validation.valid:
                bus.error("batch.run.rejected")
                for error in validation.errors:
                    bus.error("batch.run.error", message=error)
                return False

            workspace = engine.plan_batch_rename(renames)
            if not workspace:
                bus.success("rename.run.no_ops", symbol=", ".join(r.symbol_id for r in renames))
                return True

            verdict = self._apply(engine, workspace, dry_run, confirm_callback)
            if verdict is not None:
                return verdict

            bus.success("batch.run.success", count=len(renames), files=len(workspace.paths))
            if hot_reload:
                self._report_hot_reload_updates(engine, workspace)
            return True

        except ConflictError as e:
            self._report_conflicts(e)
            return False
        except RefactorError as e:
            bus.error("error.generic", error=str(e))
            return False
        except Exception as e:
            bus.error("error.generic", error=f"An unexpected error occurred: {e}")
            return False

    def run_impact(self, symbol_id: str, new_name: str) -> bool:
        try:
            engine = self._load_engine()
            if engine is None:
                return False

            analysis = engine.analyze_rename_impact(RenameRequest(symbol_id, new_name))
            summary = analysis.summary
            bus.info("impact.run.header", old_name=summary.old_name, new_name=new_name)
            bus.info(
                "impact.run.stats",
                occurrences=summary.total_occurrences,
                files=len(summary.affected_files),
                definitions=summary.definition_count,
                references=summary.reference_count,
            )
            bus.info(
                "impact.run.dependents",
                count=len(summary.dependent_symbols),
                hot_reload="yes" if summary.hot_reload_required else "no",
            )
            for conflict in analysis.conflicts:
                bus.error(
                    "impact.run.conflict", type=conflict.type.value, message=conflict.message
                )
            for warning in analysis.warnings:
                bus.warning(
                    "impact.run.conflict", type=warning.type.value, message=warning.message
                )

            if analysis.valid:
                bus.success("impact.run.valid")
            else:
                bus.error("impact.run.invalid")
            return analysis.valid

        except RefactorError as e:
            bus.error("error.generic", error=str(e))
            return False

    def run_cascade(self, symbol_ids: List[str]) -> bool:
        try:
            engine = self._load_engine()
            if engine is None:
                return False

            result = engine.compute_hot_reload_cascade(list(symbol_ids))
            bus.info("cascade.run.header", count=len(set(symbol_ids)))
            if result.metadata.max_distance == 0:
                bus.success("cascade.run.empty")
                return True

            for entry in result.cascade:
                bus.info(
                    "cascade.run.entry",
                    distance=entry.distance,
                    symbol=entry.symbol_id,
                    reason=entry.reason,
                )
            bus.info("cascade.run.order", order=" -> ".join(result.order))
            for cycle in result.circular:
                bus.warning(
                    "cascade.run.circular",
                    cycle=" -> ".join(extract_symbol_name(s) for s in cycle),
                )
            return True

        except RefactorError as e:
            bus.error("error.generic", error=str(e))
            return False

    def run_safety(self, symbol_id: str, new_name: str) -> bool:
        engine = self._load_engine()
        if engine is None:
            return False

        summary = engine.check_hot_reload_safety(RenameRequest(symbol_id, new_name))
        self._report_safety(summary)
        return summary.safe
