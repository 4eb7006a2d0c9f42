from unittest.mock import Mock

import pytest

from splice.refactor.engine import WorkspaceEdit
from splice.refactor.engine.applier import apply_workspace_edit, validate_rename
from splice.refactor.engine.planner import plan_rename
from splice.spec import (
    ApplicationError,
    InputValidationError,
    OverlapValidationError,
    RenameRequest,
    ValidationSummary,
)
from splice.test_utils import MemoryStorage


def test_apply_scr_old_scenario(ctx, scr_old_project):
    _, storage = scr_old_project
    ws = plan_rename(ctx, RenameRequest("gml/script/scr_old", "scr_new"))

    results = apply_workspace_edit(ctx, ws, storage.read_file, storage.write_file)

    content = results["a.gml"]
    assert content[10:17] == "scr_new"
    assert content[40:47] == "scr_new"
    assert "scr_old" not in content
    assert storage.files["a.gml"] == content
    assert storage.writes == ["a.gml"]


def test_dry_run_returns_same_content_without_writing(ctx, scr_old_project):
    _, storage = scr_old_project
    ws = plan_rename(ctx, RenameRequest("gml/script/scr_old", "scr_new"))
    original = storage.files["a.gml"]

    preview = apply_workspace_edit(ctx, ws, storage.read_file, dry_run=True)

    assert storage.writes == []
    assert storage.files["a.gml"] == original

    applied = apply_workspace_edit(ctx, ws, storage.read_file, storage.write_file)
    assert preview == applied


def test_length_changing_edits_apply_tail_first(ctx):
    storage = MemoryStorage({"a.gml": "hp = hp + 1;"})
    ws = WorkspaceEdit()
    ws.add_edit("a.gml", 0, 2, "health")
    ws.add_edit("a.gml", 5, 7, "health")

    results = apply_workspace_edit(ctx, ws, storage.read_file, storage.write_file)

    assert results["a.gml"] == "health = health + 1;"


def test_validate_rename_flags_overlap(ctx):
    ws = WorkspaceEdit()
    ws.add_edit("a.gml", 0, 10, "x")
    ws.add_edit("a.gml", 5, 15, "y")

    summary = validate_rename(ctx, ws)

    assert not summary.valid
    assert summary.errors == ["Overlapping edits detected in a.gml at positions 5-10"]


def test_adjacent_edits_do_not_overlap(ctx):
    ws = WorkspaceEdit()
    ws.add_edit("a.gml", 0, 5, "x")
    ws.add_edit("a.gml", 5, 10, "y")

    assert validate_rename(ctx, ws).valid


def test_validate_rename_empty_workspace_is_invalid(ctx):
    summary = validate_rename(ctx, WorkspaceEdit())

    assert not summary.valid
    assert summary.errors == ["Workspace edit contains no changes"]


def test_validate_rename_warns_above_edit_threshold(ctx):
    ctx.config.max_edits_per_file = 2
    ws = WorkspaceEdit()
    for i in range(3):
        ws.add_edit("a.gml", i * 10, i * 10 + 2, "x")

    summary = validate_rename(ctx, ws)

    assert summary.valid
    assert summary.warnings[0].startswith("Large number of edits (3) planned for a.gml")


def test_validate_rename_merges_analyzer_verdict(ctx, analyzer):
    analyzer.validation = ValidationSummary(
        valid=False, errors=["semantic break"], warnings=["heads up"]
    )
    ws = WorkspaceEdit()
    ws.add_edit("a.gml", 0, 2, "x")

    summary = validate_rename(ctx, ws)

    assert not summary.valid
    assert summary.errors == ["semantic break"]
    assert summary.warnings == ["heads up"]


def test_validate_rename_downgrades_analyzer_failure(ctx, analyzer):
    analyzer.validate_edits = Mock(side_effect=RuntimeError("boom"))
    ws = WorkspaceEdit()
    ws.add_edit("a.gml", 0, 2, "x")

    summary = validate_rename(ctx, ws)

    assert summary.valid
    assert "Semantic validation failed: boom" in summary.warnings[0]


def test_apply_refuses_invalid_workspace(ctx):
    storage = MemoryStorage({"a.gml": "0123456789abcdef"})
    ws = WorkspaceEdit()
    ws.add_edit("a.gml", 0, 10, "x")
    ws.add_edit("a.gml", 5, 15, "y")

    with pytest.raises(OverlapValidationError):
        apply_workspace_edit(ctx, ws, storage.read_file, storage.write_file)
    assert storage.writes == []


def test_apply_requires_callables(ctx):
    ws = WorkspaceEdit()
    ws.add_edit("a.gml", 0, 1, "x")

    with pytest.raises(InputValidationError):
        apply_workspace_edit(ctx, ws, None, lambda p, c: None)
    with pytest.raises(InputValidationError, match="dry-run"):
        apply_workspace_edit(ctx, ws, lambda p: "", None)
    with pytest.raises(InputValidationError):
        apply_workspace_edit(ctx, "not a workspace", lambda p: "", lambda p, c: None)


def test_write_failure_reports_written_paths(ctx):
    storage = MemoryStorage({"a.gml": "aa", "b.gml": "bb"})
    ws = WorkspaceEdit()
    ws.add_edit("a.gml", 0, 1, "x")
    ws.add_edit("b.gml", 0, 1, "y")

    def write_file(path, content):
        if path == "b.gml":
            raise OSError("disk full")
        storage.write_file(path, content)

    with pytest.raises(ApplicationError) as exc_info:
        apply_workspace_edit(ctx, ws, storage.read_file, write_file)

    assert exc_info.value.path == "b.gml"
    assert exc_info.value.written_paths == ["a.gml"]


def test_read_failure_raises_application_error(ctx):
    storage = MemoryStorage()
    ws = WorkspaceEdit()
    ws.add_edit("missing.gml", 0, 1, "x")

    with pytest.raises(ApplicationError, match="missing.gml"):
        apply_workspace_edit(ctx, ws, storage.read_file, storage.write_file)
