from unittest.mock import Mock

import pytest

from splice.config import SpliceConfig
from splice.refactor.engine import RefactorEngine, create_refactor_engine
from splice.spec import (
    ConflictType,
    RenameRequest,
    SymbolNotFoundError,
    SymbolOccurrence,
    UpdateAction,
)
from splice.test_utils import MemoryStorage


def test_create_refactor_engine_wires_context():
    parser, analyzer, transpiler = Mock(), Mock(), Mock()
    config = SpliceConfig(max_edits_per_file=3)

    engine = create_refactor_engine(
        parser=parser, analyzer=analyzer, transpiler=transpiler, config=config
    )

    assert engine.parser is parser
    assert engine.analyzer is analyzer
    assert engine.transpiler is transpiler
    assert engine.config.max_edits_per_file == 3


def test_engine_defaults_to_fresh_config():
    first, second = RefactorEngine(), RefactorEngine()

    assert first.config == SpliceConfig()
    assert first.config is not second.config


def test_prepare_rename_plan_bundles_everything(engine, scr_old_project):
    plan = engine.prepare_rename_plan(RenameRequest("gml/script/scr_old", "scr_new"))

    assert len(plan.workspace) == 2
    assert plan.validation.valid
    assert plan.analysis.summary.total_occurrences == 2
    assert plan.hot_reload is None


def test_prepare_rename_plan_attaches_safety_verdict(engine, analyzer):
    analyzer.with_symbol(
        "gml/enum/E_STATE", SymbolOccurrence(path="enums.gml", start=5, end=12)
    )

    plan = engine.prepare_rename_plan(
        RenameRequest("gml/enum/E_STATE", "E_MODE"), validate_hot_reload=True
    )

    assert plan.hot_reload.hot_reload is not None
    assert not plan.hot_reload.hot_reload.safe
    assert any(w.startswith("Hot reload safety:") for w in plan.hot_reload.warnings)


def test_prepare_rename_plan_propagates_planning_errors(engine):
    with pytest.raises(SymbolNotFoundError):
        engine.prepare_rename_plan(RenameRequest("gml/script/ghost", "scr_new"))


def test_prepare_batch_plan_reports_planning_failure(engine, analyzer):
    for name in ("A", "C"):
        analyzer.with_symbol(
            f"gml/script/{name}", SymbolOccurrence(path="a.gml", start=0, end=1)
        )

    plan = engine.prepare_batch_rename_plan(
        [RenameRequest("gml/script/A", "B"), RenameRequest("gml/script/C", "B")],
        validate_hot_reload=True,
    )

    assert len(plan.workspace) == 0
    assert not plan.validation.valid
    assert plan.validation.errors[0].startswith("Planning failed:")
    assert plan.hot_reload.errors[0].startswith("Cannot validate hot reload:")
    assert plan.cascade is None
    assert not plan.batch_validation.valid
    assert set(plan.impact_analyses) == {"gml/script/A", "gml/script/C"}


def test_prepare_batch_plan_records_failed_analysis(engine, analyzer):
    analyzer.with_symbol(
        "gml/script/scr_a", SymbolOccurrence(path="a.gml", start=0, end=5)
    )

    plan = engine.prepare_batch_rename_plan([RenameRequest("gml/script/scr_a", "9x")])

    analysis = plan.impact_analyses["gml/script/scr_a"]
    assert not analysis.valid
    assert analysis.conflicts[0].type == ConflictType.ANALYSIS_ERROR
    assert analysis.conflicts[0].message.startswith("Failed to analyze gml/script/scr_a")


def test_execute_rename_writes_and_prepares_updates(engine, scr_old_project):
    analyzer, storage = scr_old_project
    analyzer.file_symbols["a.gml"] = ["gml/script/scr_old"]

    result = engine.execute_rename(
        RenameRequest("gml/script/scr_old", "scr_new"),
        storage.read_file,
        storage.write_file,
        prepare_hot_reload=True,
    )

    assert storage.writes == ["a.gml"]
    assert result.applied["a.gml"] == storage.files["a.gml"]
    assert [(u.symbol_id, u.action) for u in result.hot_reload_updates] == [
        ("gml/script/scr_old", UpdateAction.RECOMPILE)
    ]


def test_execute_batch_rename(engine, analyzer):
    storage = MemoryStorage({"a.gml": "hp = mp;"})
    analyzer.with_symbol("gml/var/hp", SymbolOccurrence(path="a.gml", start=0, end=2))
    analyzer.with_symbol("gml/var/mp", SymbolOccurrence(path="a.gml", start=5, end=7))

    result = engine.execute_batch_rename(
        [RenameRequest("gml/var/hp", "health"), RenameRequest("gml/var/mp", "mana")],
        storage.read_file,
        storage.write_file,
    )

    assert storage.files["a.gml"] == "health = mana;"
    assert result.hot_reload_updates == []


def test_facade_delegates_to_operations(engine, scr_old_project):
    request = RenameRequest("gml/script/scr_old", "scr_new")

    assert engine.validate_symbol_exists("gml/script/scr_old")
    assert len(engine.gather_symbol_occurrences("scr_old")) == 2
    assert engine.detect_rename_conflicts("scr_old", "scr_new", []) == []
    assert engine.check_hot_reload_safety(request).safe
    assert engine.analyze_rename_impact(request).valid
    assert engine.validate_rename_request(request).valid
    assert engine.compute_hot_reload_cascade(["gml/script/scr_old"]).order == [
        "gml/script/scr_old"
    ]
