import pytest

from splice.refactor.engine.batch import (
    detect_circular_renames,
    plan_batch_rename,
    validate_batch_rename_request,
)
from splice.spec import (
    BatchCollisionError,
    CircularRenameError,
    InputValidationError,
    OverlapValidationError,
    RenameRequest,
    SymbolOccurrence,
)


def _with_script(analyzer, name, path, start):
    analyzer.with_symbol(
        f"gml/script/{name}",
        SymbolOccurrence(path=path, start=start, end=start + len(name)),
    )


def test_circular_chain_is_rejected(ctx, analyzer):
    for name in ("A", "B", "C"):
        _with_script(analyzer, name, "a.gml", 0)
    renames = [
        RenameRequest("gml/script/A", "B"),
        RenameRequest("gml/script/B", "C"),
        RenameRequest("gml/script/C", "A"),
    ]

    with pytest.raises(CircularRenameError) as exc_info:
        plan_batch_rename(ctx, renames)

    message = str(exc_info.value)
    for name in ("A", "B", "C"):
        assert name in message
    assert exc_info.value.cycle[0] == exc_info.value.cycle[-1]


def test_collision_is_rejected_before_planning(ctx, analyzer):
    renames = [
        RenameRequest("gml/script/A", "B"),
        RenameRequest("gml/script/C", "B"),
    ]

    with pytest.raises(BatchCollisionError) as exc_info:
        plan_batch_rename(ctx, renames)

    assert exc_info.value.new_name == "B"
    assert exc_info.value.symbol_ids == ["gml/script/A", "gml/script/C"]
    assert not [c for c in analyzer.calls if c[0] == "get_symbol_occurrences"]


def test_detect_circular_renames_ignores_open_chains():
    renames = [
        RenameRequest("gml/script/A", "B"),
        RenameRequest("gml/script/B", "C"),
    ]

    assert detect_circular_renames(renames) == []


def test_detect_circular_renames_two_cycle():
    renames = [
        RenameRequest("gml/script/X", "Y"),
        RenameRequest("gml/script/Y", "X"),
    ]

    assert detect_circular_renames(renames) == [
        "gml/script/X",
        "gml/script/Y",
        "gml/script/X",
    ]


def test_plan_batch_rename_merges_plans(ctx, analyzer):
    _with_script(analyzer, "scr_a", "a.gml", 0)
    _with_script(analyzer, "scr_b", "b.gml", 4)

    ws = plan_batch_rename(
        ctx,
        [
            RenameRequest("gml/script/scr_a", "scr_x"),
            RenameRequest("gml/script/scr_b", "scr_y"),
        ],
    )

    assert [(e.path, e.new_text) for e in ws.edits] == [
        ("a.gml", "scr_x"),
        ("b.gml", "scr_y"),
    ]


def test_plan_batch_rename_rejects_overlapping_plans(ctx, analyzer):
    analyzer.with_symbol(
        "gml/script/scr_long", SymbolOccurrence(path="a.gml", start=0, end=8)
    )
    analyzer.with_symbol(
        "gml/script/scr_mid", SymbolOccurrence(path="a.gml", start=4, end=12)
    )

    with pytest.raises(OverlapValidationError, match="Batch rename validation failed"):
        plan_batch_rename(
            ctx,
            [
                RenameRequest("gml/script/scr_long", "scr_x"),
                RenameRequest("gml/script/scr_mid", "scr_y"),
            ],
        )


@pytest.mark.parametrize("renames", [None, [], "gml/script/A"])
def test_plan_batch_rename_rejects_bad_input(ctx, renames):
    with pytest.raises(InputValidationError):
        plan_batch_rename(ctx, renames)


def test_validate_batch_reports_collisions_and_cycles(ctx, analyzer):
    for name in ("A", "B", "C", "D"):
        _with_script(analyzer, name, "a.gml", 0)

    result = validate_batch_rename_request(
        ctx,
        [
            RenameRequest("gml/script/A", "B"),
            RenameRequest("gml/script/B", "A"),
            RenameRequest("gml/script/C", "Z"),
            RenameRequest("gml/script/D", "Z"),
        ],
    )

    assert not result.valid
    assert set(result.rename_validations) == {
        "gml/script/A",
        "gml/script/B",
        "gml/script/C",
        "gml/script/D",
    }
    assert ["gml/script/C", "gml/script/D"] in result.conflicting_sets
    assert any("Circular rename chain detected: A -> B -> A" in e for e in result.errors)
    assert any("potential confusion" in w for w in result.warnings)


def test_validate_batch_of_independent_renames_is_valid(ctx, analyzer):
    _with_script(analyzer, "scr_a", "a.gml", 0)
    _with_script(analyzer, "scr_b", "b.gml", 0)

    result = validate_batch_rename_request(
        ctx,
        [
            RenameRequest("gml/script/scr_a", "scr_x"),
            RenameRequest("gml/script/scr_b", "scr_y"),
        ],
    )

    assert result.valid
    assert result.conflicting_sets == []


def test_validate_batch_rejects_empty_list(ctx):
    result = validate_batch_rename_request(ctx, [])

    assert not result.valid
    assert result.errors == ["Batch rename requires at least one rename request"]
