import pytest

from splice.spec import (
    BatchCollisionError,
    CircularRenameError,
    ConflictType,
    HotReloadCascadeResult,
    IdentifierGrammarError,
    InputValidationError,
    OverlapValidationError,
    RefactorError,
    SymbolKind,
    TextEdit,
    has_capability,
    parse_symbol_kind,
)


def test_only_shadow_and_reserved_block():
    blocking = {t for t in ConflictType if t.is_blocking}

    assert blocking == {ConflictType.SHADOW, ConflictType.RESERVED}


def test_parse_symbol_kind():
    assert parse_symbol_kind("script") is SymbolKind.SCRIPT
    assert parse_symbol_kind("room") is None
    assert parse_symbol_kind(None) is None


def test_text_edit_validates_offsets():
    assert TextEdit("a.gml", 3, 3, "x").start == 3
    with pytest.raises(InputValidationError):
        TextEdit("a.gml", 4, 3, "x")


def test_empty_cascade_result():
    result = HotReloadCascadeResult()

    assert result.cascade == []
    assert result.metadata.total_symbols == 0
    assert not result.metadata.has_circular


def test_error_hierarchy():
    assert issubclass(InputValidationError, TypeError)
    assert issubclass(IdentifierGrammarError, ValueError)
    for cls in (InputValidationError, IdentifierGrammarError, CircularRenameError):
        assert issubclass(cls, RefactorError)


def test_error_messages_carry_context():
    cycle = CircularRenameError(["gml/script/A", "gml/script/B", "gml/script/A"])
    collision = BatchCollisionError("B", ["gml/script/A", "gml/script/C"])
    overlap = OverlapValidationError(["first", "second"])

    assert "A -> B -> A" in str(cycle)
    assert collision.symbol_ids == ["gml/script/A", "gml/script/C"]
    assert str(overlap) == "Cannot apply workspace edit: first; second"


def test_has_capability():
    class Partial:
        def has_symbol(self, symbol_id):
            return True

        get_dependents = None

    assert has_capability(Partial(), "has_symbol")
    assert not has_capability(Partial(), "get_dependents")
    assert not has_capability(Partial(), "lookup")
    assert not has_capability(None, "has_symbol")
