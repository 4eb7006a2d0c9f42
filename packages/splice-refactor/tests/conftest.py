import pytest

from splice.refactor.engine import RefactorContext, RefactorEngine
from splice.spec import OccurrenceKind, SymbolOccurrence
from splice.test_utils import MemoryStorage, StubAnalyzer

# scr_old is defined at 10-17 and called at 40-47.
SCR_OLD_SOURCE = "function  scr_old() {\n    var r = 1;\n   scr_old();\n}\n"


@pytest.fixture
def analyzer():
    return StubAnalyzer()


@pytest.fixture
def ctx(analyzer):
    return RefactorContext(analyzer=analyzer)


@pytest.fixture
def engine(analyzer):
    return RefactorEngine(analyzer=analyzer)


@pytest.fixture
def scr_old_project(analyzer):
    """An analyzer and storage holding a single script with two occurrences."""
    analyzer.with_symbol(
        "gml/script/scr_old",
        SymbolOccurrence(path="a.gml", start=10, end=17, kind=OccurrenceKind.DEFINITION),
        SymbolOccurrence(path="a.gml", start=40, end=47),
    )
    storage = MemoryStorage({"a.gml": SCR_OLD_SOURCE})
    return analyzer, storage
