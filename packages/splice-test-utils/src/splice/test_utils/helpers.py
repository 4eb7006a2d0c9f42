import re
from typing import List, Optional, Tuple

from splice.spec import OccurrenceKind, SymbolOccurrence


def offsets_of(text: str, word: str) -> List[Tuple[int, int]]:
    """Whole-word spans of `word` in `text`."""
    pattern = re.compile(rf"\b{re.escape(word)}\b")
    return [(m.start(), m.end()) for m in pattern.finditer(text)]


def occurrences_of(
    path: str, text: str, word: str, scope_id: Optional[str] = None
) -> List[SymbolOccurrence]:
    """
    Builds occurrences for every whole-word match. The first match in the
    file is treated as the definition.
    """
    occurrences = []
    for i, (start, end) in enumerate(offsets_of(text, word)):
        kind = OccurrenceKind.DEFINITION if i == 0 else OccurrenceKind.REFERENCE
        occurrences.append(
            SymbolOccurrence(
                path=path, start=start, end=end, scope_id=scope_id, kind=kind
            )
        )
    return occurrences
