from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from splice.spec import InputValidationError, OccurrenceKind, SymbolOccurrence


@dataclass
class OccurrenceClassification:
    total: int = 0
    definitions: int = 0
    references: int = 0
    by_file: Dict[str, int] = field(default_factory=dict)
    by_kind: Dict[str, int] = field(default_factory=dict)


def _require_list(occurrences: Sequence[SymbolOccurrence], operation: str) -> None:
    if not isinstance(occurrences, (list, tuple)):
        raise InputValidationError(f"{operation} requires a list of occurrences")


def classify_occurrences(
    occurrences: Sequence[SymbolOccurrence],
) -> OccurrenceClassification:
    _require_list(occurrences, "classify_occurrences")

    by_file: Counter = Counter()
    by_kind: Counter = Counter()
    for occurrence in occurrences:
        by_file[occurrence.path] += 1
        by_kind[OccurrenceKind(occurrence.kind).value] += 1

    return OccurrenceClassification(
        total=len(occurrences),
        definitions=by_kind[OccurrenceKind.DEFINITION.value],
        references=by_kind[OccurrenceKind.REFERENCE.value],
        by_file=dict(by_file),
        by_kind=dict(by_kind),
    )


def group_occurrences_by_file(
    occurrences: Sequence[SymbolOccurrence],
) -> Dict[str, List[SymbolOccurrence]]:
    """Groups occurrences by path, preserving first-seen file order."""
    _require_list(occurrences, "group_occurrences_by_file")

    grouped: Dict[str, List[SymbolOccurrence]] = defaultdict(list)
    for occurrence in occurrences:
        grouped[occurrence.path].append(occurrence)
    return dict(grouped)


def filter_occurrences_by_kind(
    occurrences: Sequence[SymbolOccurrence], kinds: Iterable[str]
) -> List[SymbolOccurrence]:
    _require_list(occurrences, "filter_occurrences_by_kind")
    wanted = {OccurrenceKind(k) for k in kinds}
    return [o for o in occurrences if OccurrenceKind(o.kind) in wanted]
