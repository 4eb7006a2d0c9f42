from collections import defaultdict
from typing import Dict, Iterator, List, Tuple

from splice.spec import TextEdit


class WorkspaceEdit:
    """
    The full set of text replacements for one logical refactor.

    Edits are kept in the order they were added. `group_by_file` derives the
    per-file view sorted by descending start offset, so a file can be patched
    from its tail towards its head without shifting offsets that are still
    to be applied. The grouped view is recomputed on every call.
    """

    def __init__(self) -> None:
        self._edits: List[TextEdit] = []

    def add_edit(self, path: str, start: int, end: int, new_text: str) -> None:
        self._edits.append(TextEdit(path=path, start=start, end=end, new_text=new_text))

    @property
    def edits(self) -> Tuple[TextEdit, ...]:
        return tuple(self._edits)

    @property
    def paths(self) -> List[str]:
        seen: Dict[str, None] = {}
        for edit in self._edits:
            seen.setdefault(edit.path, None)
        return list(seen)

    def group_by_file(self) -> Dict[str, List[TextEdit]]:
        grouped: Dict[str, List[TextEdit]] = defaultdict(list)
        for edit in self._edits:
            grouped[edit.path].append(edit)
        # sort() is stable: equal starts keep insertion order.
        for edits in grouped.values():
            edits.sort(key=lambda e: e.start, reverse=True)
        return dict(grouped)

    def merge(self, other: "WorkspaceEdit") -> None:
        self._edits.extend(other.edits)

    def __iter__(self) -> Iterator[TextEdit]:
        return iter(self.edits)

    def __len__(self) -> int:
        return len(self._edits)

    def __bool__(self) -> bool:
        return bool(self._edits)

    def __repr__(self) -> str:
        return f"WorkspaceEdit(edits={len(self._edits)}, files={len(self.paths)})"
