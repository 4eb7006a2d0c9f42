from pathlib import Path
from typing import Dict, List, Optional, Protocol


class Storage(Protocol):
    def read_file(self, path: str) -> str: ...
    def write_file(self, path: str, content: str) -> None: ...


class FileSystemStorage:
    """
    Reads and writes project files relative to a root directory.

    The engine never touches the disk itself; callers hand it the bound
    `read_file` / `write_file` methods of an instance like this one.
    """

    def __init__(self, root_path: Path):
        self.root_path = root_path

    def resolve(self, path: str) -> Path:
        candidate = Path(path)
        return candidate if candidate.is_absolute() else self.root_path / candidate

    def read_file(self, path: str) -> str:
        return self.resolve(path).read_text(encoding="utf-8")

    def write_file(self, path: str, content: str) -> None:
        target = self.resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


class MemoryStorage:
    """In-memory storage keyed by path. Records every write in order."""

    def __init__(self, files: Optional[Dict[str, str]] = None):
        self.files: Dict[str, str] = dict(files or {})
        self.writes: List[str] = []

    def read_file(self, path: str) -> str:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(path) from None

    def write_file(self, path: str, content: str) -> None:
        self.files[path] = content
        self.writes.append(path)
