__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from pathlib import Path

from .messaging.bus import MessageBus
from .messaging.catalog import MessageCatalog
from .storage import Storage, FileSystemStorage, MemoryStorage

# --- Composition Root for Splice's Core Services ---


def _find_project_root(start_dir: Path) -> Path:
    current_dir = start_dir.resolve()
    while current_dir.parent != current_dir:
        if (current_dir / "pyproject.toml").is_file():
            return current_dir
        if (current_dir / ".git").is_dir():
            return current_dir
        current_dir = current_dir.parent
    return start_dir


def _create_catalog() -> MessageCatalog:
    # Packaged defaults first, project overrides last so they win.
    default_assets = Path(__file__).parent / "assets" / "messages"
    user_overrides = _find_project_root(Path.cwd()) / ".splice" / "messages"
    return MessageCatalog([default_assets, user_overrides])


catalog = _create_catalog()

# Global singleton; the CLI decides which renderer it talks to.
bus = MessageBus(catalog)

__all__ = [
    "bus",
    "catalog",
    "MessageBus",
    "MessageCatalog",
    "Storage",
    "FileSystemStorage",
    "MemoryStorage",
]
