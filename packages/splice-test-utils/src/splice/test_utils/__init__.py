from splice.common import MemoryStorage

from .analyzer import StubAnalyzer
from .bus import SpyBus
from .helpers import offsets_of, occurrences_of
from .workspace import WorkspaceFactory

__all__ = [
    "SpyBus",
    "StubAnalyzer",
    "MemoryStorage",
    "WorkspaceFactory",
    "offsets_of",
    "occurrences_of",
]
