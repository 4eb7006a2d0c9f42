from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class LocationRecord:
    path: str
    start: int
    end: int
    scope: Optional[str] = None


@dataclass
class SymbolRecord:
    id: str
    name: str
    definition: Optional[LocationRecord] = None
    references: List[LocationRecord] = field(default_factory=list)
    dependents: List[str] = field(default_factory=list)
