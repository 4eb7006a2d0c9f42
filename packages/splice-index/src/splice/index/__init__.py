from .loader import load_symbol_index, parse_symbol_index
from .store import SymbolIndex
from .types import LocationRecord, SymbolRecord

__all__ = [
    "SymbolIndex",
    "LocationRecord",
    "SymbolRecord",
    "load_symbol_index",
    "parse_symbol_index",
]
