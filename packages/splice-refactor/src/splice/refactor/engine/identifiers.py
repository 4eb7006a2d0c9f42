import re
from typing import Any, FrozenSet, Iterable

from splice.spec import IdentifierGrammarError, InputValidationError

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

# GML keywords and built-in instance/scope names. Compared lower-cased.
DEFAULT_RESERVED_KEYWORDS: FrozenSet[str] = frozenset(
    {
        "if",
        "else",
        "while",
        "for",
        "do",
        "until",
        "repeat",
        "switch",
        "case",
        "default",
        "break",
        "continue",
        "return",
        "exit",
        "with",
        "var",
        "globalvar",
        "function",
        "constructor",
        "new",
        "delete",
        "enum",
        "try",
        "catch",
        "finally",
        "throw",
        "static",
        "self",
        "other",
        "all",
        "noone",
        "global",
        "true",
        "false",
        "and",
        "or",
        "not",
        "xor",
        "div",
        "mod",
        "then",
        "begin",
        "end",
        "undefined",
        "macro",
    }
)


def assert_valid_identifier_name(name: Any) -> str:
    if not isinstance(name, str):
        raise InputValidationError(
            f"Identifier names must be strings. Received {type(name).__name__}."
        )

    trimmed = name.strip()
    if not trimmed:
        raise IdentifierGrammarError(
            "Identifier names must not be empty or whitespace-only"
        )
    if trimmed != name:
        raise IdentifierGrammarError(
            "Identifier names must not include leading or trailing whitespace"
        )
    if not IDENTIFIER_PATTERN.fullmatch(name):
        raise IdentifierGrammarError(
            f"Identifier '{name}' is not a valid GML identifier "
            "(expected [A-Za-z_][A-Za-z0-9_]*)"
        )
    return name


def is_valid_identifier(name: Any) -> bool:
    return isinstance(name, str) and IDENTIFIER_PATTERN.fullmatch(name) is not None


def extract_symbol_name(symbol_id: str) -> str:
    """`gml/script/scr_foo` -> `scr_foo`."""
    return symbol_id.split("/")[-1]


def extract_symbol_kind(symbol_id: str) -> str:
    parts = symbol_id.split("/")
    return parts[1] if len(parts) >= 3 else ""


def retarget_symbol_id(symbol_id: str, new_name: str) -> str:
    parts = symbol_id.split("/")
    parts[-1] = new_name
    return "/".join(parts)


def build_reserved_set(*sources: Iterable[str]) -> FrozenSet[str]:
    words = set(DEFAULT_RESERVED_KEYWORDS)
    for source in sources:
        words.update(str(word).lower() for word in source or ())
    return frozenset(words)
