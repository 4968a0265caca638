from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

_INT_RE = re.compile(r"[+-]?\d+")


def _wrap_s64(x: int) -> int:
    """Wrap an arbitrary integer into signed 64-bit range."""
    return ((int(x) + (1 << 63)) & ((1 << 64) - 1)) - (1 << 63)


@dataclass(frozen=True)
class Number:
    """Signed 64-bit integer held in hands, a tile, the inbox or the outbox."""
    value: int

    def __init__(self, value: int) -> None:  # type: ignore[override]
        object.__setattr__(self, "value", _wrap_s64(value))

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"Number({self.value})"


@dataclass(frozen=True)
class Letter:
    """A single uppercase ASCII letter A..Z."""
    char: str

    def __post_init__(self) -> None:
        c = self.char
        if not (isinstance(c, str) and len(c) == 1 and "A" <= c <= "Z"):
            raise ValueError(f"Letter must be one of A..Z, got {c!r}")

    @property
    def code(self) -> int:
        return ord(self.char)

    def __str__(self) -> str:
        return self.char

    def __repr__(self) -> str:
        return f"Letter({self.char!r})"


Value = Union[Number, Letter]


def letters_from_text(text: str) -> List[Letter]:
    """Keep ASCII alphabetic characters, uppercased, one Letter each."""
    return [Letter(c.upper()) for c in text if c.isascii() and c.isalpha()]


def parse_number(text: str) -> Optional[Number]:
    t = text.strip()
    if _INT_RE.fullmatch(t):
        return Number(int(t))
    return None


def parse_value(text: str) -> Optional[Value]:
    """Integer literal -> Number, otherwise the first letter found (or None)."""
    n = parse_number(text)
    if n is not None:
        return n
    letters = letters_from_text(text)
    return letters[0] if letters else None


def format_value(v: Value) -> str:
    if isinstance(v, Letter):
        return f"'{v.char}'"
    return str(v.value)


def format_values(values: Iterable[Value]) -> str:
    return "[" + ", ".join(format_value(v) for v in values) + "]"


__all__ = [
    "Number",
    "Letter",
    "Value",
    "letters_from_text",
    "parse_number",
    "parse_value",
    "format_value",
    "format_values",
]
