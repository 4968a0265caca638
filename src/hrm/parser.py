import re
from typing import Any, List, Optional, Sequence, Tuple

from hrm import config
from hrm.ir import Addr, ADDRESS_OPS, JUMP_OPS, NO_OPERAND_OPS, Direct, Indirect

# Parser debug print toggle (default off, HRM_PARSER_DEBUG=1 to enable)
PARSER_DEBUG = config.PARSER_DEBUG

Token = Tuple[str, tuple[Any, ...]]

LABEL = "LABEL"

# Skipped between statements: whitespace, "-- ..." line comments and
# "COMMENT <id> ..." annotations (the id and the rest of the line are ignored)
_SKIP_RE = re.compile(
    r"(?:\s+|--[^\n]*(?:\n|$)|COMMENT[ \t]+\d*[^\n]*(?:\n|$))+"
)

_NAME = r"[A-Za-z0-9]+"
_OPERAND = r"\d+|\[\d+\]"


def _alt(ops: Sequence[str]) -> str:
    # longest first so JUMPN/JUMPZ win over JUMP
    return "|".join(sorted(ops, key=len, reverse=True))


STATEMENT_SPEC = [
    (LABEL,     rf"({_NAME}):"),
    ("NOARG",   rf"({_alt(NO_OPERAND_OPS)})"),
    ("JUMPOP",  rf"({_alt(JUMP_OPS)})[ \t]+({_NAME})"),
    ("ADDROP",  rf"({_alt(ADDRESS_OPS)})[ \t]+({_OPERAND})"),
]
STATEMENT_RES = [(kind, re.compile(pat)) for kind, pat in STATEMENT_SPEC]


def parse_operand(text: str) -> Addr:
    """`N` -> direct tile N, `[N]` -> indirect through tile N."""
    s = text.strip()
    if s.startswith("[") and s.endswith("]"):
        return Indirect(int(s[1:-1]))
    return Direct(int(s))


def _match_statement(source: str, pos: int) -> Optional[Tuple[Token, int]]:
    for kind, rx in STATEMENT_RES:
        m = rx.match(source, pos)
        if not m:
            continue
        if kind == LABEL:
            return (LABEL, (m.group(1),)), m.end()
        if kind == "NOARG":
            return (m.group(1), ()), m.end()
        if kind == "JUMPOP":
            return (m.group(1), (m.group(2),)), m.end()
        return (m.group(1), (parse_operand(m.group(2)),)), m.end()
    return None


def tokenize(source: str) -> List[Token]:
    """Lex program text into an ordered token list.

    Scanning stops quietly at the first text that is not a statement; the
    tokens read so far are returned (an empty list if nothing matched).
    """
    tokens: List[Token] = []
    pos = 0
    n = len(source)
    while True:
        m = _SKIP_RE.match(source, pos)
        if m:
            pos = m.end()
        if pos >= n:
            break
        hit = _match_statement(source, pos)
        if hit is None:
            if PARSER_DEBUG:
                line_no = source.count("\n", 0, pos) + 1
                snippet = source[pos:pos + 20].split("\n", 1)[0]
                print(f"[PARSER] stopped at line {line_no}: '{snippet}'")
            break
        tok, pos = hit
        tokens.append(tok)
    return tokens


def is_label(tok: Token) -> bool:
    return tok[0] == LABEL


__all__ = [
    "Token",
    "LABEL",
    "tokenize",
    "parse_operand",
    "is_label",
]
