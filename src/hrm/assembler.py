from __future__ import annotations

from typing import Dict, List, Tuple

from hrm.ir import Instr, JUMP_OPS
from hrm.parser import Token, tokenize, is_label


def _emit(debug: bool, out: List[Instr], insn: Instr) -> None:
    out.append(insn)
    if debug:
        idx = len(out) - 1
        print(f"[ASM {idx:02d}] emit {insn}")


def build_label_table(tokens: List[Token], *, debug: bool = False) -> Dict[str, int]:
    """Pass 1: bind each label to the index of the next instruction.

    Label tokens do not take an index themselves, so consecutive labels share
    the same target. A redefined label keeps its last binding.
    """
    labels: Dict[str, int] = {}
    pc = 0
    for op, args in tokens:
        if op == "LABEL":
            labels[args[0]] = pc
            if debug:
                print(f"[ASM] label {args[0]} -> {pc}")
            continue
        pc += 1
    return labels


def resolve_tokens(tokens: List[Token], labels: Dict[str, int], *, debug: bool = False) -> List[Instr]:
    """Pass 2: emit one instruction per statement token.

    Jump targets are replaced by their bound index. A jump whose label was
    never defined is left out of the output.
    """
    out: List[Instr] = []
    for tok in tokens:
        if is_label(tok):
            continue
        op, args = tok
        if op in JUMP_OPS:
            name = args[0]
            if name not in labels:
                if debug:
                    print(f"[ASM] drop {op} {name} (undefined label)")
                continue
            _emit(debug, out, Instr(op, labels[name]))
            continue
        _emit(debug, out, Instr(op, args[0] if args else None))
    return out


def assemble(source: str, *, debug: bool = False) -> Tuple[List[Instr], Dict[str, int]]:
    """Assemble program text into (instructions, label table)."""
    tokens = tokenize(source)
    labels = build_label_table(tokens, debug=debug)
    return resolve_tokens(tokens, labels, debug=debug), labels


def assemble_program(source: str, *, debug: bool = False) -> List[Instr]:
    """Assemble program text into a flat instruction list.
    - Comments and COMMENT annotations are dropped by the lexer.
    - Labels map to absolute instruction indices (not PC-relative).
    - Unparsable text yields whatever was read before it, possibly nothing.
    """
    instructions, _ = assemble(source, debug=debug)
    return instructions


__all__ = [
    "build_label_table",
    "resolve_tokens",
    "assemble",
    "assemble_program",
]
