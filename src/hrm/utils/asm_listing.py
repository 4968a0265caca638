from typing import Dict, List, Sequence

from hrm.ir import Instr, JUMP_OPS


def _target_name(target: int, by_addr: Dict[int, List[str]]) -> str:
    names = by_addr.get(target)
    return names[0] if names else "?"


def format_listing(instructions: Sequence[Instr], labels: Dict[str, int]) -> List[str]:
    """
    Render an assembled program one instruction per line, with label
    definitions shown where they bind and jump targets annotated.

    출력 형식 예:
        a:
          00  INBOX
          01  JUMP 0               ; -> a
    """
    by_addr: Dict[int, List[str]] = {}
    for name, addr in sorted(labels.items(), key=lambda kv: (kv[1], kv[0])):
        by_addr.setdefault(addr, []).append(name)

    out: List[str] = []
    for idx, insn in enumerate(instructions):
        for name in by_addr.get(idx, []):
            out.append(f"{name}:")
        text = str(insn)
        if insn.op in JUMP_OPS:
            out.append(f"  {idx:02d}  {text:<20} ; -> {_target_name(insn.arg, by_addr)}")
        else:
            out.append(f"  {idx:02d}  {text}")
    # Labels bound past the last instruction
    for addr in sorted(a for a in by_addr if a >= len(instructions)):
        for name in by_addr[addr]:
            out.append(f"{name}:")
    return out


def print_listing(instructions: Sequence[Instr], labels: Dict[str, int]) -> None:
    for line in format_listing(instructions, labels):
        print(line)


__all__ = [
    "format_listing",
    "print_listing",
]
