# hrm/ir.py
from dataclasses import dataclass
from typing import Optional, Union

# Opcode mnemonics, exactly as written in program text
INBOX = "INBOX"
OUTBOX = "OUTBOX"
COPYFROM = "COPYFROM"
COPYTO = "COPYTO"
ADD = "ADD"
SUB = "SUB"
BUMPUP = "BUMPUP"
BUMPDN = "BUMPDN"
JUMP = "JUMP"
JUMPN = "JUMPN"
JUMPZ = "JUMPZ"

NO_OPERAND_OPS = (INBOX, OUTBOX)
ADDRESS_OPS = (COPYFROM, COPYTO, ADD, SUB, BUMPUP, BUMPDN)
JUMP_OPS = (JUMP, JUMPN, JUMPZ)
OPCODES = NO_OPERAND_OPS + ADDRESS_OPS + JUMP_OPS


@dataclass(frozen=True)
class Addr:
    """Tile operand: `N` is direct, `[N]` reads the pointer stored in tile N."""
    tile: int
    indirect: bool = False

    def __str__(self) -> str:
        return f"[{self.tile}]" if self.indirect else str(self.tile)


def Direct(tile: int) -> Addr:
    return Addr(tile, indirect=False)


def Indirect(tile: int) -> Addr:
    return Addr(tile, indirect=True)


@dataclass(frozen=True)
class Instr:
    """One executable instruction.

    `arg` is None for INBOX/OUTBOX, an Addr for memory ops and the resolved
    absolute instruction index for jumps.
    """
    op: str
    arg: Union[Addr, int, None] = None

    def __post_init__(self) -> None:
        if self.op not in OPCODES:
            raise ValueError(f"Unknown opcode: {self.op}")
        if self.op in NO_OPERAND_OPS and self.arg is not None:
            raise ValueError(f"{self.op} takes no operand")
        if self.op in ADDRESS_OPS and not isinstance(self.arg, Addr):
            raise ValueError(f"{self.op} needs a tile operand")
        if self.op in JUMP_OPS and not (isinstance(self.arg, int) and self.arg >= 0):
            raise ValueError(f"{self.op} needs a resolved target index")

    def is_jump(self) -> bool:
        return self.op in JUMP_OPS

    def __str__(self) -> str:
        if self.arg is None:
            return self.op
        return f"{self.op} {self.arg}"


@dataclass
class IR:
    """Instruction register: the instruction currently being executed."""
    pc: Optional[int] = None
    decoded: Optional[Instr] = None

    def latch(self, pc: int, instr: Instr) -> None:
        self.pc = pc
        self.decoded = instr

    def clear(self) -> None:
        self.pc = None
        self.decoded = None
