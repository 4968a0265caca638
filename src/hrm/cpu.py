# hrm/cpu.py
from collections import deque
from typing import Any, Deque, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from hrm import config
from hrm.data_memory import DataMemory
from hrm.errors import (
    MachineError,
    EmptyHands,
    EmptyTile,
    BadTileAddress,
    InvalidOperation,
)
from hrm.ir import IR, Addr, Instr
from hrm.pc import PC, EXHAUSTED
from hrm.program_memory import ProgramMemory
from hrm.values import Letter, Number, Value, format_value, format_values


"""
# =========================
# Instruction set
# =========================
#
# - INBOX            ; hands <- next inbox value. Empty inbox halts the run.
# - OUTBOX           ; outbox <- hands, hands emptied
# - COPYFROM a       ; hands <- tile
# - COPYTO a         ; tile <- hands
# - ADD a            ; hands <- hands + tile (numbers only)
# - SUB a            ; hands <- hands - tile (numbers, or letter - letter)
# - BUMPUP a         ; tile <- tile + 1, hands <- tile
# - BUMPDN a         ; tile <- tile - 1, hands <- tile
# - JUMP label       ; unconditional
# - JUMPZ label      ; hands is Number 0
# - JUMPN label      ; hands is a negative Number
#
# Operand a: N (tile N) or [N] (tile whose index is the Number stored in N).
# Conditional jumps fall through on empty hands or a letter.
"""


def _show_mem(mem: DataMemory) -> str:
    return "{" + ", ".join(f"{k}: {format_value(v)}" for k, v in mem.snapshot().items()) + "}"


def _show_hands(hands: Optional[Value]) -> str:
    return "-" if hands is None else format_value(hands)


class CPU:
    def __init__(
        self,
        program: Union[ProgramMemory, Sequence[Instr], None] = None,
        *,
        memory: Optional[Mapping[int, Value]] = None,
        inbox: Iterable[Value] = (),
        debug: Optional[bool] = None,
    ) -> None:
        self.pc = PC()
        self.ir = IR()
        if isinstance(program, ProgramMemory):
            self.prog = program
        else:
            self.prog = ProgramMemory.from_instructions(program or ())
        self.mem = DataMemory(memory)
        self.hands: Optional[Value] = None
        self.inbox: Deque[Value] = deque(inbox)
        self.outbox: List[Value] = []
        self.steps = 0
        self.debug = config.DEBUG if debug is None else bool(debug)
        self._pc_overridden: bool = False

    @classmethod
    def from_source(
        cls,
        source: str,
        *,
        memory: Optional[Mapping[int, Value]] = None,
        inbox: Iterable[Value] = (),
        debug: Optional[bool] = None,
    ) -> "CPU":
        dbg = config.DEBUG if debug is None else bool(debug)
        prog = ProgramMemory.from_source(source, debug=dbg)
        return cls(prog, memory=memory, inbox=inbox, debug=dbg)

    @property
    def halted(self) -> bool:
        return not self.pc.in_range(self.prog.size())

    # ---------- 외부 API ----------
    def step(self) -> bool:
        """Execute the instruction at PC. Returns False once halted."""
        if self.halted:
            self._on_halt()
            return False

        start_pc = self.pc.value
        insn = self.prog.fetch(start_pc)
        self._pc_overridden = False
        self.ir.latch(start_pc, insn)
        self._on_fetch(insn)

        changes = self._exec_one(insn)

        if not self._pc_overridden:
            self.pc.increment(1)
        if not self.pc.exhausted:
            self.steps += 1
            self._on_writeback(changes)
        self._on_pc_advance(start_pc, self.pc.value)
        self.ir.clear()
        if self.halted:
            self._on_halt()
            return False
        return True

    def run(self) -> List[Value]:
        """Step until halted and return the outbox.

        The first MachineError aborts the run and is re-raised to the caller.
        """
        self._println("[RUN] Starting execution...")
        self._println(f"  Inbox:  {format_values(self.inbox)}")
        self._println(f"  Outbox: {format_values(self.outbox)}")
        self._println(f"  Mem:    {_show_mem(self.mem)}")
        while True:
            try:
                cont = self.step()
            except MachineError as ex:
                self._on_fault(ex)
                raise
            if not cont:
                break
        self._println("[RUN] Execution finished.")
        return list(self.outbox)

    # ---------- addressing ----------
    def _resolve_tile(self, addr: Addr) -> int:
        if not addr.indirect:
            return addr.tile
        ptr = self.mem.get(addr.tile)
        if ptr is None:
            raise EmptyTile(addr.tile)
        if isinstance(ptr, Letter) or ptr.value < 0:
            raise BadTileAddress(addr.tile)
        return ptr.value

    def _read_tile(self, addr: Addr) -> Tuple[int, Value]:
        tile = self._resolve_tile(addr)
        v = self.mem.get(tile)
        if v is None:
            raise EmptyTile(tile)
        return tile, v

    def _require_hands(self) -> Value:
        if self.hands is None:
            raise EmptyHands()
        return self.hands

    # ---------- execution ----------
    def _exec_one(self, insn: Instr) -> Dict[str, Any]:
        op, arg = insn.op, insn.arg
        ch: Dict[str, Any] = {}

        if op == "INBOX":
            if not self.inbox:
                self.pc.exhaust()
                self._pc_overridden = True
                self._on_execute("INBOX ; inbox empty -> HALT")
                return ch
            self.hands = self.inbox.popleft()
            ch["hands"] = self.hands
            self._on_execute(f"INBOX ; hands={format_value(self.hands)}")
            return ch

        if op == "OUTBOX":
            v = self._require_hands()
            self.outbox.append(v)
            self.hands = None
            ch["outbox"] = v
            self._on_execute(f"OUTBOX ; {format_value(v)}")
            return ch

        if op == "COPYFROM":
            tile, v = self._read_tile(arg)
            self.hands = v
            ch["hands"] = v
            self._on_execute(f"COPYFROM {arg} ; tile {tile}")
            return ch

        if op == "COPYTO":
            # the target tile may be empty, only the address must resolve
            tile = self._resolve_tile(arg)
            v = self._require_hands()
            self.mem.set(tile, v)
            ch[f"tile {tile}"] = v
            self._on_execute(f"COPYTO {arg} ; tile {tile}")
            return ch

        if op == "ADD":
            a = self._require_hands()
            _, b = self._read_tile(arg)
            if isinstance(a, Letter) or isinstance(b, Letter):
                raise InvalidOperation("You can't ADD with a letter")
            self.hands = Number(a.value + b.value)
            ch["hands"] = self.hands
            self._on_execute(f"ADD {arg} ; {a.value} + {b.value}")
            return ch

        if op == "SUB":
            a = self._require_hands()
            _, b = self._read_tile(arg)
            if isinstance(a, Number) and isinstance(b, Number):
                self.hands = Number(a.value - b.value)
            elif isinstance(a, Letter) and isinstance(b, Letter):
                self.hands = Number(a.code - b.code)
            else:
                raise InvalidOperation("You can't SUB with mixed operands")
            ch["hands"] = self.hands
            self._on_execute(f"SUB {arg} ; {format_value(a)} - {format_value(b)}")
            return ch

        if op in ("BUMPUP", "BUMPDN"):
            tile, v = self._read_tile(arg)
            if isinstance(v, Letter):
                sign = "+" if op == "BUMPUP" else "-"
                raise InvalidOperation(f"You can't BUMP{sign} with a letter")
            delta = 1 if op == "BUMPUP" else -1
            nv = Number(v.value + delta)
            self.mem.set(tile, nv)
            self.hands = nv
            ch[f"tile {tile}"] = nv
            ch["hands"] = nv
            self._on_execute(f"{op} {arg} ; tile {tile}")
            return ch

        if op == "JUMP":
            self.pc.jump(arg)
            self._pc_overridden = True
            self._on_execute(f"JUMP {arg}")
            return ch

        # JUMPN / JUMPZ (Instr rejects any other opcode)
        h = self.hands
        # empty hands or a letter: condition is false, no error
        taken = isinstance(h, Number) and (h.value < 0 if op == "JUMPN" else h.value == 0)
        if taken:
            self.pc.jump(arg)
            self._pc_overridden = True
            self._on_execute(f"{op} {arg} ; taken")
        else:
            self._on_execute(f"{op} {arg} ; no-branch")
        return ch

    # ---------- trace ----------
    def _on_fetch(self, insn: Instr) -> None:
        labels = self.prog.labels_at(self.pc.value)
        tag = f"  ({', '.join(labels)}:)" if labels else ""
        self._println(f"[FETCH] PC={self.pc.value:02d}  {insn}{tag}")

    def _on_execute(self, desc: str) -> None:
        self._println(f"[EXEC]   {desc}")

    def _on_writeback(self, changes: Dict[str, Any]) -> None:
        if changes:
            ch = ", ".join(f"{k}={format_value(v)}" for k, v in changes.items())
            self._println(f"[WB]     {ch}")
        else:
            self._println("[WB]     (no changes)")
        self._println(
            f"  Inbox: {format_values(self.inbox)}  Outbox: {format_values(self.outbox)}"
            f"  Hands: {_show_hands(self.hands)}  Mem: {_show_mem(self.mem)}"
        )

    def _on_pc_advance(self, old: int, new: int) -> None:
        if new == EXHAUSTED:
            self._println(f"[PC]     {old:02d} -> (end)")
            return
        self._println(f"[PC]     {old:02d} -> {new:02d}")

    def _on_halt(self) -> None:
        self._println(f"[HALT]   Program finished or PC out of range. steps={self.steps}")

    def _on_fault(self, ex: MachineError) -> None:
        pc_s = f"PC={self.ir.pc:02d}" if self.ir.pc is not None else f"PC={self.pc.value:02d}"
        opctx = f" op={self.ir.decoded}" if self.ir.decoded is not None else ""
        self._println(f"[FAULT] {pc_s}{opctx} | {ex.__class__.__name__}: {ex}")

    def _println(self, s: str) -> None:
        if self.debug:
            print(s)


def run_program(
    source: str,
    memory: Optional[Mapping[int, Value]] = None,
    inbox: Iterable[Value] = (),
    *,
    debug: Optional[bool] = None,
) -> List[Value]:
    """Assemble `source`, run it on a fresh machine and return the outbox."""
    return CPU.from_source(source, memory=memory, inbox=inbox, debug=debug).run()


__all__ = [
    "CPU",
    "run_program",
]
