from typing import Dict, List, Optional, Sequence

from hrm.assembler import assemble
from hrm.ir import Instr


class ProgramMemory:
    """
    Instruction storage with label addressing. Label definitions do not
    consume addresses; each label maps to the next executable instruction.
    Contents are fixed once loaded.
    """

    def __init__(self) -> None:
        self._instructions: tuple[Instr, ...] = ()
        # Label name -> instruction index (kept for listings and tracing)
        self._labels: Dict[str, int] = {}

    @classmethod
    def from_source(cls, source: str, *, debug: bool = False) -> "ProgramMemory":
        pm = cls()
        pm.load_program(source, debug=debug)
        return pm

    @classmethod
    def from_instructions(cls, instructions: Sequence[Instr], labels: Optional[Dict[str, int]] = None) -> "ProgramMemory":
        pm = cls()
        pm._instructions = tuple(instructions)
        pm._labels = dict(labels or {})
        return pm

    def load_program(self, source: str, *, debug: bool = False) -> None:
        instructions, labels = assemble(source, debug=debug)
        self._instructions = tuple(instructions)
        self._labels = labels

    def fetch(self, pc: int) -> Optional[Instr]:
        if 0 <= pc < len(self._instructions):
            return self._instructions[pc]
        return None

    def size(self) -> int:
        return len(self._instructions)

    @property
    def instructions(self) -> List[Instr]:
        return list(self._instructions)

    @property
    def labels(self) -> Dict[str, int]:
        return dict(self._labels)

    def get_label_addr(self, name: str) -> Optional[int]:
        return self._labels.get(name)

    def labels_at(self, pc: int) -> List[str]:
        return [name for name, addr in self._labels.items() if addr == pc]
