# hrm/pc.py
import sys
from dataclasses import dataclass

# Past the end of any program: set when INBOX finds the queue empty
EXHAUSTED = sys.maxsize


@dataclass
class PC:
    value: int = 0

    def increment(self, n: int = 1) -> None:
        self.value += n

    def jump(self, target: int) -> None:
        self.value = target

    def exhaust(self) -> None:
        self.value = EXHAUSTED

    @property
    def exhausted(self) -> bool:
        return self.value == EXHAUSTED

    def in_range(self, size: int) -> bool:
        return 0 <= self.value < size
