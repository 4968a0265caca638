class MachineError(Exception):
    """Base class for every failure raised while the CPU runs a program."""


class EmptyHands(MachineError):
    def __init__(self) -> None:
        super().__init__("Empty hands")


class EmptyTile(MachineError):
    def __init__(self, tile: int) -> None:
        self.tile = tile
        super().__init__(f"Empty tile: {tile}")


class BadTileAddress(MachineError):
    """An indirect operand pointed through a tile that holds no usable Number."""

    def __init__(self, tile: int) -> None:
        self.tile = tile
        super().__init__(f"Bad tile address: {tile}")


class InvalidOperation(MachineError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


__all__ = [
    "MachineError",
    "EmptyHands",
    "EmptyTile",
    "BadTileAddress",
    "InvalidOperation",
]
