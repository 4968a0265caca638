# hrm/data_memory.py
from typing import Dict, Mapping, Optional

from hrm.values import Value


class DataMemory:
    """Floor tiles: sparse tile index -> Value. A missing key is an empty tile."""

    def __init__(self, initial: Optional[Mapping[int, Value]] = None) -> None:
        self.tiles: Dict[int, Value] = {}
        for tile, value in (initial or {}).items():
            self.set(tile, value)

    def get(self, tile: int) -> Optional[Value]:
        """Stored Value, or None when the tile is empty."""
        return self.tiles.get(tile)

    def set(self, tile: int, value: Value) -> None:
        if tile < 0:
            raise ValueError(f"Tile index must be non-negative, got {tile}")
        self.tiles[tile] = value

    def snapshot(self) -> Dict[int, Value]:
        """Copy ordered by tile index (for display and tests)."""
        return {k: self.tiles[k] for k in sorted(self.tiles)}
