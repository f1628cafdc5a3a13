# src/goresgen/grid.py
# Dense 2D block grid. Indexed [x, y] with x in [0, width) and y in [0, height);
# y grows upward. Every write is clipped at the bounds.

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .tiles import BlockType


@dataclass
class GridMap:
    cells: np.ndarray

    @classmethod
    def empty(cls, width: int, height: int, fill: BlockType = BlockType.SOLID) -> "GridMap":
        return cls(cells=np.full((width, height), int(fill), dtype=np.uint8))

    @property
    def width(self) -> int:
        return self.cells.shape[0]

    @property
    def height(self) -> int:
        return self.cells.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.width, self.height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> BlockType:
        return BlockType(int(self.cells[x, y]))

    def set(self, x: int, y: int, block: BlockType) -> None:
        # Out-of-range writes are dropped.
        if self.in_bounds(x, y):
            self.cells[x, y] = block

    def stamp(self, x: int, y: int, kernel: np.ndarray, block: BlockType) -> None:
        """
        Write `block` under every true cell of the odd-sized `kernel` centred
        at (x, y). Column 0 and row 0 are never written.
        """
        offset = (kernel.shape[0] - 1) // 2
        kx, ky = np.nonzero(kernel)
        xs = kx + (x - offset)
        ys = ky + (y - offset)
        keep = (xs > 0) & (xs < self.width) & (ys > 0) & (ys < self.height)
        self.cells[xs[keep], ys[keep]] = block

    def area_contains(self, x1: int, y1: int, x2: int, y2: int, block: BlockType) -> bool:
        """True if `block` occurs in the inclusive rectangle, clipped to the grid."""
        x1, y1 = max(x1, 0), max(y1, 0)
        x2, y2 = min(x2, self.width - 1), min(y2, self.height - 1)
        if x1 > x2 or y1 > y2:
            return False
        return bool((self.cells[x1:x2 + 1, y1:y2 + 1] == block).any())

    def neighbors(self, x: int, y: int) -> np.ndarray:
        """
        The 3x3 block centred on (x, y), indexed [dx + 1, dy + 1].
        Cells outside the grid read as SOLID.
        """
        out = np.full((3, 3), int(BlockType.SOLID), dtype=self.cells.dtype)
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                if self.in_bounds(x + dx, y + dy):
                    out[dx + 1, dy + 1] = self.cells[x + dx, y + dy]
        return out

    def replace_where(self, where: np.ndarray, old: BlockType, new: BlockType) -> int:
        """Rewrite cells equal to `old` where the mask is set; returns the count."""
        hit = where & (self.cells == old)
        self.cells[hit] = new
        return int(hit.sum())

    def count(self, block: BlockType) -> int:
        return int((self.cells == block).sum())

    def clone(self) -> "GridMap":
        return GridMap(cells=self.cells.copy())

    def as_rows(self) -> list:
        # Top row first (highest y), each row left to right.
        return [[int(self.cells[x, y]) for x in range(self.width)]
                for y in range(self.height - 1, -1, -1)]
