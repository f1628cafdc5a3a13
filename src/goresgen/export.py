# src/goresgen/export.py
# TSV map files: one row per line, top row first, tab-separated block ids.

from __future__ import annotations

import csv
from pathlib import Path
from typing import Optional, Tuple

import numpy as np

from .grid import GridMap
from .tiles import BlockType


def export_map(grid: GridMap, path: Path, include_header: bool = False) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f, delimiter="\t")
        if include_header:
            w.writerow(list(range(grid.width)))
        for row in grid.as_rows():
            w.writerow(row)
    return path


def import_map(
    path: Path, has_header: bool = False, shape: Optional[Tuple[int, int]] = None
) -> GridMap:
    """
    Read a map written by export_map. `shape` is the expected (width, height);
    a mismatch, ragged rows or an unknown block id raise ValueError.
    """
    with open(path, newline="", encoding="utf-8") as f:
        rows = [r for r in csv.reader(f, delimiter="\t") if r]
    if has_header:
        rows = rows[1:]
    rows = [[int(v) for v in r] for r in rows]
    if not rows:
        raise ValueError(f"{path}: no map rows")
    width = len(rows[0])
    if any(len(r) != width for r in rows):
        raise ValueError(f"{path}: ragged rows")
    if shape is not None and (width, len(rows)) != tuple(shape):
        raise ValueError(f"{path}: expected {shape[0]}x{shape[1]}, got {width}x{len(rows)}")

    # rows are top-first; flip back to [x, y] with y up
    cells = np.array(rows[::-1], dtype=np.int64).T
    if cells.min() < min(BlockType) or cells.max() > max(BlockType):
        raise ValueError(f"{path}: unknown block id")
    return GridMap(cells=cells.astype(np.uint8))
