# src/goresgen/mapgen/distance.py
# Distance of every cell to the nearest open (carved) cell.

from __future__ import annotations

from typing import Optional

import numpy as np
from scipy.ndimage import distance_transform_cdt, distance_transform_edt

from ..config import DistanceTransformMethod
from ..grid import GridMap
from ..rng import RandomGenerator
from ..tiles import BlockType


def _transform(blocked: np.ndarray, method: DistanceTransformMethod) -> np.ndarray:
    # scipy measures the distance from each nonzero cell to the nearest zero.
    if method is DistanceTransformMethod.EUCLIDEAN:
        return distance_transform_edt(blocked)
    if method is DistanceTransformMethod.MANHATTAN:
        return distance_transform_cdt(blocked, metric="taxicab").astype(float)
    if method is DistanceTransformMethod.CHESSBOARD:
        return distance_transform_cdt(blocked, metric="chessboard").astype(float)
    raise ValueError(f"unknown distance transform method {method!r}")


def _coarsen(open_mask: np.ndarray, step: int) -> np.ndarray:
    # A coarse cell is open if any fine cell under it is open.
    w, h = open_mask.shape
    pw, ph = -w % step, -h % step
    padded = np.pad(open_mask, ((0, pw), (0, ph)), constant_values=False)
    return padded.reshape(padded.shape[0] // step, step, padded.shape[1] // step, step).any(axis=(1, 3))


def distance_transform(
    grid: GridMap,
    method: DistanceTransformMethod = DistanceTransformMethod.EUCLIDEAN,
    rng: Optional[RandomGenerator] = None,
    noise: float = 0.0,
    grid_distance: int = 1,
) -> np.ndarray:
    """
    Float field shaped like the grid. Open cells are 0. With `grid_distance`
    > 1 the field is computed on blocks of that many cells and scaled back,
    which is faster and gives blockier walls. `noise` adds a uniform
    perturbation in [-noise, noise] drawn from `rng`.
    """
    open_mask = grid.cells != BlockType.SOLID
    if not open_mask.any():
        return np.full(grid.shape, np.inf)

    if grid_distance > 1:
        coarse = _transform(~_coarsen(open_mask, grid_distance), method) * grid_distance
        field = np.repeat(np.repeat(coarse, grid_distance, axis=0), grid_distance, axis=1)
        field = field[:grid.width, :grid.height]
        field[open_mask] = 0.0
    else:
        field = _transform(~open_mask, method)

    if noise > 0.0:
        if rng is None:
            raise ValueError("distance noise needs a random stream")
        field = field + rng.uniform(-noise, noise, field.shape)
    return field
