# src/goresgen/mapgen/finish.py
# Post-walk passes that turn the carved void into typed terrain:
#   1) obstacles: far-from-path rock becomes HOOKABLE, the rest EMPTY
#   2) freeze: EMPTY cells touching HOOKABLE (3x3) become FREEZE
#   3) platforms (optional): 5-wide PLATFORM strips along the walker's path

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np
from scipy.ndimage import binary_dilation

from ..config import MapGenerationConfig
from ..grid import GridMap
from ..rng import RandomGenerator
from ..tiles import PLATFORM_BLOCKERS, BlockType
from .distance import distance_transform

logger = logging.getLogger(__name__)

XY = Tuple[int, int]

SAFE_DOWN = 0
PLATFORM_HALF_WIDTH = 2


@dataclass
class FinishReport:
    hookable: int = 0
    emptied: int = 0
    freeze: int = 0
    platforms: List[Tuple[int, XY]] = field(default_factory=list)


def fill_space_with_obstacles(
    grid: GridMap, config: MapGenerationConfig, rng: RandomGenerator
) -> Tuple[int, int]:
    """Returns (cells made HOOKABLE, cells made EMPTY)."""
    field_ = distance_transform(
        grid,
        config.distance_transform_method,
        rng,
        config.pre_distance_noise,
        config.grid_distance,
    )
    deep = field_ >= config.distance_threshold
    hookable = grid.replace_where(deep, BlockType.SOLID, BlockType.HOOKABLE)
    emptied = grid.replace_where(~deep, BlockType.SOLID, BlockType.EMPTY)
    return hookable, emptied


def generate_freeze(grid: GridMap) -> int:
    near_wall = binary_dilation(grid.cells == BlockType.HOOKABLE, structure=np.ones((3, 3), dtype=bool))
    return grid.replace_where(near_wall, BlockType.EMPTY, BlockType.FREEZE)


def platform_area_clear(grid: GridMap, x: int, y: int, config: MapGenerationConfig) -> bool:
    x1, y1 = x - config.platform_safe_left, y - SAFE_DOWN
    x2, y2 = x + config.platform_safe_right, y + config.platform_safe_top
    return not any(grid.area_contains(x1, y1, x2, y2, b) for b in PLATFORM_BLOCKERS)


def place_platform(grid: GridMap, x: int, y: int) -> None:
    for dx in range(-PLATFORM_HALF_WIDTH, PLATFORM_HALF_WIDTH + 1):
        grid.set(x + dx, y, BlockType.PLATFORM)


def _mark_corners(grid: GridMap, x: int, y: int, config: MapGenerationConfig, block: BlockType) -> None:
    grid.set(x - config.platform_safe_left, y - SAFE_DOWN, block)
    grid.set(x + config.platform_safe_right, y + config.platform_safe_top, block)


def generate_platforms(
    grid: GridMap, positions: Sequence[XY], config: MapGenerationConfig
) -> List[Tuple[int, XY]]:
    """
    Scan the walker history in order. At most one platform per
    `platform_min_distance` history entries; each is dropped straight down
    from the history position to the lowest row where the safety rectangle
    is still free of HOOKABLE and FREEZE. The drop stops at row 1.
    """
    placed: List[Tuple[int, XY]] = []
    last_index = 0
    for index, (x, y) in enumerate(positions):
        if index <= last_index + config.platform_min_distance:
            continue
        if not grid.in_bounds(x, y) or not platform_area_clear(grid, x, y, config):
            continue

        _mark_corners(grid, x, y, config, BlockType.DEBUG)
        while y - SAFE_DOWN - 1 >= 1 and platform_area_clear(grid, x, y - 1, config):
            y -= 1
        _mark_corners(grid, x, y, config, BlockType.UNHOOKABLE)

        place_platform(grid, x, y)
        placed.append((index, (x, y)))
        last_index = index
    return placed


def finish_map(
    grid: GridMap,
    positions: Sequence[XY],
    config: MapGenerationConfig,
    rng: RandomGenerator,
) -> FinishReport:
    report = FinishReport()
    report.hookable, report.emptied = fill_space_with_obstacles(grid, config, rng)
    report.freeze = generate_freeze(grid)
    if config.generate_platforms:
        report.platforms = generate_platforms(grid, positions, config)
    logger.info("finished map: %d hookable, %d freeze, %d platforms",
                report.hookable, report.freeze, len(report.platforms))
    return report
