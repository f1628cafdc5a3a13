# src/goresgen/mapgen/generator.py
# One generation run: owns the grid, random stream, kernels and walker.
# The host calls step() as often as it likes, then on_finish() once.

from __future__ import annotations

import logging
from typing import Callable, Optional

from ..config import MapGenerationConfig, MapLayoutConfig
from ..grid import GridMap
from ..rng import RandomGenerator
from .finish import FinishReport, fill_space_with_obstacles, finish_map, generate_freeze
from .kernel import KernelGenerator
from .walker import Walker

logger = logging.getLogger(__name__)


class MapGenerator:
    def __init__(self, config: MapGenerationConfig, layout: MapLayoutConfig):
        self.config = config
        self.layout = layout
        self.grid = GridMap.empty(config.map_width, config.map_height)
        self._rng = RandomGenerator(config.seed)
        self.kernels = KernelGenerator(
            config.kernel_config,
            config.init_kernel_size,
            config.init_kernel_circularity,
            self._rng,
            outer_size_margin_prob=config.kernel_outer_size_margin_prob,
            outer_circularity_prob=config.kernel_outer_circularity_prob,
        )
        self.walker = Walker(config, layout.waypoints, self.grid, self.kernels, self._rng)
        self._finished = False
        logger.info("generation %r on %r: seed=%d size=%dx%d",
                    config.config_name, layout.layout_name, config.seed,
                    config.map_width, config.map_height)

    @property
    def seed(self) -> int:
        return self.config.seed

    @property
    def map_name(self) -> str:
        return f"{self.config.config_name}_{self.layout.layout_name}_{self.config.seed}"

    @property
    def is_finished(self) -> bool:
        # Latches: once the last waypoint was reached the run stays finished.
        return self._finished

    @property
    def step_count(self) -> int:
        return self.walker.step_count

    def step(self) -> None:
        self.walker.step()
        if not self._finished and self.walker.reached_last_waypoint():
            self._finished = True

    def on_finish(self) -> FinishReport:
        return finish_map(self.grid, self.walker.history, self.config, self._rng)

    def preview(self) -> GridMap:
        """Obstacle + freeze passes on a copy; the run itself is untouched."""
        grid = self.grid.clone()
        fill_space_with_obstacles(grid, self.config, self._rng.spawn())
        generate_freeze(grid)
        return grid


def generate_map(
    config: MapGenerationConfig,
    layout: MapLayoutConfig,
    iterations_per_update: int = 100,
    on_update: Optional[Callable[[MapGenerator], None]] = None,
) -> MapGenerator:
    """
    Host loop: run `iterations_per_update` steps per tick until the iteration
    budget is spent or the last waypoint is reached, then finish once.
    """
    gen = MapGenerator(config, layout)
    iteration = 0
    generating = True
    while generating:
        for _ in range(iterations_per_update):
            gen.step()
            iteration += 1
            if iteration > config.max_iterations or gen.is_finished:
                generating = False
                break
        if on_update is not None:
            on_update(gen)
    gen.on_finish()
    logger.info("finished %s with %d iterations", gen.map_name, iteration)
    return gen
