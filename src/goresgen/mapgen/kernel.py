# src/goresgen/mapgen/kernel.py
# Brush ("kernel") masks for the walker and their stochastic evolution.

from __future__ import annotations

import logging
import math
from typing import Optional, Tuple

import numpy as np

from ..config import KernelSizeConfig, validate_kernel_config
from ..rng import RandomGenerator

logger = logging.getLogger(__name__)


def build_kernel(size: int, circularity: float) -> np.ndarray:
    """
    Odd `size` x `size` boolean mask indexed [x, y]. A cell is set when its
    distance to the centre is within a radius interpolated between the
    inscribed circle (circularity 1.0) and the corner distance (0.0).
    """
    center = (size - 1) / 2
    min_radius = (size - 1) / 2
    max_radius = math.sqrt(2 * center * center)
    radius = circularity * min_radius + (1 - circularity) * max_radius

    offsets = np.arange(size) - center
    distance = np.sqrt(offsets[:, None] ** 2 + offsets[None, :] ** 2)
    return distance <= radius


class KernelGenerator:
    def __init__(
        self,
        config: Tuple[KernelSizeConfig, ...],
        size: int,
        circularity: float,
        rng: RandomGenerator,
        outer_size_margin_prob: float = 1.0 / 9.0,
        outer_circularity_prob: float = 0.2,
    ):
        validate_kernel_config(config)
        self.config = config
        self.size = size
        self.circularity = circularity
        self._rng = rng
        self._outer_size_margin_prob = outer_size_margin_prob
        self._outer_circularity_prob = outer_circularity_prob
        self.kernel: np.ndarray
        self.outer_kernel: np.ndarray
        self._rebuild()

    def _size_config(self, size: int) -> Optional[KernelSizeConfig]:
        for size_config in self.config:
            if size_config.size == size:
                return size_config
        return None

    def mutate(self, size_change_prob: float, circularity_change_prob: float) -> bool:
        """
        Maybe redraw size and/or circularity. Both coin flips happen before
        either draw. Returns True when the kernels were rebuilt.
        """
        update_size = self._rng.random_bool(size_change_prob)
        update_circularity = self._rng.random_bool(circularity_change_prob)

        if update_size:
            sizes = [c.size for c in self.config]
            weights = [c.size_probability for c in self.config]
            self.size = self._rng.roulette_select(sizes, weights)

        if update_circularity:
            # keyed on the size just drawn, if any
            size_config = self._size_config(self.size)
            if size_config is None:
                logger.warning("no circularity table for kernel size %d; keeping %.2f",
                               self.size, self.circularity)
            else:
                circs = size_config.circularity_probabilities
                self.circularity = self._rng.roulette_select(
                    [c.circularity for c in circs], [c.probability for c in circs]
                )

        if update_size or update_circularity:
            self._rebuild()
            return True
        return False

    def force_config(self, size: int, circularity: float) -> None:
        self.size = size
        self.circularity = circularity
        self._rebuild()

    def _rebuild(self) -> None:
        self.kernel = build_kernel(self.size, self.circularity)
        outer_size = self.size + (2 if self._rng.random_bool(self._outer_size_margin_prob) else 0)
        outer_circ = 0.0 if self._rng.random_bool(self._outer_circularity_prob) else self.circularity
        self.outer_kernel = build_kernel(outer_size, outer_circ)
        logger.debug("kernel size=%d circ=%.2f outer size=%d circ=%.2f",
                     self.size, self.circularity, outer_size, outer_circ)
