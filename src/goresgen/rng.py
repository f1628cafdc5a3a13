# src/goresgen/rng.py
# Per-run random stream. Every random draw of a generation run goes through one
# RandomGenerator so a seed + config reproduces the same map.

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence, TypeVar

import numpy as np

T = TypeVar("T")

FLOAT_TOLERANCE = 1e-5


def float_equal(a: float, b: float, tol: float = FLOAT_TOLERANCE) -> bool:
    return math.isclose(a, b, rel_tol=0.0, abs_tol=tol)


def geometric_distribution(k: int, p: float) -> float:
    """P(first success on trial k) = p * (1-p)^(k-1), k >= 1."""
    return p * (1.0 - p) ** (k - 1)


@dataclass
class RandomGenerator:
    seed: int
    _gen: np.random.Generator = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._gen = np.random.default_rng(self.seed)

    def random(self) -> float:
        return float(self._gen.random())

    def random_bool(self, probability: float) -> bool:
        return self.random() < probability

    def random_choice(self, values: Sequence[T]) -> T:
        if len(values) == 0:
            raise ValueError("Cannot choose from an empty sequence")
        return values[int(self._gen.integers(len(values)))]

    def roulette_select(self, values: Sequence[T], weights: Sequence[float]) -> T:
        """
        Weighted pick. Weights need not sum to 1; one uniform draw is spent
        per call, scaled by the total weight.
        """
        if len(values) == 0:
            raise ValueError("Cannot select from an empty sequence")
        if len(values) != len(weights):
            raise ValueError(
                f"Got {len(values)} values but {len(weights)} weights"
            )
        cumulative = np.cumsum(np.asarray(weights, dtype=float))
        total = cumulative[-1]
        if not total > 0:
            raise ValueError("Roulette weights must have a positive sum")
        r = self.random() * total
        idx = int(np.searchsorted(cumulative, r, side="right"))
        # r == total can only happen through float rounding
        return values[min(idx, len(values) - 1)]

    def pick_random_move(self, moves: Sequence[T], probabilities: Sequence[float]) -> T:
        return self.roulette_select(moves, probabilities)

    def uniform(self, low: float, high: float, shape) -> np.ndarray:
        return self._gen.uniform(low, high, size=shape)

    def spawn(self) -> "RandomGenerator":
        """
        Independent child stream. Spawning does not advance this stream, so
        side computations (previews) never change the main run's output.
        """
        child = RandomGenerator.__new__(RandomGenerator)
        child.seed = self.seed
        child._gen = self._gen.spawn(1)[0]
        return child


def generate_seeds(count: int, master_seed: int = 42) -> list:
    """Seeds for successive unlocked runs, drawn from one seed generator."""
    gen = np.random.default_rng(master_seed)
    return [int(s) for s in gen.integers(0, 2**31 - 1, size=count)]
