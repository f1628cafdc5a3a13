# src/goresgen/mapgen/walker.py
# The carving walker: a two-state machine (wander / tunnel) that picks one
# move per step and stamps the grid with the current kernel.

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Sequence, Tuple, Union

from ..config import MapGenerationConfig
from ..grid import GridMap
from ..rng import RandomGenerator, geometric_distribution
from ..tiles import BlockType
from .kernel import KernelGenerator

logger = logging.getLogger(__name__)

XY = Tuple[int, int]


def axis_moves() -> List[XY]:
    # Same iteration order as the 3x3 scan: x outer, y inner.
    return [(x, y) for x in (-1, 0, 1) for y in (-1, 0, 1)
            if (x, y) != (0, 0) and (x == 0 or y == 0)]


MOVES: Tuple[XY, ...] = tuple(axis_moves())  # (-1,0) (0,-1) (0,1) (1,0)


class WalkerMode(Enum):
    WANDER = "wander"
    TUNNEL = "tunnel"


class WalkerEvent(Enum):
    ENTER_TUNNEL = "enter_tunnel"
    TUNNEL_DONE = "tunnel_done"


TRANSITIONS: Dict[Tuple[WalkerMode, WalkerEvent], WalkerMode] = {
    (WalkerMode.WANDER, WalkerEvent.ENTER_TUNNEL): WalkerMode.TUNNEL,
    (WalkerMode.TUNNEL, WalkerEvent.TUNNEL_DONE): WalkerMode.WANDER,
}


@dataclass(frozen=True)
class WanderState:
    mode = WalkerMode.WANDER


@dataclass
class TunnelState:
    remaining_steps: int
    direction: XY
    mode = WalkerMode.TUNNEL


WalkerState = Union[WanderState, TunnelState]


def distance(a: XY, b: XY) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def ranked_moves(pos: XY, target: XY) -> List[XY]:
    """Axis moves sorted by resulting distance to target; ties keep MOVES order."""
    return sorted(MOVES, key=lambda m: distance((pos[0] + m[0], pos[1] + m[1]), target))


def move_probabilities(count: int, best_move_probability: float) -> List[float]:
    weights = [geometric_distribution(i + 1, best_move_probability) for i in range(count)]
    total = sum(weights)
    return [w / total for w in weights]


class Walker:
    def __init__(
        self,
        config: MapGenerationConfig,
        waypoints: Sequence[XY],
        grid: GridMap,
        kernels: KernelGenerator,
        rng: RandomGenerator,
    ):
        self.config = config
        self.waypoints = [tuple(wp) for wp in waypoints]
        self.grid = grid
        self.kernels = kernels
        self._rng = rng
        self.position: XY = tuple(config.init_position)
        self.target_index = 0
        self.state: WalkerState = WanderState()
        self.history: List[XY] = [self.position]
        self.step_count = 0

    @property
    def mode(self) -> WalkerMode:
        return self.state.mode

    @property
    def target(self) -> XY:
        return self.waypoints[self.target_index]

    def _transition(self, event: WalkerEvent, new_state: WalkerState) -> None:
        nxt = TRANSITIONS.get((self.mode, event))
        if nxt is None or nxt is not new_state.mode:
            raise RuntimeError(f"illegal walker transition {self.mode.value} --{event.value}-->")
        logger.debug("step %d: %s -> %s", self.step_count, self.mode.value, nxt.value)
        self.state = new_state

    def best_move(self) -> XY:
        best, best_dist = (0, 0), math.inf
        for m in MOVES:
            d = distance((self.position[0] + m[0], self.position[1] + m[1]), self.target)
            if d < best_dist:
                best, best_dist = m, d
        return best

    def _step_wander(self) -> XY:
        moves = ranked_moves(self.position, self.target)
        probs = move_probabilities(len(moves), self.config.best_move_probability)
        picked = self._rng.pick_random_move(moves, probs)
        self.kernels.mutate(self.config.kernel_size_change_prob,
                            self.config.kernel_circularity_change_prob)

        if self.config.enable_tunnel_mode and self._rng.random_bool(self.config.tunnel_probability):
            length = self._rng.random_choice(self.config.tunnel_lengths)
            width = self._rng.random_choice(self.config.tunnel_widths)
            self.kernels.force_config(width, 0.0)
            # direction is taken from the position before this step's move
            self._transition(WalkerEvent.ENTER_TUNNEL, TunnelState(length, self.best_move()))
        return picked

    def _step_tunnel(self) -> XY:
        state = self.state
        state.remaining_steps -= 1
        if state.remaining_steps <= 0:
            self._transition(WalkerEvent.TUNNEL_DONE, WanderState())
        return state.direction

    def step(self) -> XY:
        """Advance one move, carve at the new position, return the move taken."""
        if self.mode is WalkerMode.TUNNEL:
            move = self._step_tunnel()
        else:
            move = self._step_wander()

        self.position = (self.position[0] + move[0], self.position[1] + move[1])
        self.history.append(self.position)
        self.grid.stamp(self.position[0], self.position[1], self.kernels.kernel, BlockType.EMPTY)

        if (self.target_index < len(self.waypoints) - 1
                and distance(self.position, self.target) <= self.config.waypoint_reached_distance):
            self.target_index += 1
            logger.debug("step %d: waypoint %d reached, next %s",
                         self.step_count, self.target_index - 1, self.target)

        self.step_count += 1
        return move

    def reached_last_waypoint(self) -> bool:
        return (self.target_index == len(self.waypoints) - 1
                and distance(self.position, self.target) <= self.config.waypoint_reached_distance)
