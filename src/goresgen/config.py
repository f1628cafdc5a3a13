# src/goresgen/config.py
# Generation settings. Everything is validated once, on construction, so a bad
# table fails before any stepping starts.

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Tuple

from .rng import float_equal

XY = Tuple[int, int]


class ConfigurationError(ValueError):
    """Invalid generation settings. Never recovered internally."""


class DistanceTransformMethod(str, Enum):
    EUCLIDEAN = "euclidean"
    MANHATTAN = "manhattan"
    CHESSBOARD = "chessboard"


@dataclass(frozen=True)
class KernelCircularityConfig:
    circularity: float
    probability: float


@dataclass(frozen=True)
class KernelSizeConfig:
    size: int
    size_probability: float
    circularity_probabilities: Tuple[KernelCircularityConfig, ...]


def validate_kernel_config(table: Tuple[KernelSizeConfig, ...]) -> None:
    if not table:
        raise ConfigurationError("kernel config has no sizes")
    total = sum(c.size_probability for c in table)
    if not float_equal(total, 1.0):
        raise ConfigurationError(f"size probabilities sum to {total}, not 1")
    for size_config in table:
        if size_config.size < 1 or size_config.size % 2 == 0:
            raise ConfigurationError(f"kernel size must be odd and >= 1, got {size_config.size}")
        circs = size_config.circularity_probabilities
        if not circs:
            raise ConfigurationError(f"no circularities for size={size_config.size}")
        total = sum(c.probability for c in circs)
        if not float_equal(total, 1.0):
            raise ConfigurationError(
                f"circularity probabilities sum to {total}, not 1, for size={size_config.size}"
            )
        for c in circs:
            if not 0.0 <= c.circularity <= 1.0:
                raise ConfigurationError(f"circularity {c.circularity} outside [0, 1]")


def _circ(*pairs: Tuple[float, float]) -> Tuple[KernelCircularityConfig, ...]:
    return tuple(KernelCircularityConfig(c, p) for c, p in pairs)


DEFAULT_KERNEL_CONFIG: Tuple[KernelSizeConfig, ...] = (
    KernelSizeConfig(3, 0.25, _circ((0.0, 0.2), (0.5, 0.3), (1.0, 0.5))),
    KernelSizeConfig(5, 0.40, _circ((0.0, 0.1), (0.5, 0.4), (1.0, 0.5))),
    KernelSizeConfig(7, 0.25, _circ((0.3, 0.3), (0.7, 0.3), (1.0, 0.4))),
    KernelSizeConfig(9, 0.10, _circ((0.6, 0.5), (1.0, 0.5))),
)


def _probability(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ConfigurationError(f"{name} must be in [0, 1], got {value}")


@dataclass(frozen=True)
class MapGenerationConfig:
    config_name: str = "default"

    # general map config
    max_iterations: int = 100_000
    map_width: int = 300
    map_height: int = 150
    seed: int = 42
    generate_platforms: bool = False
    enable_tunnel_mode: bool = True

    # initial state
    init_position: XY = (50, 50)
    init_kernel_size: int = 5
    init_kernel_circularity: float = 0.5

    # walker config
    best_move_probability: float = 0.4
    kernel_size_change_prob: float = 0.1
    kernel_circularity_change_prob: float = 0.05
    kernel_outer_size_margin_prob: float = 1.0 / 9.0
    kernel_outer_circularity_prob: float = 0.2
    waypoint_reached_distance: float = 0.0
    kernel_config: Tuple[KernelSizeConfig, ...] = DEFAULT_KERNEL_CONFIG

    # tunnel config
    tunnel_probability: float = 0.01
    tunnel_lengths: Tuple[int, ...] = (5, 10, 15)
    tunnel_widths: Tuple[int, ...] = (3, 5)

    # obstacle config
    distance_transform_method: DistanceTransformMethod = DistanceTransformMethod.EUCLIDEAN
    distance_threshold: float = 3.0
    pre_distance_noise: float = 0.0
    grid_distance: int = 1

    # platform config
    platform_min_distance: int = 1000
    platform_safe_left: int = 4
    platform_safe_top: int = 4
    platform_safe_right: int = 4

    def __post_init__(self) -> None:
        if self.map_width <= 0 or self.map_height <= 0:
            raise ConfigurationError(
                f"map size must be positive, got {self.map_width}x{self.map_height}"
            )
        if self.max_iterations <= 0:
            raise ConfigurationError("max_iterations must be positive")
        if len(self.init_position) != 2:
            raise ConfigurationError(f"malformed init_position {self.init_position!r}")
        if self.init_kernel_size < 1 or self.init_kernel_size % 2 == 0:
            raise ConfigurationError("init_kernel_size must be odd and >= 1")
        _probability("init_kernel_circularity", self.init_kernel_circularity)
        _probability("best_move_probability", self.best_move_probability)
        _probability("kernel_size_change_prob", self.kernel_size_change_prob)
        _probability("kernel_circularity_change_prob", self.kernel_circularity_change_prob)
        _probability("kernel_outer_size_margin_prob", self.kernel_outer_size_margin_prob)
        _probability("kernel_outer_circularity_prob", self.kernel_outer_circularity_prob)
        _probability("tunnel_probability", self.tunnel_probability)
        if self.best_move_probability <= 0.0:
            raise ConfigurationError("best_move_probability must be > 0")
        if self.waypoint_reached_distance < 0:
            raise ConfigurationError("waypoint_reached_distance must be >= 0")
        validate_kernel_config(self.kernel_config)
        if self.enable_tunnel_mode:
            if not self.tunnel_lengths or not self.tunnel_widths:
                raise ConfigurationError("tunnel mode needs tunnel_lengths and tunnel_widths")
            if any(w < 1 or w % 2 == 0 for w in self.tunnel_widths):
                raise ConfigurationError("tunnel widths must be odd and >= 1")
        if self.grid_distance < 1:
            raise ConfigurationError("grid_distance must be >= 1")
        if min(self.platform_safe_left, self.platform_safe_top, self.platform_safe_right) < 0:
            raise ConfigurationError("platform safety margins must be >= 0")
        if self.platform_min_distance < 0:
            raise ConfigurationError("platform_min_distance must be >= 0")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MapGenerationConfig":
        data = dict(data)
        try:
            if "kernel_config" in data:
                data["kernel_config"] = tuple(
                    KernelSizeConfig(
                        size=int(s["size"]),
                        size_probability=float(s["size_probability"]),
                        circularity_probabilities=tuple(
                            KernelCircularityConfig(float(c["circularity"]), float(c["probability"]))
                            for c in s["circularity_probabilities"]
                        ),
                    )
                    for s in data["kernel_config"]
                )
            if "init_position" in data:
                data["init_position"] = tuple(int(v) for v in data["init_position"])
            for key in ("tunnel_lengths", "tunnel_widths"):
                if key in data:
                    data[key] = tuple(int(v) for v in data[key])
            if "distance_transform_method" in data:
                data["distance_transform_method"] = DistanceTransformMethod(
                    data["distance_transform_method"]
                )
            return cls(**data)
        except (KeyError, TypeError, ValueError) as exc:
            if isinstance(exc, ConfigurationError):
                raise
            raise ConfigurationError(f"malformed generation config: {exc}") from exc

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["distance_transform_method"] = self.distance_transform_method.value
        return out


@dataclass(frozen=True)
class MapLayoutConfig:
    layout_name: str
    waypoints: Tuple[XY, ...]

    def __post_init__(self) -> None:
        if not self.waypoints:
            raise ConfigurationError(f"layout {self.layout_name!r} has no waypoints")
        for wp in self.waypoints:
            if len(wp) != 2:
                raise ConfigurationError(f"malformed waypoint {wp!r} in {self.layout_name!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MapLayoutConfig":
        try:
            waypoints = tuple(tuple(int(v) for v in wp) for wp in data["waypoints"])
            return cls(layout_name=str(data.get("layout_name", "default")), waypoints=waypoints)
        except (KeyError, TypeError, ValueError) as exc:
            if isinstance(exc, ConfigurationError):
                raise
            raise ConfigurationError(f"malformed layout: {exc}") from exc

    def to_dict(self) -> Dict[str, Any]:
        return {"layout_name": self.layout_name, "waypoints": [list(wp) for wp in self.waypoints]}


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        loaded = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"{path}: invalid JSON: {exc}") from exc
    if not isinstance(loaded, dict):
        raise ConfigurationError(f"{path}: expected a JSON object")
    return loaded


def load_config(path: Path) -> MapGenerationConfig:
    return MapGenerationConfig.from_dict(_read_json(path))


def load_layout(path: Path) -> MapLayoutConfig:
    return MapLayoutConfig.from_dict(_read_json(path))


def save_config(config: MapGenerationConfig, path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
