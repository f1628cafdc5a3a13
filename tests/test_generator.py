from dataclasses import replace

import numpy as np
import pytest

from goresgen.config import (
    ConfigurationError, KernelCircularityConfig, KernelSizeConfig, MapGenerationConfig,
    MapLayoutConfig,
)
from goresgen.mapgen.generator import MapGenerator, generate_map
from goresgen.tiles import BlockType

POINT_KERNEL = (KernelSizeConfig(1, 1.0, (KernelCircularityConfig(1.0, 1.0),)),)
CORNER = MapLayoutConfig("corner", ((9, 9),))


def diagonal_config(seed):
    return MapGenerationConfig(
        map_width=10, map_height=10, seed=seed, init_position=(0, 0),
        init_kernel_size=1, init_kernel_circularity=1.0, kernel_config=POINT_KERNEL,
        enable_tunnel_mode=False, best_move_probability=0.9,
    )


def run_steps(config, layout, n):
    gen = MapGenerator(config, layout)
    for _ in range(n):
        gen.step()
    return gen


def test_walk_to_corner_seed_one_path():
    a = run_steps(diagonal_config(1), CORNER, 20)
    b = run_steps(diagonal_config(1), CORNER, 20)
    assert a.walker.history == b.walker.history
    assert np.array_equal(a.grid.cells, b.grid.cells)
    assert a.walker.history[0] == (0, 0)
    assert a.walker.history[:19] == [
        (0, 0), (0, 1), (1, 1), (1, 2), (2, 2), (2, 3), (3, 3), (4, 3), (4, 4), (5, 4),
        (5, 5), (6, 5), (6, 6), (6, 7), (7, 7), (7, 8), (8, 8), (8, 9), (9, 9),
    ]
    assert a.is_finished
    assert all(a.grid.get(i, i) == BlockType.EMPTY for i in range(1, 10))


def test_walk_to_corner_usually_arrives():
    arrived = 0
    for seed in range(1, 21):
        gen = run_steps(diagonal_config(seed), CORNER, 20)
        if gen.is_finished:
            arrived += 1
            assert (9, 9) in gen.walker.history
        # every visited interior cell was carved
        for x, y in gen.walker.history:
            if 0 < x < 10 and 0 < y < 10:
                assert gen.grid.get(x, y) == BlockType.EMPTY
        assert (gen.grid.cells[0, :] == BlockType.SOLID).all()
    assert arrived >= 15


def test_finished_latches():
    layout = MapLayoutConfig("t", ((1, 0),))
    config = MapGenerationConfig(
        map_width=10, map_height=10, init_position=(0, 0), init_kernel_size=1,
        kernel_config=POINT_KERNEL, enable_tunnel_mode=False, best_move_probability=1.0,
    )
    gen = MapGenerator(config, layout)
    assert not gen.is_finished
    gen.step()
    assert gen.walker.position == (1, 0)
    assert gen.is_finished
    for _ in range(5):
        gen.step()
    assert gen.is_finished


def test_bad_config_fails_before_generation():
    bad = (KernelSizeConfig(3, 0.5, (KernelCircularityConfig(1.0, 1.0),)),)
    with pytest.raises(ConfigurationError):
        MapGenerationConfig(kernel_config=bad)
    with pytest.raises(ConfigurationError):
        MapLayoutConfig("empty", ())


def test_generate_map_stops_at_budget():
    config = MapGenerationConfig(map_width=60, map_height=40, init_position=(5, 5),
                                 max_iterations=50, seed=8)
    ticks = []
    gen = generate_map(config, MapLayoutConfig("far", ((55, 35),)), iterations_per_update=7,
                       on_update=lambda g: ticks.append(g.step_count))
    assert gen.step_count == 51
    assert ticks == [7, 14, 21, 28, 35, 42, 49, 51]
    assert gen.grid.count(BlockType.SOLID) == 0


def test_generate_map_stops_when_finished():
    config = replace(diagonal_config(1), best_move_probability=1.0)
    gen = generate_map(config, CORNER, iterations_per_update=5)
    assert gen.is_finished
    assert gen.step_count == 18


def test_same_seed_same_map():
    config = MapGenerationConfig(
        map_width=80, map_height=50, init_position=(10, 10), seed=2024,
        generate_platforms=True, platform_min_distance=40, tunnel_probability=0.05,
        pre_distance_noise=0.5, max_iterations=3000,
    )
    layout = MapLayoutConfig("loop", ((70, 10), (70, 40), (10, 40)))
    a = generate_map(config, layout)
    b = generate_map(config, layout)
    assert np.array_equal(a.grid.cells, b.grid.cells)
    assert a.map_name == "default_loop_2024"


def test_preview_does_not_disturb_the_run():
    config = MapGenerationConfig(map_width=60, map_height=40, init_position=(5, 5),
                                 seed=5, pre_distance_noise=0.5)
    layout = MapLayoutConfig("t", ((50, 30),))
    a = run_steps(config, layout, 150)
    b = run_steps(config, layout, 150)
    carved = a.grid.cells.copy()
    preview = a.preview()
    assert np.array_equal(a.grid.cells, carved)
    assert preview.count(BlockType.SOLID) == 0
    a.on_finish()
    b.on_finish()
    assert np.array_equal(a.grid.cells, b.grid.cells)
