import pytest

from goresgen.rng import RandomGenerator, float_equal, generate_seeds, geometric_distribution


def test_geometric_distribution():
    assert geometric_distribution(1, 0.9) == pytest.approx(0.9)
    assert geometric_distribution(2, 0.9) == pytest.approx(0.09)
    assert geometric_distribution(3, 0.5) == pytest.approx(0.125)


def test_float_equal():
    assert float_equal(0.1 + 0.2 + 0.7, 1.0)
    assert not float_equal(0.99, 1.0)


def test_same_seed_same_stream():
    a, b = RandomGenerator(7), RandomGenerator(7)
    assert [a.random() for _ in range(10)] == [b.random() for _ in range(10)]
    assert [a.random_choice("abcde") for _ in range(10)] == [b.random_choice("abcde") for _ in range(10)]


def test_random_bool_extremes():
    r = RandomGenerator(1)
    assert not any(r.random_bool(0.0) for _ in range(100))
    assert all(r.random_bool(1.0) for _ in range(100))


def test_roulette_select():
    r = RandomGenerator(4)
    assert {r.roulette_select(["a", "b", "c"], [0, 5, 0]) for _ in range(50)} == {"b"}
    # unnormalised weights are fine
    picks = [r.roulette_select([1, 2], [1.0, 3.0]) for _ in range(2000)]
    assert 0.65 < picks.count(2) / len(picks) < 0.85


def test_roulette_select_rejects_bad_input():
    r = RandomGenerator(4)
    with pytest.raises(ValueError):
        r.roulette_select([], [])
    with pytest.raises(ValueError):
        r.roulette_select([1, 2], [1.0])
    with pytest.raises(ValueError):
        r.roulette_select([1, 2], [0.0, 0.0])
    with pytest.raises(ValueError):
        r.random_choice([])


def test_spawn_leaves_parent_stream_alone():
    a, b = RandomGenerator(9), RandomGenerator(9)
    child = a.spawn()
    child.random()
    assert a.random() == b.random()


def test_generate_seeds():
    seeds = generate_seeds(5)
    assert seeds == generate_seeds(5)
    assert len(set(seeds)) == 5
