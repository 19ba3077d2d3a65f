"""Tests for parent pairing, crossover and mutation."""

import random

import pytest

from salesman_ga.data import DEFAULT_CITIES
from salesman_ga.tour import (
    City,
    build_individual,
    crossover,
    crossover_population,
    initial_population,
    mutate,
    mutate_population,
    random_route,
    select_parents,
    swap_cities,
)


@pytest.fixture
def five_cities():
    """Five cities on a line, named A to E."""
    return [City(name, float(i), 0.0) for i, name in enumerate("ABCDE")]


def _is_permutation(individual, cities):
    return sorted(individual.names) == sorted(c.name for c in cities) and len(individual.route) == len(cities)


def test_crossover_head_then_parent2_order(five_cities):
    """Test the child keeps parent 1's head and parent 2's order for the rest."""
    parent_1 = build_individual(five_cities)
    parent_2 = build_individual(five_cities[::-1])
    child = crossover(parent_1, parent_2, random.Random(0), cut=2)
    assert child.names == ["A", "B", "E", "D", "C"]


def test_crossover_cut_zero_copies_parent2(five_cities):
    """Test an empty head yields parent 2's route."""
    parent_1 = build_individual(five_cities)
    parent_2 = build_individual(five_cities[::-1])
    child = crossover(parent_1, parent_2, random.Random(0), cut=0)
    assert child.names == parent_2.names


def test_crossover_rescores_child(five_cities):
    """Test the child's cached distance matches its own route."""
    rng = random.Random(2)
    parent_1 = build_individual(random_route(five_cities, rng))
    parent_2 = build_individual(random_route(five_cities, rng))
    child = crossover(parent_1, parent_2, rng)
    assert child.total_distance == pytest.approx(build_individual(child.route).total_distance)


def test_crossover_preserves_permutation():
    """Test random parents and cut points always yield each city exactly once."""
    rng = random.Random(42)
    for _ in range(200):
        parent_1 = build_individual(random_route(DEFAULT_CITIES, rng))
        parent_2 = build_individual(random_route(DEFAULT_CITIES, rng))
        child = crossover(parent_1, parent_2, rng)
        assert _is_permutation(child, DEFAULT_CITIES)


def test_crossover_single_city():
    """Test crossover on a one-city tour."""
    city = City("A", 1.0, 2.0)
    parent = build_individual([city])
    child = crossover(parent, parent, random.Random(0))
    assert child.names == ["A"]
    assert child.total_distance == 0.0


def test_select_parents_even_pool(five_cities):
    """Test an even pool is split into consecutive pairs."""
    pool = initial_population(4, five_cities, random.Random(1))
    pairs = select_parents(pool, five_cities, random.Random(1))
    assert pairs == [(pool[0], pool[1]), (pool[2], pool[3])]


def test_select_parents_odd_pool_gets_random_partner(five_cities):
    """Test the leftover individual is paired with a fresh random individual."""
    pool = initial_population(3, five_cities, random.Random(1))
    pairs = select_parents(pool, five_cities, random.Random(1))
    assert len(pairs) == 2
    last, partner = pairs[-1]
    assert last is pool[2]
    assert all(partner is not ind for ind in pool)
    assert _is_permutation(partner, five_cities)


@pytest.mark.parametrize("size", [1, 2, 7, 10])
def test_crossover_population_keeps_size(size):
    """Test breeding a pool keeps the population size."""
    rng = random.Random(size)
    pool = initial_population(size, DEFAULT_CITIES, rng)
    children = crossover_population(pool, DEFAULT_CITIES, rng)
    assert len(children) == size
    assert all(_is_permutation(child, DEFAULT_CITIES) for child in children)


def test_swap_cities(five_cities):
    """Test swapping two positions returns a new tuple."""
    swapped = swap_cities(five_cities, 0, 3)
    assert [c.name for c in swapped] == ["D", "B", "C", "A", "E"]
    assert [c.name for c in five_cities] == ["A", "B", "C", "D", "E"]


def test_mutate_zero_rate_leaves_individual_unchanged():
    """Test no swaps happen when the mutation rate is zero."""
    rng = random.Random(9)
    population = initial_population(20, DEFAULT_CITIES, rng)
    mutated = mutate_population(population, 0.0, rng)
    for before, after in zip(population, mutated):
        assert after.route == before.route
        assert after.total_distance == before.total_distance
        assert after.fitness == before.fitness


def test_mutate_full_rate_preserves_permutation():
    """Test heavy mutation still yields valid tours with fresh scores."""
    rng = random.Random(4)
    population = initial_population(20, DEFAULT_CITIES, rng)
    changed = 0
    for ind in population:
        mutated = mutate(ind, 1.0, rng)
        assert _is_permutation(mutated, DEFAULT_CITIES)
        assert mutated.total_distance == pytest.approx(build_individual(mutated.route).total_distance)
        changed += mutated.route != ind.route
    assert changed > 0


def test_mutate_applies_swaps_in_draw_order():
    """Test mutation equals replaying its random draws through swap_cities."""
    ind = build_individual(random_route(DEFAULT_CITIES, random.Random(10)))
    rate = 0.3
    mutated = mutate(ind, rate, random.Random(99))
    replay = random.Random(99)
    expected = ind.route
    for i in range(len(expected)):
        if replay.random() < rate:
            expected = swap_cities(expected, i, replay.randrange(len(expected)))
    assert mutated.route == expected
    assert mutated.total_distance == pytest.approx(build_individual(expected).total_distance)


def test_mutate_does_not_touch_parent():
    """Test mutation builds a new individual rather than editing the input."""
    rng = random.Random(6)
    ind = build_individual(random_route(DEFAULT_CITIES, rng))
    route_before = ind.route
    mutate(ind, 1.0, rng)
    assert ind.route == route_before
