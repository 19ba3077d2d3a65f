import random
from typing import List, Optional, Sequence, Tuple

from .base import City, Tour
from .individual import Individual, build_individual, random_route


ParentPair = Tuple[Individual, Individual]


def select_parents(
    pool: Sequence[Individual], cities: Sequence[City], rng: random.Random
) -> List[ParentPair]:
    """
    Pair the pool up in order: (pool[0], pool[1]), (pool[2], pool[3]), ...
    A leftover individual gets a freshly generated random partner.
    """
    pairs: List[ParentPair] = []
    for i in range(0, len(pool), 2):
        if i + 1 < len(pool):
            pairs.append((pool[i], pool[i + 1]))
        else:
            partner = build_individual(random_route(cities, rng))
            pairs.append((pool[i], partner))
    return pairs


def crossover(
    parent_1: Individual, parent_2: Individual, rng: random.Random, cut: Optional[int] = None
) -> Individual:
    """
    Ordered crossover: the first ``cut`` cities of parent_1, followed by the
    cities of parent_2 not already taken, in parent_2's order.
    """
    if cut is None:
        cut = rng.randrange(len(parent_1.route)) if parent_1.route else 0
    head = parent_1.route[:cut]
    taken = {city.name for city in head}
    tail = tuple(city for city in parent_2.route if city.name not in taken)
    return build_individual(head + tail)


def crossover_population(
    pool: Sequence[Individual], cities: Sequence[City], rng: random.Random, size: Optional[int] = None
) -> List[Individual]:
    # Each pair breeds both ways so the next generation keeps the pool's size.
    if size is None:
        size = len(pool)
    children: List[Individual] = []
    for parent_1, parent_2 in select_parents(pool, cities, rng):
        children.append(crossover(parent_1, parent_2, rng))
        children.append(crossover(parent_2, parent_1, rng))
    return children[:size]


def swap_cities(route: Sequence[City], i: int, j: int) -> Tour:
    swapped = list(route)
    swapped[i], swapped[j] = swapped[j], swapped[i]
    return tuple(swapped)


def mutate(individual: Individual, mutation_rate: float, rng: random.Random) -> Individual:
    """
    Visit every position once; with probability ``mutation_rate`` swap it
    with a randomly drawn position. Swaps accumulate and may cancel out.
    """
    route = individual.route
    n = len(route)
    swapped = False
    for i in range(n):
        if rng.random() < mutation_rate:
            route = swap_cities(route, i, rng.randrange(n))
            swapped = True
    if not swapped:
        return individual
    return build_individual(route)


def mutate_population(
    population: Sequence[Individual], mutation_rate: float, rng: random.Random
) -> List[Individual]:
    return [mutate(ind, mutation_rate, rng) for ind in population]
