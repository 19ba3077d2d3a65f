import random
from dataclasses import dataclass, field
from typing import List, Sequence

from .base import City, Tour, fitness, route_names, tour_length


@dataclass(frozen=True)
class Individual:
    """
    A scored tour. ``total_distance`` and ``fitness`` are computed from the
    route on construction and cannot be set independently.
    """

    route: Tour
    normalized_fitness: float = 0.0
    total_distance: float = field(init=False)
    fitness: float = field(init=False)

    def __post_init__(self):
        if not isinstance(self.route, tuple):
            object.__setattr__(self, "route", tuple(self.route))
        dist = tour_length(self.route)
        object.__setattr__(self, "total_distance", dist)
        object.__setattr__(self, "fitness", fitness(dist))

    @property
    def names(self) -> List[str]:
        return route_names(self.route)

    @property
    def signature(self) -> str:
        return "-".join(self.names)


def random_route(cities: Sequence[City], rng: random.Random) -> Tour:
    route = list(cities)
    rng.shuffle(route)
    return tuple(route)


def build_individual(route: Sequence[City]) -> Individual:
    return Individual(route=tuple(route))


def initial_population(size: int, cities: Sequence[City], rng: random.Random) -> List[Individual]:
    return [build_individual(random_route(cities, rng)) for _ in range(size)]
