import math
from dataclasses import dataclass, field
from typing import Sequence, Tuple


@dataclass(frozen=True)
class City:
    """A named point. Two cities are the same city iff their names match."""

    name: str
    x: float = field(compare=False)
    y: float = field(compare=False)


Tour = Tuple[City, ...]


def distance(city_a: City, city_b: City) -> float:
    return math.sqrt((city_a.x - city_b.x) ** 2 + (city_a.y - city_b.y) ** 2)


def tour_length(route: Sequence[City]) -> float:
    n = len(route)
    if n < 2:
        return 0.0
    dist = 0.0
    for i in range(n):
        dist += distance(route[i], route[(i + 1) % n])
    return float(dist)


def fitness(total_distance: float) -> float:
    """
    Steep inverse power of the distance: 1 / (1 + d^8).
    Higher is better; only a zero-length tour reaches 1.0.
    """
    try:
        return 1.0 / (1.0 + total_distance ** 8)
    except OverflowError:
        return 0.0


def route_names(route: Sequence[City]) -> list:
    return [city.name for city in route]
