from .base import City, Tour, distance, fitness, route_names, tour_length
from .individual import Individual, build_individual, initial_population, random_route
from .operators import (
    crossover,
    crossover_population,
    mutate,
    mutate_population,
    select_parents,
    swap_cities,
)

__all__ = [
    "City",
    "Tour",
    "distance",
    "fitness",
    "route_names",
    "tour_length",
    "Individual",
    "build_individual",
    "initial_population",
    "random_route",
    "crossover",
    "crossover_population",
    "mutate",
    "mutate_population",
    "select_parents",
    "swap_cities",
]
