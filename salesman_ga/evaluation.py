from dataclasses import replace
from typing import Dict, List, Optional, Sequence

import networkx as nx
import numpy as np
import torch

from .tour.base import City, Tour, distance, fitness, tour_length
from .tour.individual import Individual

__all__ = [
    "NORMALIZATION_METHODS",
    "fitness",
    "normalize_fitness",
    "normalize_population",
    "distance_matrix",
    "batch_tour_lengths",
    "audit_population",
    "population_stats",
    "city_graph",
    "reference_tour",
    "reference_length",
]


NORMALIZATION_METHODS = ("max", "sum")


def _normalizer(population: Sequence[Individual], method: str) -> float:
    if method == "max":
        return max(ind.fitness for ind in population)
    if method == "sum":
        return sum(ind.fitness for ind in population)
    raise ValueError(f"Unknown normalization method {method!r}; expected one of {NORMALIZATION_METHODS}")


def _normalized(value: float, denom: float, method: str, size: int) -> float:
    if denom > 0:
        return value / denom
    # Every fitness underflowed to zero: treat the whole population as tied.
    return 1.0 if method == "max" else 1.0 / size


def normalize_fitness(individual: Individual, population: Sequence[Individual], method: str = "max") -> float:
    """
    Fitness of ``individual`` relative to ``population``.

    With ``"max"`` the fittest individual (or every tied one) gets 1.0.
    With ``"sum"`` the values over the population add up to 1.0.
    """
    denom = _normalizer(population, method)
    return _normalized(individual.fitness, denom, method, len(population))


def normalize_population(population: Sequence[Individual], method: str = "max") -> List[Individual]:
    denom = _normalizer(population, method)
    return [
        replace(ind, normalized_fitness=_normalized(ind.fitness, denom, method, len(population)))
        for ind in population
    ]


def distance_matrix(cities: Sequence[City]) -> np.ndarray:
    coords = np.array([[c.x, c.y] for c in cities], dtype=np.float64)
    diff = coords[:, None, :] - coords[None, :, :]
    return np.sqrt((diff ** 2).sum(axis=-1))


def batch_tour_lengths(dist: torch.Tensor, tours: torch.Tensor) -> torch.Tensor:
    # tours: [P, N] long tensor of city indices on the same device as dist
    return dist[tours, tours.roll(-1, dims=1)].sum(dim=1)


def _default_device() -> torch.device:
    return torch.device("cuda:0") if torch.cuda.is_available() else torch.device("cpu")


def audit_population(
    population: Sequence[Individual],
    cities: Sequence[City],
    device: Optional[torch.device] = None,
) -> List[int]:
    """
    Return the indices of individuals that are not a permutation of
    ``cities`` or whose cached distance disagrees with a fresh computation.
    """
    device = device or _default_device()
    index = {c.name: i for i, c in enumerate(cities)}
    bad: List[int] = []
    checked: List[int] = []
    rows: List[List[int]] = []
    for i, ind in enumerate(population):
        names = [c.name for c in ind.route]
        if len(names) != len(index) or set(names) != set(index):
            bad.append(i)
            continue
        checked.append(i)
        rows.append([index[n] for n in names])
    if rows:
        dist = torch.as_tensor(distance_matrix(cities), dtype=torch.float64, device=device)
        tours = torch.tensor(rows, dtype=torch.long, device=device)
        lengths = batch_tour_lengths(dist, tours)
        cached = torch.tensor(
            [population[i].total_distance for i in checked], dtype=torch.float64, device=device
        )
        stale = ~torch.isclose(lengths, cached, rtol=1e-6, atol=1e-6)
        bad.extend(checked[k] for k in torch.nonzero(stale).flatten().tolist())
    return sorted(bad)


def population_stats(population: Sequence[Individual]) -> Dict[str, float]:
    if not population:
        return {"best": float("inf"), "mean": float("inf"), "worst": float("inf"), "std": 0.0}
    lengths = np.array([ind.total_distance for ind in population], dtype=np.float64)
    return {
        "best": float(lengths.min()),
        "mean": float(lengths.mean()),
        "worst": float(lengths.max()),
        "std": float(lengths.std()),
    }


def city_graph(cities: Sequence[City]) -> nx.Graph:
    graph = nx.Graph()
    graph.add_nodes_from(cities)
    for i, a in enumerate(cities):
        for b in cities[i + 1 :]:
            graph.add_edge(a, b, weight=distance(a, b))
    return graph


def reference_tour(cities: Sequence[City]) -> Tour:
    """Christofides approximation, used as a yardstick for GA results."""
    if len(cities) < 4:
        return tuple(cities)
    cycle = nx.approximation.traveling_salesman_problem(city_graph(cities), weight="weight", cycle=True)
    return tuple(cycle[:-1])


def reference_length(cities: Sequence[City]) -> float:
    return tour_length(reference_tour(cities))
