import math
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from .data import validate_cities
from .evaluation import NORMALIZATION_METHODS, normalize_population
from .tour.base import City
from .tour.individual import Individual, initial_population
from .tour.operators import crossover_population, mutate_population


ProgressCallback = Callable[[int, float, float], None]


@dataclass
class EvolutionConfig:
    generations: int = 5000
    population_size: int = 100
    elitism_size: int = 20
    mutation_rate: float = 0.1
    normalization: str = "max"
    carry_best: bool = True
    random_seed: Optional[int] = None

    def validate(self) -> None:
        if self.generations < 1:
            raise ValueError(f"generations must be positive, got {self.generations}")
        if self.population_size < 1:
            raise ValueError(f"population_size must be positive, got {self.population_size}")
        if not 0 <= self.elitism_size <= self.population_size:
            raise ValueError(
                f"elitism_size must be within [0, {self.population_size}], got {self.elitism_size}"
            )
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ValueError(f"mutation_rate must be within [0, 1], got {self.mutation_rate}")
        if self.normalization not in NORMALIZATION_METHODS:
            raise ValueError(
                f"normalization must be one of {NORMALIZATION_METHODS}, got {self.normalization!r}"
            )


def pick_one(population: Sequence[Individual], rng: random.Random) -> Individual:
    """
    Roulette draw: keep the individuals whose normalized fitness beats a
    uniform threshold and choose among them. Falls back to the whole
    population when nobody clears the threshold.
    """
    r = rng.random()
    candidates = [ind for ind in population if ind.normalized_fitness > r]
    return rng.choice(candidates or list(population))


def selection(
    population: Sequence[Individual], population_size: int, elitism_size: int, rng: random.Random
) -> List[Individual]:
    ranked = sorted(population, key=lambda ind: ind.fitness, reverse=True)
    elites = ranked[:elitism_size]
    rest = [pick_one(population, rng) for _ in range(population_size - len(elites))]
    return elites + rest


@dataclass
class History:
    best_distance: List[float] = field(default_factory=list)
    generation_distance: List[float] = field(default_factory=list)
    generation_fitness: List[float] = field(default_factory=list)

    def append(self, best_distance: float, generation_distance: float, generation_fitness: float) -> None:
        self.best_distance.append(best_distance)
        self.generation_distance.append(generation_distance)
        self.generation_fitness.append(generation_fitness)

    def __len__(self) -> int:
        return len(self.best_distance)


@dataclass
class RunResult:
    final_population: List[Individual]
    global_best: Individual
    history_best_distance: List[float]
    history_gen_distance: List[float]
    history_gen_fitness: List[float]

    @property
    def best_route_names(self) -> List[str]:
        return self.global_best.names

    def gap(self, reference: Optional[float]) -> float:
        if reference is None or math.isclose(reference, 0.0):
            return float("inf")
        return (self.global_best.total_distance - reference) / reference


class GeneticAlgorithm:
    def __init__(
        self,
        config: EvolutionConfig,
        cities: Sequence[City],
        rng: random.Random = None,
        population: Sequence[Individual] = None,
    ):
        config.validate()
        validate_cities(cities)
        self.cfg = config
        self.cities = tuple(cities)
        self.rng = rng or random.Random(config.random_seed)
        if population is None:
            population = initial_population(config.population_size, self.cities, self.rng)
        if len(population) != config.population_size:
            raise ValueError(
                f"population has {len(population)} individuals, expected {config.population_size}"
            )
        names = {c.name for c in self.cities}
        for ind in population:
            if len(ind.route) != len(names) or set(ind.names) != names:
                raise ValueError(f"route {ind.names} is not a permutation of the input cities")
        self.population: List[Individual] = list(population)
        self.generation = 0
        self.global_best: Optional[Individual] = None
        self.history = History()

    @property
    def done(self) -> bool:
        return self.generation >= self.cfg.generations

    def evaluate(self) -> Individual:
        """Score the current population and record one history entry."""
        self.generation += 1
        gen_best = max(self.population, key=lambda ind: ind.fitness)
        if self.global_best is None or gen_best.fitness > self.global_best.fitness:
            self.global_best = gen_best
        self.history.append(self.global_best.total_distance, gen_best.total_distance, gen_best.fitness)
        self.population = normalize_population(self.population, self.cfg.normalization)
        return gen_best

    def breed(self) -> List[Individual]:
        pool_input = list(self.population)
        if self.cfg.carry_best and all(ind.route != self.global_best.route for ind in pool_input):
            pool_input.append(self.global_best)
        pool_input = normalize_population(pool_input, self.cfg.normalization)
        pool = selection(pool_input, self.cfg.population_size, self.cfg.elitism_size, self.rng)
        children = crossover_population(pool, self.cities, self.rng, self.cfg.population_size)
        return mutate_population(children, self.cfg.mutation_rate, self.rng)

    def step(self, on_generation: ProgressCallback = None) -> None:
        if self.done:
            return
        self.evaluate()
        if on_generation:
            on_generation(self.generation, self.global_best.total_distance, self.global_best.fitness)
        if not self.done:
            self.population = self.breed()

    def run(self, on_generation: ProgressCallback = None) -> RunResult:
        while not self.done:
            self.step(on_generation)
        return self.result()

    def result(self) -> RunResult:
        return RunResult(
            final_population=list(self.population),
            global_best=self.global_best,
            history_best_distance=list(self.history.best_distance),
            history_gen_distance=list(self.history.generation_distance),
            history_gen_fitness=list(self.history.generation_fitness),
        )


def genetic_algorithm(
    cities: Sequence[City],
    config: EvolutionConfig = None,
    rng: random.Random = None,
    on_generation: ProgressCallback = None,
    population: Sequence[Individual] = None,
) -> RunResult:
    """
    Convenience wrapper: build a GeneticAlgorithm and run it to completion.
    """
    ga = GeneticAlgorithm(config or EvolutionConfig(), cities, rng=rng, population=population)
    return ga.run(on_generation)
