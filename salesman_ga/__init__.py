"""
Genetic algorithm for the travelling salesman problem: elitist roulette
selection, ordered crossover and swap mutation over a population of tours.
"""

__all__ = [
    "data",
    "evaluation",
    "evolutionary",
    "tour",
]
