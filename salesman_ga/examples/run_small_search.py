import random

from salesman_ga.evaluation import reference_length
from salesman_ga.evolutionary import EvolutionConfig, GeneticAlgorithm
from salesman_ga.tour import City


def main():
    # Ten cities on a circle-ish ring; the optimum visits them in order.
    cities = [
        City("A", 0, 0),
        City("B", 10, 0),
        City("C", 20, 5),
        City("D", 25, 15),
        City("E", 20, 25),
        City("F", 10, 30),
        City("G", 0, 30),
        City("H", -10, 25),
        City("I", -15, 15),
        City("J", -10, 5),
    ]
    cfg = EvolutionConfig(generations=200, population_size=60, elitism_size=10, mutation_rate=0.05)
    ga = GeneticAlgorithm(cfg, cities, rng=random.Random(7))
    while not ga.done:
        ga.step()
        if ga.generation % 20 == 0:
            print(f"gen {ga.generation}: best={ga.global_best.total_distance:.2f} route={ga.global_best.signature}")
    reference = reference_length(cities)
    print(f"reference={reference:.2f} gap={ga.result().gap(reference):+.2%}")


if __name__ == "__main__":
    main()
