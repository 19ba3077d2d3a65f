import argparse
import time
from pathlib import Path

from salesman_ga.data import (
    DEFAULT_CITIES,
    HISTORY_FILES,
    HISTORY_ROOT,
    load_cities,
    load_historical_data,
    save_historical_data,
)
from salesman_ga.evaluation import audit_population, population_stats, reference_length
from salesman_ga.evolutionary import EvolutionConfig, RunResult, genetic_algorithm


def log(msg: str) -> None:
    ts = time.strftime("%H:%M:%S")
    print(f"[{ts}] {msg}", flush=True)


def progress_logger(every: int, generations: int):
    def on_generation(generation: int, best_distance: float, best_fitness: float) -> None:
        if generation == 1 or generation == generations or (every > 0 and generation % every == 0):
            log(f"gen {generation}: best distance={best_distance:.2f} fitness={best_fitness:.3e}")

    return on_generation


def save_history(result: RunResult, root: Path) -> None:
    series = (result.history_best_distance, result.history_gen_distance, result.history_gen_fitness)
    for name, data in zip(HISTORY_FILES, series):
        save_historical_data(name, data, root)


def run(args) -> None:
    t0 = time.perf_counter()
    if args.tsp:
        log(f"loading cities from {args.tsp}")
        cities = load_cities(Path(args.tsp))
    else:
        cities = DEFAULT_CITIES
    cfg = EvolutionConfig(
        generations=args.generations,
        population_size=args.population_size,
        elitism_size=args.elitism_size,
        mutation_rate=args.mutation_rate,
        normalization=args.normalization,
        carry_best=not args.no_carry_best,
        random_seed=args.seed,
    )
    log(f"using {len(cities)} cities, config={cfg}")
    log("Start Genetic Algorithm")
    result = genetic_algorithm(cities, cfg, on_generation=progress_logger(args.log_every, cfg.generations))
    t_run = time.perf_counter()
    log(f"ran {cfg.generations} generations in {t_run - t0:.2f}s")

    if not args.no_save:
        output = Path(args.output)
        save_history(result, output)
        log(f"history appended to {output}")

    stale = audit_population(result.final_population, cities)
    if stale:
        log(f"audit: {len(stale)} individuals disagree with their routes: {stale}")

    best = result.global_best
    stats = population_stats(result.final_population)
    print(f"Lowest Distance: {best.total_distance}")
    print(f"Best Route: {' '.join(best.names)}")
    print(f"Best Fitness: {best.fitness}")
    print(
        f"Final population: best={stats['best']:.2f} mean={stats['mean']:.2f} "
        f"worst={stats['worst']:.2f} std={stats['std']:.2f}"
    )
    reference = reference_length(cities)
    print(f"Christofides reference: {reference:.2f} (gap {result.gap(reference):+.2%})")


def history(args) -> None:
    root = Path(args.output)
    if not root.exists():
        print(f"No history found in {root}; run `salesman-ga run` first.")
        return
    for name in HISTORY_FILES:
        values = load_historical_data(name, root)
        if values.size == 0:
            print(f"{name}: empty")
            continue
        print(f"{name}: entries={values.size} last={values[-1]:.6g} min={values.min():.6g}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Travelling salesman genetic algorithm")
    subparsers = parser.add_subparsers(dest="command", required=True)

    defaults = EvolutionConfig()
    run_parser = subparsers.add_parser("run", help="Evolve a route for the given cities")
    run_parser.add_argument("--tsp", default=None, help="TSPLIB .tsp file; defaults to the built-in 25 cities")
    run_parser.add_argument("--generations", type=int, default=defaults.generations)
    run_parser.add_argument("--population-size", type=int, default=defaults.population_size)
    run_parser.add_argument("--elitism-size", type=int, default=defaults.elitism_size)
    run_parser.add_argument("--mutation-rate", type=float, default=defaults.mutation_rate)
    run_parser.add_argument("--normalization", choices=["max", "sum"], default=defaults.normalization)
    run_parser.add_argument("--no-carry-best", action="store_true")
    run_parser.add_argument("--seed", type=int, default=None)
    run_parser.add_argument("--output", default=str(HISTORY_ROOT))
    run_parser.add_argument("--log-every", type=int, default=100)
    run_parser.add_argument("--no-save", action="store_true")
    run_parser.set_defaults(func=run)

    history_parser = subparsers.add_parser("history", help="Summarize saved run history")
    history_parser.add_argument("--output", default=str(HISTORY_ROOT))
    history_parser.set_defaults(func=history)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
