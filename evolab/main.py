import argparse
import logging
import os
import random
import sys

from evolab.config import (
    CityLayout, GAConfig, SelectionMethod, CROSSOVER_PROBABILITY, MUTATION_PROBABILITY, REPORT_EVERY,
)
from evolab.engine import EvolutionEngine
from evolab.errors import EvolabError
from evolab.experiments import DEFAULT_KNAPSACK_SUITE, knapsack_case, print_comparison_table, run_suite
from evolab.problems import KnapsackProblem, TSPProblem
from evolab.reporting import plot_fitness_history, print_best_individual


def build_parser():
    parser = argparse.ArgumentParser(description="Evolve knapsack selections or salesman tours")
    parser.add_argument("problem", choices=["knapsack", "tsp", "suite"], help="Problem to solve, or the knapsack batch suite")
    parser.add_argument("--population", type=int, default=None, help="Population size")
    parser.add_argument("--length", type=int, default=None, help="Number of items (knapsack) or cities (tsp)")
    parser.add_argument("--crossover", type=float, default=CROSSOVER_PROBABILITY, help="Crossover probability")
    parser.add_argument("--mutation", type=float, default=MUTATION_PROBABILITY, help="Mutation probability")
    parser.add_argument("--generations", type=int, default=None, help="Number of generations")
    parser.add_argument("--selection", choices=SelectionMethod.ALL, default=SelectionMethod.TOURNAMENT,
                        help="Parent selection policy")
    parser.add_argument("--tournament-size", type=int, default=None, help="Tournament size")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--workers", type=int, default=1, help="Processes for fitness evaluation")
    parser.add_argument("--report-every", type=int, default=REPORT_EVERY, help="Log progress every N generations")
    parser.add_argument("--stagnation", type=int, default=None, help="Stop after N generations without improvement")
    parser.add_argument("--target", type=float, default=None, help="Stop once this fitness is reached")
    parser.add_argument("--layout", choices=CityLayout.ALL, default=CityLayout.CIRCLE, help="City placement (tsp)")
    parser.add_argument("--city-file", default=None, help="TSPLIB or x,y file for the file layout")
    parser.add_argument("--runs", type=int, default=3, help="Runs per suite case")
    parser.add_argument("--plot", default=None, help="Save the fitness history plot to this path")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser


def build_config(args, factory):
    overrides = dict(
        crossover_probability=args.crossover,
        mutation_probability=args.mutation,
        selection=args.selection,
        seed=args.seed,
        workers=args.workers,
        report_every=args.report_every,
        stagnation_window=args.stagnation,
        target_fitness=args.target,
    )
    for name, value in (("population_size", args.population), ("genotype_length", args.length),
                        ("generations", args.generations), ("tournament_size", args.tournament_size)):
        if value is not None:
            overrides[name] = value
    return factory(**overrides)


def run_single(args):
    rng = random.Random(args.seed)
    if args.problem == "knapsack":
        config = build_config(args, GAConfig.for_knapsack)
        problem = KnapsackProblem.generate(config.genotype_length, rng)
    else:
        if args.layout == CityLayout.FILE:
            problem = TSPProblem.with_layout(args.layout, filename=args.city_file)
            if args.length is None:
                args.length = problem.genotype_length
        config = build_config(args, GAConfig.for_tsp)
        if args.layout != CityLayout.FILE:
            problem = TSPProblem.with_layout(args.layout, config.genotype_length, rng)

    print(config)
    print()
    result = EvolutionEngine(problem, config, rng=rng).run()
    print_best_individual(problem, result.best, result.generations_run)

    if args.plot:
        plot_fitness_history(result.history, args.plot, title=f"{problem.name} - Fitness Evolution")
        print(f"Fitness history saved to: {os.path.abspath(args.plot)}")
    return result


def run_knapsack_suite(args):
    overrides = {"selection": args.selection, "workers": args.workers}
    if args.tournament_size is not None:
        overrides["tournament_size"] = args.tournament_size
    cases = [knapsack_case(*row, **overrides) for row in DEFAULT_KNAPSACK_SUITE]
    base_seed = args.seed if args.seed is not None else 0
    frame = run_suite(cases, runs=args.runs, base_seed=base_seed)
    print_comparison_table(frame)
    return frame


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO),
                        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    try:
        if args.problem == "suite":
            run_knapsack_suite(args)
        else:
            run_single(args)
    except EvolabError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
